# utils/strategic_performance/models.py
"""
Domain records for Strategic Performance

Immutable records consumed read-only by the performance engine:
- Indicator (polarity, calculation mode, semaphore settings)
- Goal (monthly planned / realized values for one indicator-year)
- SemaphoreRule / SemaphoreSettings
- PerformanceResult (engine output)

Plus the strategic map around them (perspectives, objectives, managers)
bundled as StrategicData, the whole stored document.
"""

import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .constants import (
    CALC_MODE_ALIASES,
    DEFAULT_ROLLING_WINDOW,
    EQUALITY_TOLERANCE,
    MONTHS_IN_YEAR,
    NO_DATA_DISPLAY,
    POLARITY_ALIASES,
    SEMAPHORE_OPERATORS,
    TIER_STYLES,
)
from .parsing import parse_cell

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================

class Polarity(str, Enum):
    """Favorable direction of an indicator."""
    HIGHER_BETTER = "higher_better"
    LOWER_BETTER = "lower_better"
    STABLE_BAND = "stable_band"


class CalcMode(str, Enum):
    """How monthly values are aggregated before computing the percentage."""
    ISOLATED = "isolated"
    ACCUMULATED = "accumulated"
    YEAR_TO_DATE = "year_to_date"
    AVERAGE = "average"
    ROLLING = "rolling"


class SemaphoreTier(str, Enum):
    """Four-tier classification plus the no-data state."""
    SURPASS = "surpass"
    ON_TARGET = "on_target"
    ATTENTION = "attention"
    CRITICAL = "critical"
    NO_DATA = "no_data"

    @property
    def label(self) -> str:
        return TIER_STYLES[self.value]["label"]

    @property
    def color(self) -> str:
        return TIER_STYLES[self.value]["color"]

    @property
    def icon(self) -> str:
        return TIER_STYLES[self.value]["icon"]


# Custom rule slot -> tier
RULE_TIERS = {
    "blue": SemaphoreTier.SURPASS,
    "green": SemaphoreTier.ON_TARGET,
    "yellow": SemaphoreTier.ATTENTION,
    "red": SemaphoreTier.CRITICAL,
}


def normalize_polarity(value) -> Polarity:
    """Map stored polarity text (English or Portuguese) to Polarity."""
    if isinstance(value, Polarity):
        return value
    key = str(value or "").strip().lower()
    if not key:
        return Polarity.HIGHER_BETTER
    if key not in POLARITY_ALIASES:
        logger.warning(f"Unknown polarity '{value}', using higher_better")
        return Polarity.HIGHER_BETTER
    return Polarity(POLARITY_ALIASES[key])


def normalize_calc_mode(value) -> CalcMode:
    """Map stored calculation type text to CalcMode."""
    if isinstance(value, CalcMode):
        return value
    key = str(value or "").strip().lower()
    if not key:
        return CalcMode.ISOLATED
    if key not in CALC_MODE_ALIASES:
        logger.warning(f"Unknown calculation mode '{value}', using isolated")
        return CalcMode.ISOLATED
    return CalcMode(CALC_MODE_ALIASES[key])


# =============================================================================
# SEMAPHORE RULES
# =============================================================================

@dataclass(frozen=True)
class SemaphoreRule:
    """Comparison operator plus threshold(s) applied to a percentage."""
    operator: str
    value: float
    value2: Optional[float] = None

    def __post_init__(self):
        if self.operator not in SEMAPHORE_OPERATORS:
            raise ValueError(f"Unsupported semaphore operator: {self.operator!r}")
        if self.operator == "between" and self.value2 is None:
            raise ValueError("'between' rule requires two thresholds")

    def matches(self, percentage: float) -> bool:
        op = self.operator
        if op == "=":
            return abs(percentage - self.value) <= EQUALITY_TOLERANCE
        if op == ">":
            return percentage > self.value
        if op == "<":
            return percentage < self.value
        if op == ">=":
            return percentage >= self.value
        if op == "<=":
            return percentage <= self.value
        low, high = sorted((self.value, self.value2))
        return low <= percentage <= high

    def describe(self) -> str:
        if self.operator == "between":
            return f"entre {self.value:g}% e {self.value2:g}%"
        return f"{self.operator} {self.value:g}%"


@dataclass(frozen=True)
class SemaphoreSettings:
    """Four named rules; any of them may be left unset."""
    blue: Optional[SemaphoreRule] = None
    green: Optional[SemaphoreRule] = None
    yellow: Optional[SemaphoreRule] = None
    red: Optional[SemaphoreRule] = None

    @property
    def is_configured(self) -> bool:
        return any(rule is not None for rule in (self.blue, self.green, self.yellow, self.red))

    def rule_for(self, slot: str) -> Optional[SemaphoreRule]:
        return getattr(self, slot)


# =============================================================================
# STRATEGIC MAP
# =============================================================================

@dataclass(frozen=True)
class Perspective:
    id: str
    name: str


@dataclass(frozen=True)
class Manager:
    id: str
    name: str


@dataclass(frozen=True)
class Objective:
    id: str
    name: str
    perspective_id: str = ""
    manager_id: str = ""


@dataclass(frozen=True)
class Indicator:
    """A measured metric ("ficha técnica") with its calculation settings."""
    id: str
    name: str
    perspective_id: str = ""
    objective_id: str = ""
    manager_id: str = ""
    description: str = ""
    formula: str = ""
    unit: str = ""
    source: str = ""
    periodicity: str = "mensal"
    polarity: Polarity = Polarity.HIGHER_BETTER
    calc_mode: CalcMode = CalcMode.ISOLATED
    rolling_window: int = DEFAULT_ROLLING_WINDOW
    status: str = "draft"
    semaphore: Optional[SemaphoreSettings] = None

    def __post_init__(self):
        object.__setattr__(self, "polarity", normalize_polarity(self.polarity))
        object.__setattr__(self, "calc_mode", normalize_calc_mode(self.calc_mode))
        try:
            window = int(self.rolling_window)
        except (TypeError, ValueError):
            window = DEFAULT_ROLLING_WINDOW
        object.__setattr__(self, "rolling_window", max(1, window))


@dataclass(frozen=True)
class Goal:
    """
    Monthly planned and realized values for one indicator in one year.

    Months are keyed 0 (Jan) .. 11 (Dec). A month mapped to None, or not
    present at all, has no value entered yet; 0.0 is a real zero.
    """
    indicator_id: str
    year: int
    planned: Mapping[int, Optional[float]] = field(default_factory=dict)
    realized: Mapping[int, Optional[float]] = field(default_factory=dict)
    id: str = ""
    locked: bool = False
    history: Tuple[Tuple[int, Optional[float]], ...] = ()

    @classmethod
    def from_strings(
        cls,
        indicator_id: str,
        year: int,
        monthly_values: Sequence = (),
        monthly_realized: Sequence = (),
        goal_id: str = "",
        locked: bool = False,
        history: Iterable[Tuple[int, object]] = (),
    ) -> "Goal":
        """Build a Goal from the stored 12-slot free-text arrays."""
        return cls(
            indicator_id=indicator_id,
            year=int(year),
            planned=_month_map(monthly_values),
            realized=_month_map(monthly_realized),
            id=goal_id,
            locked=bool(locked),
            history=tuple((int(y), parse_cell(v)) for y, v in history),
        )

    def planned_value(self, month_index: int) -> float:
        value = self.planned.get(month_index)
        return 0.0 if value is None else value

    def realized_value(self, month_index: int) -> float:
        value = self.realized.get(month_index)
        return 0.0 if value is None else value

    def has_planned(self, month_index: int) -> bool:
        return self.planned.get(month_index) is not None

    def has_realized(self, month_index: int) -> bool:
        return self.realized.get(month_index) is not None


def _month_map(values: Sequence) -> Dict[int, Optional[float]]:
    values = list(values or [])[:MONTHS_IN_YEAR]
    values += [None] * (MONTHS_IN_YEAR - len(values))
    return {idx: parse_cell(value) for idx, value in enumerate(values)}


@dataclass(frozen=True)
class StrategicData:
    """The whole stored document consumed by reports."""
    perspectives: Tuple[Perspective, ...] = ()
    objectives: Tuple[Objective, ...] = ()
    managers: Tuple[Manager, ...] = ()
    indicators: Tuple[Indicator, ...] = ()
    goals: Tuple[Goal, ...] = ()
    global_semaphore: Optional[SemaphoreSettings] = None
    company_name: str = ""

    def find_goal(self, indicator_id: str, year: int) -> Optional[Goal]:
        for goal in self.goals:
            if goal.indicator_id == indicator_id and goal.year == year:
                return goal
        return None

    def find_indicator(self, indicator_id: str) -> Optional[Indicator]:
        return next((i for i in self.indicators if i.id == indicator_id), None)

    def perspective_name(self, perspective_id: str) -> str:
        return _name_of(self.perspectives, perspective_id)

    def objective_name(self, objective_id: str) -> str:
        return _name_of(self.objectives, objective_id)

    def manager_name(self, manager_id: str) -> str:
        return _name_of(self.managers, manager_id)

    def goal_years(self) -> List[int]:
        return sorted({goal.year for goal in self.goals})


def _name_of(items, item_id: str) -> str:
    for item in items:
        if item.id == item_id:
            return item.name
    return ""


# =============================================================================
# ENGINE OUTPUT
# =============================================================================

@dataclass(frozen=True)
class PerformanceResult:
    """Period performance of one indicator for one reporting month."""
    indicator_id: str
    month_index: int
    target: float
    realized: float
    percentage: float
    tier: SemaphoreTier
    icon: str
    color: str
    target_display: str
    realized_display: str
    percentage_display: str
    months_counted: int
    valid: bool

    @classmethod
    def no_data(cls, indicator_id: str, month_index: int) -> "PerformanceResult":
        tier = SemaphoreTier.NO_DATA
        return cls(
            indicator_id=indicator_id,
            month_index=month_index,
            target=0.0,
            realized=0.0,
            percentage=0.0,
            tier=tier,
            icon=tier.icon,
            color=tier.color,
            target_display=NO_DATA_DISPLAY,
            realized_display=NO_DATA_DISPLAY,
            percentage_display=NO_DATA_DISPLAY,
            months_counted=0,
            valid=False,
        )

    def to_dict(self) -> Dict:
        row = asdict(self)
        row["tier"] = self.tier.value
        return row
