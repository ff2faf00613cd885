# utils/strategic_performance/serializers.py
"""
Document <-> model conversion

The stored document keeps the browser application's camelCase layout:

    {
        "identity": {"companyName": ...},
        "perspectives": [{"id", "name"}],
        "managers": [{"id", "name"}],
        "objectives": [{"id", "perspectiveId", "gestorId", "name"}],
        "indicators": [{"id", "perspectivaId", "objetivoId", "gestorId",
                        "polarity", "calcType", "rollingWindow",
                        "semaphore": {"blue", "green", "yellow", "red"}, ...}],
        "goals": [{"id", "indicatorId", "year", "monthlyValues",
                   "monthlyRealized", "locked", "history"}],
        "globalSettings": {"semaphore": {...}}
    }

snake_case keys are accepted as well on read.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from ..config import config
from .constants import (
    DEFAULT_ROLLING_WINDOW,
    DEFAULT_SEMAPHORE_LABELS,
    MONTHS_IN_YEAR,
    RULE_PRIORITY,
)
from .models import (
    Goal,
    Indicator,
    Manager,
    Objective,
    Perspective,
    SemaphoreSettings,
    StrategicData,
)
from .semaphore import parse_semaphore_settings, rule_to_dict

logger = logging.getLogger(__name__)


def _get(row: Mapping, *keys, default: Any = "") -> Any:
    for key in keys:
        if key in row and row[key] is not None:
            return row[key]
    return default


def _text(row: Mapping, *keys) -> str:
    return str(_get(row, *keys, default="")).strip()


# =============================================================================
# READ
# =============================================================================

def indicator_from_dict(row: Mapping) -> Indicator:
    settings = parse_semaphore_settings(_get(row, "semaphore", default=None))
    return Indicator(
        id=_text(row, "id"),
        name=_text(row, "name"),
        perspective_id=_text(row, "perspectivaId", "perspectiveId", "perspective_id"),
        objective_id=_text(row, "objetivoId", "objectiveId", "objective_id"),
        manager_id=_text(row, "gestorId", "managerId", "manager_id"),
        description=_text(row, "description"),
        formula=_text(row, "formula"),
        unit=_text(row, "unit"),
        source=_text(row, "source"),
        periodicity=_text(row, "periodicity") or "mensal",
        polarity=_text(row, "polarity"),
        calc_mode=_text(row, "calcType", "calcMode", "calc_mode"),
        rolling_window=_get(
            row, "rollingWindow", "rolling_window",
            default=config.get_app_setting("DEFAULT_ROLLING_WINDOW", DEFAULT_ROLLING_WINDOW)
        ),
        status=_text(row, "status") or "draft",
        semaphore=settings if settings is not None and settings.is_configured else None,
    )


def goal_from_dict(row: Mapping) -> Goal:
    year = _get(row, "year", default=None)
    if year in (None, ""):
        year = date.today().year
        logger.warning(f"Goal {row.get('id', '?')} has no year, assuming {year}")

    history = [
        (item.get("year"), item.get("value"))
        for item in _get(row, "history", default=[]) or []
        if isinstance(item, Mapping) and item.get("year") not in (None, "")
    ]

    return Goal.from_strings(
        indicator_id=_text(row, "indicatorId", "indicator_id"),
        year=int(year),
        monthly_values=_get(row, "monthlyValues", "monthly_values", default=[]),
        monthly_realized=_get(row, "monthlyRealized", "monthly_realized", default=[]),
        goal_id=_text(row, "id"),
        locked=bool(_get(row, "locked", default=False)),
        history=history,
    )


def strategic_data_from_dict(document: Optional[Mapping]) -> StrategicData:
    """Convert a stored document into StrategicData (missing parts are empty)."""
    if not document:
        return StrategicData(global_semaphore=default_semaphore_settings())

    if not isinstance(document, Mapping):
        raise ValueError(f"Document must be a JSON object, got {type(document).__name__}")

    if "globalSettings" in document or "global_settings" in document:
        global_settings = _get(document, "globalSettings", "global_settings", default={}) or {}
        semaphore = parse_semaphore_settings(global_settings.get("semaphore"))
    else:
        semaphore = default_semaphore_settings()
    identity = _get(document, "identity", default={}) or {}

    data = StrategicData(
        perspectives=tuple(
            Perspective(id=_text(p, "id"), name=_text(p, "name"))
            for p in _get(document, "perspectives", default=[]) or []
        ),
        objectives=tuple(
            Objective(
                id=_text(o, "id"),
                name=_text(o, "name"),
                perspective_id=_text(o, "perspectiveId", "perspectivaId", "perspective_id"),
                manager_id=_text(o, "gestorId", "managerId", "manager_id"),
            )
            for o in _get(document, "objectives", default=[]) or []
        ),
        managers=tuple(
            Manager(id=_text(m, "id"), name=_text(m, "name"))
            for m in _get(document, "managers", default=[]) or []
        ),
        indicators=tuple(
            indicator_from_dict(i) for i in _get(document, "indicators", default=[]) or []
        ),
        goals=tuple(goal_from_dict(g) for g in _get(document, "goals", default=[]) or []),
        global_semaphore=semaphore if semaphore is not None and semaphore.is_configured else None,
        company_name=_text(identity, "companyName", "company_name"),
    )

    logger.info(
        f"Loaded document: {len(data.perspectives)} perspectives, "
        f"{len(data.objectives)} objectives, {len(data.indicators)} indicators, "
        f"{len(data.goals)} goals"
    )
    return data


def default_semaphore_settings() -> SemaphoreSettings:
    """Global rules shipped with a fresh document."""
    return parse_semaphore_settings(DEFAULT_SEMAPHORE_LABELS)


# =============================================================================
# WRITE
# =============================================================================

def _cell_text(value: Optional[float]) -> str:
    if value is None:
        return ""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def _settings_to_dict(settings: Optional[SemaphoreSettings]) -> Optional[Dict]:
    if settings is None:
        return None
    return {slot: rule_to_dict(settings.rule_for(slot)) for slot in RULE_PRIORITY}


def strategic_data_to_dict(data: StrategicData) -> Dict:
    """Convert StrategicData back to the stored camelCase document."""
    indicators: List[Dict] = []
    for ind in data.indicators:
        row = {
            "id": ind.id,
            "name": ind.name,
            "perspectivaId": ind.perspective_id,
            "objetivoId": ind.objective_id,
            "gestorId": ind.manager_id,
            "description": ind.description,
            "formula": ind.formula,
            "unit": ind.unit,
            "source": ind.source,
            "periodicity": ind.periodicity,
            "polarity": ind.polarity.value,
            "calcType": ind.calc_mode.value,
            "rollingWindow": ind.rolling_window,
            "status": ind.status,
        }
        if ind.semaphore is not None:
            row["semaphore"] = _settings_to_dict(ind.semaphore)
        indicators.append(row)

    goals = [
        {
            "id": goal.id,
            "indicatorId": goal.indicator_id,
            "year": goal.year,
            "monthlyValues": [_cell_text(goal.planned.get(m)) for m in range(MONTHS_IN_YEAR)],
            "monthlyRealized": [_cell_text(goal.realized.get(m)) for m in range(MONTHS_IN_YEAR)],
            "locked": goal.locked,
            "history": [{"year": y, "value": _cell_text(v)} for y, v in goal.history],
        }
        for goal in data.goals
    ]

    document = {
        "identity": {"companyName": data.company_name},
        "perspectives": [{"id": p.id, "name": p.name} for p in data.perspectives],
        "managers": [{"id": m.id, "name": m.name} for m in data.managers],
        "objectives": [
            {"id": o.id, "name": o.name, "perspectiveId": o.perspective_id, "gestorId": o.manager_id}
            for o in data.objectives
        ],
        "indicators": indicators,
        "goals": goals,
        "globalSettings": {"semaphore": _settings_to_dict(data.global_semaphore)},
    }
    return document
