# utils/strategic_performance/engine.py
"""
Performance Calculation Engine

Given an indicator, its goal for the year and a reporting month, computes
the period performance:
1. Aggregate planned / realized over the calculation-mode window
   (isolated, accumulated, year_to_date, average, rolling)
2. Percentage by polarity (lower-is-better is inverted)
3. Semaphore tier from the selected classifier
4. Display strings

Pure and synchronous: no I/O, no shared state, never raises for missing
or malformed data. Anything that prevents a number degrades to
PerformanceResult.no_data().

Usage:
    engine = PerformanceEngine(number_locale='pt_BR')
    result = engine.evaluate(indicator, goal, month_index=5)
    year = engine.evaluate_year(indicator, goal)
"""

import logging
import math
from typing import List, Optional, Tuple

from .constants import DEFAULT_NUMBER_LOCALE, MONTHS_IN_YEAR
from .formatting import format_number, format_percentage
from .models import (
    CalcMode,
    Goal,
    Indicator,
    PerformanceResult,
    Polarity,
    SemaphoreSettings,
)
from .semaphore import SemaphoreClassifier, select_classifier

logger = logging.getLogger(__name__)

# (target, realized, months_counted)
Aggregate = Tuple[float, float, int]


class PerformanceEngine:
    """
    Period performance calculator for strategic indicators.

    The number locale only affects display strings; numeric fields are
    identical across locales.
    """

    def __init__(self, number_locale: str = DEFAULT_NUMBER_LOCALE):
        self.number_locale = number_locale

    # =========================================================================
    # WINDOW & AGGREGATION
    # =========================================================================

    @staticmethod
    def window_months(indicator: Indicator, month_index: int) -> range:
        """Month indexes covered by the indicator's calculation mode."""
        if indicator.calc_mode == CalcMode.ISOLATED:
            return range(month_index, month_index + 1)
        if indicator.calc_mode == CalcMode.ROLLING:
            start = max(0, month_index - indicator.rolling_window + 1)
            return range(start, month_index + 1)
        # accumulated, year_to_date and average all run from January
        return range(0, month_index + 1)

    def aggregate(
        self,
        indicator: Indicator,
        goal: Optional[Goal],
        month_index: int
    ) -> Optional[Aggregate]:
        """
        Aggregate planned and realized values over the window.

        Only months with a realized value contribute, to both sides.
        Returns None when there is no goal or no qualifying month.
        """
        if goal is None:
            return None

        month_index = _clamp_month(month_index)

        if indicator.calc_mode == CalcMode.ISOLATED:
            if not goal.has_realized(month_index):
                return None
            return goal.planned_value(month_index), goal.realized_value(month_index), 1

        months = [
            m for m in self.window_months(indicator, month_index)
            if goal.has_realized(m)
        ]
        if not months:
            return None

        target = sum(goal.planned_value(m) for m in months)
        realized = sum(goal.realized_value(m) for m in months)

        if indicator.calc_mode == CalcMode.AVERAGE:
            target /= len(months)
            realized /= len(months)

        if not (math.isfinite(target) and math.isfinite(realized)):
            logger.warning(f"Aggregate overflow for indicator {indicator.id}, month {month_index}")
            return None

        return target, realized, len(months)

    # =========================================================================
    # PERCENTAGE
    # =========================================================================

    @staticmethod
    def compute_percentage(target: float, realized: float, polarity: Polarity) -> float:
        """
        Performance percentage for a polarity.

        higher_better / stable_band: realized / target * 100 (0 when target is 0)
        lower_better: target / realized * 100 (100 when realized is 0)
        """
        if polarity == Polarity.LOWER_BETTER:
            if realized == 0:
                return 100.0
            percentage = (target / realized) * 100
        else:
            if target == 0:
                return 0.0
            percentage = (realized / target) * 100

        if not math.isfinite(percentage):
            logger.debug(f"Non-finite percentage for target={target}, realized={realized}")
            return 0.0
        # Adding 0.0 turns -0.0 into 0.0
        return percentage + 0.0

    # =========================================================================
    # EVALUATION
    # =========================================================================

    def evaluate(
        self,
        indicator: Indicator,
        goal: Optional[Goal],
        month_index: int,
        global_settings: Optional[SemaphoreSettings] = None,
        classifier: Optional[SemaphoreClassifier] = None
    ) -> PerformanceResult:
        """
        Evaluate one indicator for one reporting month.

        Args:
            indicator: Indicator with polarity / calc mode / semaphore rules
            goal: Goal for the reporting year, or None when not planned
            month_index: Reporting month, 0 (Jan) .. 11 (Dec)
            global_settings: Fallback semaphore rules when the indicator has none
            classifier: Explicit classifier, overrides rule selection

        Returns:
            PerformanceResult (valid=False when there is nothing to compute)
        """
        month_index = _clamp_month(month_index)

        aggregate = self.aggregate(indicator, goal, month_index)
        if aggregate is None:
            return PerformanceResult.no_data(indicator.id, month_index)

        target, realized, months_counted = aggregate
        percentage = self.compute_percentage(target, realized, indicator.polarity)

        if classifier is None:
            classifier = select_classifier(indicator, global_settings)
        tier = classifier.classify(percentage)

        return PerformanceResult(
            indicator_id=indicator.id,
            month_index=month_index,
            target=target,
            realized=realized,
            percentage=percentage,
            tier=tier,
            icon=tier.icon,
            color=tier.color,
            target_display=format_number(target, self.number_locale),
            realized_display=format_number(realized, self.number_locale),
            percentage_display=format_percentage(percentage),
            months_counted=months_counted,
            valid=True,
        )

    def evaluate_year(
        self,
        indicator: Indicator,
        goal: Optional[Goal],
        global_settings: Optional[SemaphoreSettings] = None,
        classifier: Optional[SemaphoreClassifier] = None
    ) -> List[PerformanceResult]:
        """Evaluate every month 0..11, one independent call per month."""
        return [
            self.evaluate(indicator, goal, month_index, global_settings, classifier)
            for month_index in range(MONTHS_IN_YEAR)
        ]


def _clamp_month(month_index: int) -> int:
    if month_index < 0 or month_index >= MONTHS_IN_YEAR:
        logger.debug(f"Month index {month_index} outside 0..11, clamping")
    return min(max(int(month_index), 0), MONTHS_IN_YEAR - 1)


def evaluate_performance(
    indicator: Indicator,
    goal: Optional[Goal],
    month_index: int,
    global_settings: Optional[SemaphoreSettings] = None,
    classifier: Optional[SemaphoreClassifier] = None,
    number_locale: str = DEFAULT_NUMBER_LOCALE
) -> PerformanceResult:
    """Functional shortcut for PerformanceEngine(number_locale).evaluate(...)."""
    return PerformanceEngine(number_locale).evaluate(
        indicator, goal, month_index, global_settings, classifier
    )
