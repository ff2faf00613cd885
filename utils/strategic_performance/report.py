# utils/strategic_performance/report.py
"""
Results tables for Strategic Performance

Joins engine output back to the strategic map for the consumers:
- Results table: one row per indicator for the selected month,
  ordered perspective -> objective -> indicator
- Monthly matrix: one row per indicator per month (12 engine calls each)
- Tier summary and perspective/objective grouping for rendering
"""

import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from .constants import (
    CALC_MODE_LABELS,
    POLARITY_LABELS,
    STATUS_LABELS,
    TIER_ORDER,
    TIER_STYLES,
)
from .engine import PerformanceEngine
from .formatting import format_month
from .models import Indicator, PerformanceResult, StrategicData
from .semaphore import DEFAULT_CLASSIFIER

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    'position',
    'perspective_id', 'perspective', 'objective_id', 'objective',
    'indicator_id', 'indicator', 'manager_id', 'manager', 'unit',
    'polarity', 'calc_mode', 'status',
    'month_index', 'month',
    'target', 'realized', 'percentage',
    'tier', 'tier_label', 'icon', 'color',
    'target_display', 'realized_display', 'percentage_display',
    'months_counted', 'valid',
]


class PerformanceReport:
    """
    Report builder over one StrategicData document.

    Usage:
        report = PerformanceReport(data, number_locale='pt_BR')

        results = report.build_results_table(year=2025, month_index=5)
        monthly = report.build_monthly_matrix(year=2025)
        counts = report.summarize_tiers(results)
    """

    def __init__(
        self,
        data: StrategicData,
        engine: Optional[PerformanceEngine] = None,
        number_locale: Optional[str] = None
    ):
        self.data = data
        if engine is None:
            engine = PerformanceEngine(number_locale) if number_locale else PerformanceEngine()
        self.engine = engine

    # =========================================================================
    # SELECTION
    # =========================================================================

    def filter_indicators(
        self,
        perspective_id: Optional[str] = None,
        manager_id: Optional[str] = None
    ) -> List[Indicator]:
        """Indicators matching the filters, ordered perspective -> objective -> indicator."""
        indicators = [
            ind for ind in self.data.indicators
            if (not perspective_id or ind.perspective_id == perspective_id)
            and (not manager_id or ind.manager_id == manager_id)
        ]
        perspective_order = {p.id: idx for idx, p in enumerate(self.data.perspectives)}
        objective_order = {o.id: idx for idx, o in enumerate(self.data.objectives)}
        indicator_order = {i.id: idx for idx, i in enumerate(self.data.indicators)}
        unknown = len(self.data.indicators) + 1

        return sorted(indicators, key=lambda ind: (
            perspective_order.get(ind.perspective_id, unknown),
            objective_order.get(ind.objective_id, unknown),
            indicator_order.get(ind.id, unknown),
        ))

    # =========================================================================
    # TABLES
    # =========================================================================

    def build_results_table(
        self,
        year: int,
        month_index: int,
        perspective_id: Optional[str] = None,
        manager_id: Optional[str] = None,
        use_custom_rules: bool = False
    ) -> pd.DataFrame:
        """
        One row per indicator for the selected month.

        Args:
            year: Goal year
            month_index: Reporting month, 0-based
            perspective_id: Optional perspective filter
            manager_id: Optional manager filter
            use_custom_rules: Classify with indicator/global rules instead of
                the fixed tier scheme

        Returns:
            DataFrame with RESULT_COLUMNS
        """
        classifier = None if use_custom_rules else DEFAULT_CLASSIFIER
        rows = []
        for position, indicator in enumerate(self.filter_indicators(perspective_id, manager_id)):
            goal = self.data.find_goal(indicator.id, year)
            result = self.engine.evaluate(
                indicator, goal, month_index,
                global_settings=self.data.global_semaphore,
                classifier=classifier,
            )
            rows.append(self._build_row(position, indicator, result))

        logger.info(f"Results table: {len(rows)} indicators for {year}-{month_index + 1:02d}")
        return pd.DataFrame(rows, columns=RESULT_COLUMNS)

    def build_monthly_matrix(
        self,
        year: int,
        perspective_id: Optional[str] = None,
        manager_id: Optional[str] = None,
        use_custom_rules: bool = False
    ) -> pd.DataFrame:
        """One row per indicator per month, engine called once per month."""
        classifier = None if use_custom_rules else DEFAULT_CLASSIFIER
        rows = []
        for position, indicator in enumerate(self.filter_indicators(perspective_id, manager_id)):
            goal = self.data.find_goal(indicator.id, year)
            for result in self.engine.evaluate_year(
                indicator, goal,
                global_settings=self.data.global_semaphore,
                classifier=classifier,
            ):
                rows.append(self._build_row(position, indicator, result))

        return pd.DataFrame(rows, columns=RESULT_COLUMNS)

    def _build_row(self, position: int, indicator: Indicator, result: PerformanceResult) -> Dict:
        return {
            'position': position,
            'perspective_id': indicator.perspective_id,
            'perspective': self.data.perspective_name(indicator.perspective_id),
            'objective_id': indicator.objective_id,
            'objective': self.data.objective_name(indicator.objective_id),
            'indicator_id': indicator.id,
            'indicator': indicator.name,
            'manager_id': indicator.manager_id,
            'manager': self.data.manager_name(indicator.manager_id),
            'unit': indicator.unit,
            'polarity': POLARITY_LABELS[indicator.polarity.value],
            'calc_mode': CALC_MODE_LABELS[indicator.calc_mode.value],
            'status': STATUS_LABELS.get(indicator.status, indicator.status),
            'month_index': result.month_index,
            'month': format_month(result.month_index),
            'target': result.target,
            'realized': result.realized,
            'percentage': result.percentage,
            'tier': result.tier.value,
            'tier_label': result.tier.label,
            'icon': result.icon,
            'color': result.color,
            'target_display': result.target_display,
            'realized_display': result.realized_display,
            'percentage_display': result.percentage_display,
            'months_counted': result.months_counted,
            'valid': result.valid,
        }

    # =========================================================================
    # SUMMARIES
    # =========================================================================

    @staticmethod
    def summarize_tiers(results_df: pd.DataFrame) -> Dict[str, int]:
        """Count of rows per tier, every tier present (zero when absent)."""
        counts = {tier: 0 for tier in TIER_ORDER}
        if results_df.empty:
            return counts
        for tier, count in results_df['tier'].value_counts().items():
            counts[tier] = int(count)
        return counts

    @staticmethod
    def group_results(results_df: pd.DataFrame) -> Dict[str, Dict[str, pd.DataFrame]]:
        """Nested {perspective: {objective: rows}} keeping table order."""
        grouped: Dict[str, Dict[str, pd.DataFrame]] = {}
        if results_df.empty:
            return grouped
        for (perspective, objective), rows in results_df.groupby(
            ['perspective', 'objective'], sort=False
        ):
            grouped.setdefault(perspective, {})[objective] = rows.reset_index(drop=True)
        return grouped

    @staticmethod
    def percentage_series(results_df: pd.DataFrame) -> pd.Series:
        """Percentages with invalid rows as NaN, for charts and averages."""
        if results_df.empty:
            return pd.Series(dtype=float)
        return pd.Series(
            np.where(results_df['valid'], results_df['percentage'], np.nan),
            index=results_df.index,
            name='percentage'
        )

    @staticmethod
    def tier_legend() -> List[Dict]:
        return [{'tier': tier, **TIER_STYLES[tier]} for tier in TIER_ORDER]
