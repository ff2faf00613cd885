# utils/strategic_performance/__init__.py
"""
Strategic Performance Module

Indicator performance against monthly goals for a strategic map
(perspectives -> objectives -> indicators).

Components:
- parsing: free-text cell parsing
- models: indicators, goals, semaphore rules, results
- semaphore: fixed and rule-based tier classifiers
- engine: period aggregation, polarity and classification
- serializers / repository: stored JSON document and backups
- report: results tables for pages and exports
- filters / fragments / charts: Streamlit and Altair components
- export: formatted Excel workbooks

Usage:
    from utils.strategic_performance import (
        PerformanceEngine,
        PerformanceReport,
        StrategicRepository,
        StrategicExport,
    )
"""

from .models import (
    Polarity,
    CalcMode,
    SemaphoreTier,
    SemaphoreRule,
    SemaphoreSettings,
    Perspective,
    Objective,
    Manager,
    Indicator,
    Goal,
    StrategicData,
    PerformanceResult,
)
from .parsing import has_value, parse_numeric, parse_cell
from .semaphore import (
    SemaphoreClassifier,
    FixedTierClassifier,
    RuleSetClassifier,
    DEFAULT_CLASSIFIER,
    select_classifier,
    parse_semaphore_rule,
    parse_semaphore_settings,
)
from .engine import PerformanceEngine, evaluate_performance
from .formatting import format_number, format_percentage, format_month
from .serializers import strategic_data_from_dict, strategic_data_to_dict
from .repository import StrategicRepository
from .report import PerformanceReport
from .export import StrategicExport
from .charts import StrategicCharts

# Constants
from .constants import (
    TIER_STYLES,
    TIER_ORDER,
    MONTH_ORDER,
    COLORS,
    CHART_WIDTH,
    CHART_HEIGHT,
)

__all__ = [
    # Models
    'Polarity',
    'CalcMode',
    'SemaphoreTier',
    'SemaphoreRule',
    'SemaphoreSettings',
    'Perspective',
    'Objective',
    'Manager',
    'Indicator',
    'Goal',
    'StrategicData',
    'PerformanceResult',

    # Functions
    'has_value',
    'parse_numeric',
    'parse_cell',
    'select_classifier',
    'parse_semaphore_rule',
    'parse_semaphore_settings',
    'evaluate_performance',
    'format_number',
    'format_percentage',
    'format_month',
    'strategic_data_from_dict',
    'strategic_data_to_dict',

    # Classes
    'SemaphoreClassifier',
    'FixedTierClassifier',
    'RuleSetClassifier',
    'DEFAULT_CLASSIFIER',
    'PerformanceEngine',
    'StrategicRepository',
    'PerformanceReport',
    'StrategicExport',
    'StrategicCharts',

    # Constants
    'TIER_STYLES',
    'TIER_ORDER',
    'MONTH_ORDER',
    'COLORS',
    'CHART_WIDTH',
    'CHART_HEIGHT',
]

__version__ = '1.0.0'
