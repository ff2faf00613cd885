"""Tests for the sidebar filter helpers."""

from datetime import date

from utils.strategic_performance.filters import (
    ALL_OPTION,
    StrategicFilterValues,
    _id_options,
    available_years,
    default_month_index,
)
from utils.strategic_performance.models import Manager, StrategicData


def test_available_years(sample_data):
    assert available_years(sample_data) == [2025]
    assert available_years(StrategicData(), today=date(2026, 3, 1)) == [2026]


def test_default_month_index():
    today = date(2025, 6, 15)
    assert default_month_index(2025, today) == 5
    assert default_month_index(2024, today) == 11
    assert default_month_index(2026, today) == 0


def test_id_options_disambiguates_names():
    labels, id_map = _id_options([Manager("m1", "Ana"), Manager("m2", "Ana"), Manager("m3", "")])

    assert labels == [ALL_OPTION, "Ana", "Ana (m2)", "m3"]
    assert id_map[ALL_OPTION] is None
    assert id_map["Ana (m2)"] == "m2"


def test_filter_values_describe(sample_data):
    values = StrategicFilterValues(
        year=2025, month_index=1, perspective_id="p-fin", manager_id="m-ana", use_custom_rules=True
    )
    assert values.describe(sample_data) == (
        "Fevereiro/2025 | Perspectiva: Financeira | Gestor: Ana | Regras configuradas"
    )
    assert values.to_dict()['month_index'] == 1
