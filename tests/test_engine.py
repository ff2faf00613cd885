"""Tests for the performance engine."""

import math

import pytest

from conftest import make_goal, make_indicator
from utils.strategic_performance.engine import PerformanceEngine, evaluate_performance
from utils.strategic_performance.models import (
    CalcMode,
    Polarity,
    SemaphoreRule,
    SemaphoreSettings,
    SemaphoreTier,
)
from utils.strategic_performance.semaphore import DEFAULT_CLASSIFIER

EMPTY_YEAR = [""] * 12


@pytest.fixture
def engine():
    return PerformanceEngine()


# =============================================================================
# CONCRETE SCENARIOS
# =============================================================================

def test_isolated_higher_better_surpass(engine):
    indicator = make_indicator()
    goal = make_goal(["100"] + [""] * 11, ["120"] + [""] * 11)

    result = engine.evaluate(indicator, goal, 0)

    assert result.valid
    assert result.target == 100.0
    assert result.realized == 120.0
    assert result.percentage == pytest.approx(120.0)
    assert result.percentage_display == "120.00%"
    assert result.tier == SemaphoreTier.SURPASS
    assert result.color == "blue"
    assert result.target_display == "100,00"
    assert result.realized_display == "120,00"


def test_isolated_empty_realized_is_no_data(engine):
    indicator = make_indicator()
    goal = make_goal(["100"] + [""] * 11, EMPTY_YEAR)

    result = engine.evaluate(indicator, goal, 0)

    assert not result.valid
    assert result.tier == SemaphoreTier.NO_DATA
    assert result.tier != SemaphoreTier.CRITICAL
    assert result.target_display == "-"
    assert result.realized_display == "-"
    assert result.percentage_display == "-"


def test_isolated_invalid_regardless_of_planned(engine):
    indicator = make_indicator()
    for planned in ("", "0", "500"):
        goal = make_goal([planned] * 12, EMPTY_YEAR)
        for month in range(12):
            assert not engine.evaluate(indicator, goal, month).valid


def test_average_skips_months_without_realized(engine):
    indicator = make_indicator(calc_mode=CalcMode.AVERAGE)
    goal = make_goal(["100", "100", "100"], ["90", "", "110"])

    result = engine.evaluate(indicator, goal, 2)

    assert result.valid
    assert result.months_counted == 2
    assert result.target == pytest.approx(100.0)
    assert result.realized == pytest.approx(100.0)
    assert result.percentage_display == "100.00%"
    assert result.tier == SemaphoreTier.ON_TARGET


def test_custom_rules_agree_and_diverge(engine):
    settings = SemaphoreSettings(
        green=SemaphoreRule("between", 95, 105),
        yellow=SemaphoreRule(">=", 80),
    )
    indicator = make_indicator(semaphore=settings)

    at_102 = make_goal(["100"], ["102"])
    assert engine.evaluate(indicator, at_102, 0).tier == SemaphoreTier.ON_TARGET
    assert engine.evaluate(indicator, at_102, 0, classifier=DEFAULT_CLASSIFIER).tier == \
        SemaphoreTier.ON_TARGET

    at_85 = make_goal(["100"], ["85"])
    assert engine.evaluate(indicator, at_85, 0).tier == SemaphoreTier.ATTENTION
    assert engine.evaluate(indicator, at_85, 0, classifier=DEFAULT_CLASSIFIER).tier == \
        SemaphoreTier.CRITICAL


def test_global_rules_apply_when_indicator_has_none(engine):
    indicator = make_indicator()
    goal = make_goal(["100"], ["85"])
    global_settings = SemaphoreSettings(yellow=SemaphoreRule(">=", 80))

    result = engine.evaluate(indicator, goal, 0, global_settings=global_settings)

    assert result.tier == SemaphoreTier.ATTENTION


def test_rule_set_without_match_is_critical(engine):
    indicator = make_indicator(semaphore=SemaphoreSettings(blue=SemaphoreRule(">", 200)))
    result = engine.evaluate(indicator, make_goal(["100"], ["150"]), 0)
    assert result.valid
    assert result.tier == SemaphoreTier.CRITICAL


# =============================================================================
# WINDOWS
# =============================================================================

def test_rolling_window_at_june(engine):
    indicator = make_indicator(calc_mode=CalcMode.ROLLING, rolling_window=3)
    planned = ["1000", "1000", "1000", "10", "20", "30"] + [""] * 6
    realized = ["1", "1", "1", "11", "", "33"] + [""] * 6
    goal = make_goal(planned, realized)

    assert list(engine.window_months(indicator, 5)) == [3, 4, 5]

    result = engine.evaluate(indicator, goal, 5)
    assert result.months_counted == 2
    assert result.target == pytest.approx(40.0)
    assert result.realized == pytest.approx(44.0)


def test_rolling_window_clamps_at_start(engine):
    indicator = make_indicator(calc_mode=CalcMode.ROLLING, rolling_window=3)
    goal = make_goal(["10", "20"], ["5", "10"])

    assert list(engine.window_months(indicator, 1)) == [0, 1]

    result = engine.evaluate(indicator, goal, 1)
    assert result.target == pytest.approx(30.0)
    assert result.realized == pytest.approx(15.0)
    assert result.percentage == pytest.approx(50.0)


def test_rolling_window_without_data_is_invalid(engine):
    indicator = make_indicator(calc_mode=CalcMode.ROLLING, rolling_window=2)
    goal = make_goal(["10"] * 12, ["5", "5"] + [""] * 10)
    assert not engine.evaluate(indicator, goal, 5).valid


def test_accumulated_is_monotonic_and_skips_empty_months(engine):
    indicator = make_indicator(calc_mode=CalcMode.ACCUMULATED)
    planned = ["100", "200", "300", "400", "500", "600", "", "", "", "", "", ""]
    realized = ["90", "", "310", "", "0", "abc", "", "", "", "", "", ""]
    goal = make_goal(planned, realized)

    previous = engine.aggregate(indicator, goal, 0)
    assert previous == (100.0, 90.0, 1)

    for month in range(1, 12):
        current = engine.aggregate(indicator, goal, month)
        if goal.has_realized(month):
            assert current[0] == pytest.approx(previous[0] + goal.planned_value(month))
            assert current[1] == pytest.approx(previous[1] + goal.realized_value(month))
            assert current[2] == previous[2] + 1
        else:
            assert current == previous
        previous = current


def test_year_to_date_matches_accumulated(engine):
    goal = make_goal(["100", "100", "100"], ["80", "", "130"])
    accumulated = engine.evaluate(make_indicator(calc_mode=CalcMode.ACCUMULATED), goal, 2)
    ytd = engine.evaluate(make_indicator(calc_mode=CalcMode.YEAR_TO_DATE), goal, 2)

    assert ytd.target == accumulated.target
    assert ytd.realized == accumulated.realized
    assert ytd.percentage == accumulated.percentage


def test_month_index_is_clamped(engine):
    indicator = make_indicator()
    goal = make_goal([""] * 11 + ["100"], [""] * 11 + ["100"])

    result = engine.evaluate(indicator, goal, 15)

    assert result.month_index == 11
    assert result.valid


# =============================================================================
# POLARITY
# =============================================================================

def test_lower_better_inverts_percentage(engine):
    indicator = make_indicator(polarity=Polarity.LOWER_BETTER)

    below = engine.evaluate(indicator, make_goal(["100"], ["80"]), 0)
    assert below.percentage > 100
    assert below.percentage == pytest.approx(125.0)

    equal = engine.evaluate(indicator, make_goal(["100"], ["100"]), 0)
    assert equal.percentage == 100.0


@pytest.mark.parametrize("target, realized, polarity, expected", [
    (0, 50, Polarity.HIGHER_BETTER, 0.0),
    (0, 50, Polarity.STABLE_BAND, 0.0),
    (100, 0, Polarity.LOWER_BETTER, 100.0),
    (0, 0, Polarity.LOWER_BETTER, 100.0),
    (100, 90, Polarity.STABLE_BAND, 90.0),
    (-100, 0, Polarity.HIGHER_BETTER, 0.0),
])
def test_compute_percentage_special_cases(target, realized, polarity, expected):
    percentage = PerformanceEngine.compute_percentage(target, realized, polarity)
    assert percentage == pytest.approx(expected)
    assert str(percentage) != "-0.0"


# =============================================================================
# CONTRACT
# =============================================================================

def test_missing_goal_is_no_data(engine):
    result = engine.evaluate(make_indicator(), None, 3)
    assert not result.valid
    assert result.tier == SemaphoreTier.NO_DATA
    assert result.months_counted == 0


def test_evaluation_is_idempotent(engine):
    indicator = make_indicator(calc_mode=CalcMode.AVERAGE, polarity=Polarity.LOWER_BETTER)
    goal = make_goal(["10,5", "R$ 7", "3"], ["9", "", "4.25"])

    first = engine.evaluate(indicator, goal, 2)
    second = engine.evaluate(indicator, goal, 2)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_locale_changes_display_only():
    indicator = make_indicator()
    goal = make_goal(["1234.5"], ["2469"])

    br = PerformanceEngine("pt_BR").evaluate(indicator, goal, 0)
    us = PerformanceEngine("en_US").evaluate(indicator, goal, 0)

    assert br.target == us.target
    assert br.percentage == us.percentage
    assert br.target_display == "1.234,50"
    assert us.target_display == "1,234.50"
    assert br.percentage_display == us.percentage_display == "200.00%"


def test_evaluate_year_returns_twelve_independent_months(engine):
    indicator = make_indicator(calc_mode=CalcMode.ACCUMULATED)
    goal = make_goal(["10"] * 12, ["10", "20"] + [""] * 10)

    results = engine.evaluate_year(indicator, goal)

    assert [r.month_index for r in results] == list(range(12))
    assert results[11] == engine.evaluate(indicator, goal, 11)
    assert results[11].realized == pytest.approx(30.0)


def test_module_level_helper(engine):
    indicator = make_indicator()
    goal = make_goal(["100"], ["95"])
    assert evaluate_performance(indicator, goal, 0) == engine.evaluate(indicator, goal, 0)


# =============================================================================
# HUGE INPUTS
# =============================================================================

def test_overflowing_text_never_reaches_results(engine):
    goal = make_goal(["100"] + [""] * 11, ["9" * 400] + [""] * 11)

    result = engine.evaluate(make_indicator(), goal, 0)

    assert result.valid
    assert math.isfinite(result.realized)
    assert result.realized_display == "0,00"
    assert result.percentage == 0.0


def test_overflowing_sum_is_no_data(engine):
    huge = "1" + "0" * 308
    goal = make_goal([huge, huge] + [""] * 10, [huge, huge] + [""] * 10)
    indicator = make_indicator(CalcMode.ACCUMULATED)

    assert engine.evaluate(indicator, goal, 0).valid
    result = engine.evaluate(indicator, goal, 1)
    assert not result.valid
    assert result.target_display == "-"
    assert result.realized_display == "-"
