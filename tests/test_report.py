"""Tests for the results tables."""

import pytest

from utils.strategic_performance.report import RESULT_COLUMNS, PerformanceReport


@pytest.fixture
def report(sample_data):
    return PerformanceReport(sample_data)


def test_results_table_order_and_columns(report):
    df = report.build_results_table(year=2025, month_index=1)

    assert list(df.columns) == RESULT_COLUMNS
    assert df['indicator_id'].tolist() == ['i-rec', 'i-custo', 'i-nps']
    assert df['perspective'].tolist() == ['Financeira', 'Financeira', 'Clientes']
    assert df['manager'].tolist() == ['Ana', 'Ana', 'Bruno']
    assert set(df['month']) == {'Fev'}


def test_results_table_uses_fixed_scheme_by_default(report):
    df = report.build_results_table(year=2025, month_index=1).set_index('indicator_id')

    assert df.loc['i-rec', 'percentage_display'] == "95.00%"
    assert df.loc['i-rec', 'tier'] == 'attention'
    # lower is better, accumulated: 100 / 105
    assert df.loc['i-custo', 'percentage'] == pytest.approx(100 / 105 * 100)
    assert df.loc['i-custo', 'tier'] == 'attention'
    # average over the single month with a realized value: 70 / 80
    assert df.loc['i-nps', 'percentage_display'] == "87.50%"
    assert df.loc['i-nps', 'tier'] == 'critical'


def test_results_table_with_configured_rules(report):
    df = report.build_results_table(year=2025, month_index=1, use_custom_rules=True)
    df = df.set_index('indicator_id')

    # indicator rule: green between 95 and 105
    assert df.loc['i-custo', 'tier'] == 'on_target'
    # global rules: "De 90% a 99%" -> yellow
    assert df.loc['i-rec', 'tier'] == 'attention'
    assert df.loc['i-nps', 'tier'] == 'critical'


def test_results_table_filters(report):
    by_manager = report.build_results_table(2025, 0, manager_id='m-ana')
    assert by_manager['indicator_id'].tolist() == ['i-rec', 'i-custo']

    by_perspective = report.build_results_table(2025, 0, perspective_id='p-cli')
    assert by_perspective['indicator_id'].tolist() == ['i-nps']


def test_year_without_goals_is_no_data(report):
    df = report.build_results_table(year=2024, month_index=0)

    assert not df['valid'].any()
    assert set(df['tier']) == {'no_data'}
    assert set(df['percentage_display']) == {'-'}


def test_monthly_matrix(report):
    df = report.build_monthly_matrix(year=2025)

    assert len(df) == 36
    rec = df[df['indicator_id'] == 'i-rec']
    assert rec['month_index'].tolist() == list(range(12))
    assert rec['position'].unique().tolist() == [0]
    assert rec['valid'].tolist() == [True, True] + [False] * 10
    assert rec.iloc[0]['tier'] == 'surpass'


def test_summarize_tiers(report):
    df = report.build_results_table(year=2025, month_index=1)
    assert report.summarize_tiers(df) == {
        'surpass': 0,
        'on_target': 0,
        'attention': 2,
        'critical': 1,
        'no_data': 0,
    }
    assert report.summarize_tiers(df.iloc[0:0]) == dict.fromkeys(
        ['surpass', 'on_target', 'attention', 'critical', 'no_data'], 0
    )


def test_group_results_keeps_order(report):
    grouped = report.group_results(report.build_results_table(2025, 1))

    assert list(grouped) == ['Financeira', 'Clientes']
    assert list(grouped['Financeira']) == ['Aumentar receita']
    assert grouped['Financeira']['Aumentar receita']['indicator_id'].tolist() == ['i-rec', 'i-custo']


def test_percentage_series_masks_invalid_rows(report):
    df = report.build_results_table(2024, 3)
    series = report.percentage_series(df)
    assert series.isna().all()

    mixed = report.percentage_series(report.build_results_table(2025, 3))
    assert mixed.isna().tolist() == [True, False, False]

    series = report.percentage_series(report.build_results_table(2025, 0))
    assert series.iloc[0] == pytest.approx(120.0)


def test_tier_legend(report):
    legend = report.tier_legend()
    assert [item['tier'] for item in legend] == ['surpass', 'on_target', 'attention', 'critical', 'no_data']
    assert legend[0]['icon'] == '🔵'
