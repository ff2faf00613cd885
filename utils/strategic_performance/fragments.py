# utils/strategic_performance/fragments.py
"""
Streamlit Fragments for Strategic Performance

Uses @st.fragment so the indicator drill-down and the export buttons
rerun on their own widgets, NOT when the sidebar filters change.

- render_tier_summary(): one metric card per semaphore tier
- render_results_table(): results grouped by perspective and objective
- monthly_detail_fragment(): monthly chart + table for one indicator
- export_fragment(): Excel downloads (performance report, catalog)
"""

import logging
from datetime import datetime
from typing import Dict

import pandas as pd
import streamlit as st

from .charts import StrategicCharts
from .constants import TIER_ORDER, TIER_STYLES
from .export import XLSX_MIME, StrategicExport
from .filters import StrategicFilterValues
from .models import StrategicData
from .report import PerformanceReport

logger = logging.getLogger(__name__)

DISPLAY_COLUMNS = {
    'icon': '',
    'indicator': 'Indicador',
    'manager': 'Gestor',
    'unit': 'Unidade',
    'calc_mode': 'Cálculo',
    'target_display': 'Meta',
    'realized_display': 'Realizado',
    'percentage_display': '%',
    'tier_label': 'Semáforo',
}


# =============================================================================
# TIER SUMMARY
# =============================================================================

def render_tier_summary(tier_counts: Dict[str, int]):
    """Metric cards with the number of indicators per tier."""
    total = sum(tier_counts.values())
    columns = st.columns(len(TIER_ORDER))
    for col, tier in zip(columns, TIER_ORDER):
        style = TIER_STYLES[tier]
        count = tier_counts.get(tier, 0)
        share = f"{count / total * 100:.0f}%" if total else None
        with col:
            st.metric(
                label=f"{style['icon']} {style['label']}",
                value=count,
                delta=share,
                delta_color="off"
            )


# =============================================================================
# RESULTS TABLE
# =============================================================================

def _table_view(rows: pd.DataFrame) -> pd.DataFrame:
    view = rows[list(DISPLAY_COLUMNS)].rename(columns=DISPLAY_COLUMNS)
    return view.reset_index(drop=True)


def render_results_table(results_df: pd.DataFrame):
    """Results grouped perspective -> objective, one table per objective."""
    if results_df.empty:
        st.info("📭 Nenhum indicador para os filtros selecionados")
        return

    grouped = PerformanceReport.group_results(results_df)
    for perspective, objectives in grouped.items():
        st.markdown(f"#### 🧭 {perspective or 'Sem perspectiva'}")
        for objective, rows in objectives.items():
            with st.expander(f"🎯 {objective or 'Sem objetivo'} ({len(rows)})", expanded=True):
                st.dataframe(
                    _table_view(rows),
                    hide_index=True,
                    use_container_width=True
                )


# =============================================================================
# FRAGMENT: MONTHLY DETAIL
# =============================================================================

@st.fragment
def monthly_detail_fragment(
    monthly_df: pd.DataFrame,
    results_df: pd.DataFrame,
    fragment_key: str = "monthly"
):
    """Indicator selector with its monthly chart and table."""
    st.subheader("📊 Evolução mensal")

    if results_df.empty or monthly_df.empty:
        st.info("📭 Sem indicadores para detalhar")
        return

    names = {
        row.position: row.indicator or row.indicator_id
        for row in results_df.itertuples(index=False)
    }

    position = st.selectbox(
        "Indicador",
        options=list(names),
        format_func=lambda pos: names.get(pos, ''),
        key=f"{fragment_key}_indicator"
    )

    rows = monthly_df[monthly_df['position'] == position]
    indicator_id = rows['indicator_id'].iloc[0] if not rows.empty else ''
    chart = StrategicCharts.build_monthly_chart(
        rows, indicator_id, title=names.get(position, '')
    )
    st.altair_chart(chart, use_container_width=True)

    table = rows[['month', 'target_display', 'realized_display',
                  'percentage_display', 'icon', 'tier_label', 'months_counted']].rename(columns={
        'month': 'Mês',
        'target_display': 'Meta',
        'realized_display': 'Realizado',
        'percentage_display': '%',
        'icon': '',
        'tier_label': 'Semáforo',
        'months_counted': 'Meses',
    })
    with st.expander("📋 Valores mensais"):
        st.dataframe(table, hide_index=True, use_container_width=True)


# =============================================================================
# FRAGMENT: EXPORT
# =============================================================================

@st.fragment
def export_fragment(
    data: StrategicData,
    filters: StrategicFilterValues,
    fragment_key: str = "export"
):
    """Generate and download Excel workbooks on demand."""
    st.subheader("📥 Exportar")
    timestamp = datetime.now().strftime('%Y%m%d_%H%M')

    col1, col2 = st.columns(2)

    with col1:
        st.markdown("**Relatório de desempenho**")
        st.caption(filters.describe(data))
        if st.button("📊 Gerar relatório", key=f"{fragment_key}_report_btn", use_container_width=True):
            with st.spinner("Gerando Excel..."):
                output = StrategicExport().create_performance_report(
                    data,
                    year=filters.year,
                    month_index=filters.month_index,
                    perspective_id=filters.perspective_id,
                    manager_id=filters.manager_id,
                    use_custom_rules=filters.use_custom_rules,
                )
            st.download_button(
                "⬇️ Baixar relatório",
                data=output,
                file_name=f"desempenho_{filters.year}_{filters.month_index + 1:02d}_{timestamp}.xlsx",
                mime=XLSX_MIME,
                key=f"{fragment_key}_report_dl",
                use_container_width=True
            )

    with col2:
        st.markdown("**Catálogo de indicadores**")
        mode = st.radio(
            "Formato",
            options=["summary", "detailed"],
            format_func=lambda m: "Resumido" if m == "summary" else "Detalhado",
            horizontal=True,
            key=f"{fragment_key}_catalog_mode",
            label_visibility="collapsed"
        )
        if st.button("📚 Gerar catálogo", key=f"{fragment_key}_catalog_btn", use_container_width=True):
            with st.spinner("Gerando Excel..."):
                output = StrategicExport().create_indicator_catalog(
                    data, mode=mode, year=filters.year
                )
            st.download_button(
                "⬇️ Baixar catálogo",
                data=output,
                file_name=f"indicadores_{mode}_{timestamp}.xlsx",
                mime=XLSX_MIME,
                key=f"{fragment_key}_catalog_dl",
                use_container_width=True
            )


__all__ = [
    'render_tier_summary',
    'render_results_table',
    'monthly_detail_fragment',
    'export_fragment',
]
