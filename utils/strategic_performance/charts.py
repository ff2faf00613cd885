# utils/strategic_performance/charts.py
"""
Altair Chart Builders for Strategic Performance

- build_monthly_chart(): planned vs realized bars with the % line
- build_tier_distribution_chart(): indicators per semaphore tier
"""

import logging

import altair as alt
import numpy as np
import pandas as pd

from .constants import (
    CHART_HEIGHT,
    CHART_WIDTH,
    COLORS,
    MONTH_ORDER,
    TIER_ORDER,
    TIER_STYLES,
)

logger = logging.getLogger(__name__)


class StrategicCharts:
    """Chart builders for the strategic results dashboard."""

    # =========================================================================
    # MONTHLY CHART
    # =========================================================================

    @staticmethod
    def build_monthly_chart(
        monthly_df: pd.DataFrame,
        indicator_id: str,
        title: str = "📊 Meta x Realizado por mês"
    ) -> alt.Chart:
        """
        Build monthly chart for one indicator.

        Bars show the aggregated target and realized values per month,
        the line shows the performance percentage. Months without data
        are left empty.

        Args:
            monthly_df: Output of PerformanceReport.build_monthly_matrix()
            indicator_id: Indicator to plot
            title: Chart title

        Returns:
            Altair chart
        """
        if monthly_df.empty:
            return StrategicCharts._empty_chart("Sem dados")

        df = monthly_df[monthly_df['indicator_id'] == indicator_id].copy()
        if df.empty or not df['valid'].any():
            return StrategicCharts._empty_chart("Sem dados para o indicador")

        for col in ('target', 'realized', 'percentage'):
            df[col] = np.where(df['valid'], df[col], np.nan)

        bar_data = df.melt(
            id_vars=['month'],
            value_vars=['target', 'realized'],
            var_name='Série',
            value_name='Valor'
        )
        bar_data['Série'] = bar_data['Série'].map({'target': 'Meta', 'realized': 'Realizado'})

        color_scale = alt.Scale(
            domain=['Meta', 'Realizado'],
            range=[COLORS['planned'], COLORS['realized']]
        )

        bars = alt.Chart(bar_data).mark_bar().encode(
            x=alt.X('month:N', sort=MONTH_ORDER, title='Mês'),
            y=alt.Y('Valor:Q', title='Valor'),
            color=alt.Color('Série:N', scale=color_scale, legend=alt.Legend(orient='bottom')),
            xOffset='Série:N',
            tooltip=[
                alt.Tooltip('month:N', title='Mês'),
                alt.Tooltip('Série:N', title='Série'),
                alt.Tooltip('Valor:Q', title='Valor', format=',.2f')
            ]
        )

        line = alt.Chart(df).mark_line(
            point=True,
            color=COLORS['percentage'],
            strokeWidth=2
        ).encode(
            x=alt.X('month:N', sort=MONTH_ORDER),
            y=alt.Y('percentage:Q', title='%', axis=alt.Axis(format='.0f')),
            tooltip=[
                alt.Tooltip('month:N', title='Mês'),
                alt.Tooltip('percentage:Q', title='%', format='.2f'),
                alt.Tooltip('tier_label:N', title='Semáforo')
            ]
        )

        chart = alt.layer(bars, line).resolve_scale(
            y='independent'
        ).properties(
            width=CHART_WIDTH,
            height=CHART_HEIGHT,
            title=title
        )

        return chart

    # =========================================================================
    # TIER DISTRIBUTION
    # =========================================================================

    @staticmethod
    def build_tier_distribution_chart(
        results_df: pd.DataFrame,
        title: str = "🚦 Indicadores por semáforo"
    ) -> alt.Chart:
        """Horizontal bars with the number of indicators in each tier."""
        if results_df.empty:
            return StrategicCharts._empty_chart("Sem dados")

        counts = results_df['tier'].value_counts()
        df = pd.DataFrame({
            'tier': TIER_ORDER,
            'label': [TIER_STYLES[t]['label'] for t in TIER_ORDER],
            'count': [int(counts.get(t, 0)) for t in TIER_ORDER],
        })
        labels = df['label'].tolist()

        bars = alt.Chart(df).mark_bar().encode(
            y=alt.Y('label:N', sort=labels, title=''),
            x=alt.X('count:Q', title='Indicadores', axis=alt.Axis(tickMinStep=1)),
            color=alt.Color(
                'label:N',
                scale=alt.Scale(domain=labels, range=[TIER_STYLES[t]['hex'] for t in TIER_ORDER]),
                legend=None
            ),
            tooltip=[
                alt.Tooltip('label:N', title='Semáforo'),
                alt.Tooltip('count:Q', title='Indicadores')
            ]
        )

        text = alt.Chart(df).mark_text(align='left', dx=5, fontSize=11).encode(
            y=alt.Y('label:N', sort=labels),
            x=alt.X('count:Q'),
            text=alt.Text('count:Q'),
            color=alt.value(COLORS['text_dark'])
        )

        return alt.layer(bars, text).properties(
            width=CHART_WIDTH,
            height=220,
            title=title
        )

    @staticmethod
    def _empty_chart(message: str = "Sem dados") -> alt.Chart:
        """Create an empty chart with a message."""
        return alt.Chart(pd.DataFrame({'note': [message]})).mark_text(
            text=message,
            fontSize=16,
            color=COLORS['text_dark']
        ).properties(
            width=CHART_WIDTH,
            height=200
        )
