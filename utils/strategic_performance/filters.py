# utils/strategic_performance/filters.py
"""
Sidebar Filter Components for Strategic Performance

Renders the reporting filters inside a sidebar form so the page only
reruns the engine when the user clicks Apply:
- Year (from stored goals) and reporting month
- Perspective and manager
- Semaphore scheme (fixed tiers or configured rules)
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

import streamlit as st

from ..config import config
from .constants import MONTH_FULL_NAMES
from .models import StrategicData

logger = logging.getLogger(__name__)

ALL_OPTION = "Todos"


@dataclass
class StrategicFilterValues:
    """Applied filter state."""
    year: int
    month_index: int
    perspective_id: Optional[str] = None
    manager_id: Optional[str] = None
    use_custom_rules: bool = False

    def to_dict(self) -> Dict:
        return {
            'year': self.year,
            'month_index': self.month_index,
            'perspective_id': self.perspective_id,
            'manager_id': self.manager_id,
            'use_custom_rules': self.use_custom_rules,
        }

    def describe(self, data: StrategicData) -> str:
        parts = [f"{MONTH_FULL_NAMES[self.month_index]}/{self.year}"]
        if self.perspective_id:
            parts.append(f"Perspectiva: {data.perspective_name(self.perspective_id)}")
        if self.manager_id:
            parts.append(f"Gestor: {data.manager_name(self.manager_id)}")
        parts.append("Regras configuradas" if self.use_custom_rules else "Faixas fixas")
        return " | ".join(parts)


def available_years(data: StrategicData, today: Optional[date] = None) -> List[int]:
    """Years with goals, newest first; the current year when there are none."""
    today = today or date.today()
    years = data.goal_years()
    if not years:
        return [today.year]
    return sorted(years, reverse=True)


def default_month_index(year: int, today: Optional[date] = None) -> int:
    """Current month for the current year, December for past years, January otherwise."""
    today = today or date.today()
    if year == today.year:
        return today.month - 1
    if year < today.year:
        return 11
    return 0


def _id_options(items) -> Tuple[List[str], Dict[str, Optional[str]]]:
    """Selectbox labels plus label -> id map, with the 'all' option first."""
    labels = [ALL_OPTION]
    id_map: Dict[str, Optional[str]] = {ALL_OPTION: None}
    for item in items:
        label = item.name or item.id
        if label in id_map:
            label = f"{label} ({item.id})"
        labels.append(label)
        id_map[label] = item.id
    return labels, id_map


class StrategicFilters:
    """
    Sidebar filters for the strategic results page.

    Usage:
        filters = StrategicFilters(data)
        values, submitted = filters.render_filter_form()
    """

    def __init__(self, data: StrategicData):
        self.data = data

    def render_filter_form(self) -> Tuple[StrategicFilterValues, bool]:
        """
        Render filters inside a form - only applies when user clicks Apply.

        Returns:
            Tuple of (StrategicFilterValues, submitted boolean)
        """
        years = available_years(self.data)
        perspective_labels, perspective_map = _id_options(self.data.perspectives)
        manager_labels, manager_map = _id_options(self.data.managers)
        custom_rules_enabled = config.is_feature_enabled("CUSTOM_SEMAPHORE")

        with st.sidebar:
            st.header("🎛️ Filtros")

            with st.form("strategic_filter_form", border=False):
                st.markdown("**📅 Período**")
                col_y, col_m = st.columns(2)
                with col_y:
                    year = st.selectbox("Ano", options=years, index=0, key="sp_year")
                with col_m:
                    month_index = st.selectbox(
                        "Mês",
                        options=list(range(12)),
                        index=default_month_index(years[0]),
                        format_func=lambda idx: MONTH_FULL_NAMES[idx],
                        key="sp_month",
                        help="Mês de referência. Modos acumulados usam os meses até ele."
                    )

                st.divider()

                st.markdown("**🧭 Mapa estratégico**")
                perspective_label = st.selectbox(
                    "Perspectiva", options=perspective_labels, key="sp_perspective"
                )
                manager_label = st.selectbox(
                    "Gestor", options=manager_labels, key="sp_manager"
                )

                st.divider()

                st.markdown("**🚦 Semáforo**")
                if custom_rules_enabled:
                    use_custom_rules = st.toggle(
                        "Usar regras configuradas",
                        value=False,
                        key="sp_custom_rules",
                        help="Usa as regras do indicador ou as regras globais. "
                             "Desligado: Superou ≥110%, Na meta ≥100%, Atenção ≥90%."
                    )
                else:
                    use_custom_rules = False
                    st.caption("Faixas fixas: ≥110% / ≥100% / ≥90%")

                submitted = st.form_submit_button(
                    "🔍 Aplicar",
                    use_container_width=True,
                    type="primary"
                )

        values = StrategicFilterValues(
            year=int(year),
            month_index=int(month_index),
            perspective_id=perspective_map.get(perspective_label),
            manager_id=manager_map.get(manager_label),
            use_custom_rules=bool(use_custom_rules),
        )

        if submitted:
            logger.info(f"Filters applied: {values.to_dict()}")

        return values, submitted
