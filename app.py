# app.py
"""
Strategic Performance Dashboard - Main Entry Point

Version: 1.0.0
"""

import logging

import streamlit as st

from utils.config import config
from utils.db import check_db_connection
from utils.strategic_performance import StrategicRepository, TIER_ORDER, TIER_STYLES

# Configure logging
logging.basicConfig(
    level=getattr(logging, config.get_app_setting("LOG_LEVEL", "INFO"), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# ==================== PAGE CONFIGURATION ====================

APP_NAME = "Gestão Estratégica"
APP_ICON = "🎯"
APP_VERSION = "1.0.0"

st.set_page_config(
    page_title=f"{APP_NAME} - Desempenho",
    page_icon=APP_ICON,
    layout="wide",
    initial_sidebar_state="expanded"
)

# ==================== CUSTOM CSS ====================

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        margin-bottom: 0.5rem;
        color: #1F4E79;
    }

    .sub-header {
        font-size: 1.1rem;
        color: #666;
        margin-bottom: 2rem;
    }

    .info-card {
        background: #f8f9fa;
        padding: 1.5rem;
        border-radius: 0.5rem;
        border-left: 4px solid #1F4E79;
        margin-bottom: 1rem;
    }

    .footer {
        text-align: center;
        color: #888;
        padding: 1rem;
        margin-top: 3rem;
        border-top: 1px solid #eee;
        font-size: 0.9rem;
    }
</style>
""", unsafe_allow_html=True)


# ==================== HELPER FUNCTIONS ====================

def show_data_status():
    """Stored document summary for the landing page"""
    try:
        data = StrategicRepository().load()
    except ValueError as e:
        st.error(f"⚠️ {e}")
        return

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Perspectivas", len(data.perspectives))
    with col2:
        st.metric("Objetivos", len(data.objectives))
    with col3:
        st.metric("Indicadores", len(data.indicators))
    with col4:
        st.metric("Metas", len(data.goals))

    if not data.indicators:
        st.info("📭 Nenhum indicador cadastrado. Importe um backup JSON na página de resultados.")


def show_main_app():
    """Display the landing page"""
    st.markdown(f'<p class="main-header">{APP_ICON} {APP_NAME}</p>', unsafe_allow_html=True)
    st.markdown(
        '<p class="sub-header">Acompanhamento de indicadores contra metas mensais</p>',
        unsafe_allow_html=True
    )

    db_ok, db_error = check_db_connection()
    if not db_ok:
        st.error(f"⚠️ {db_error}")
        return

    show_data_status()

    st.markdown("### 📊 Painéis disponíveis")
    st.markdown("""
    <div class="info-card">
        <strong>🎯 Resultados Estratégicos</strong><br>
        <span style="color: #666;">Meta x Realizado por indicador, semáforo, evolução mensal e exportação Excel.</span>
    </div>
    """, unsafe_allow_html=True)

    st.markdown("#### 🚦 Semáforo")
    legend = " &nbsp; ".join(
        f"{TIER_STYLES[tier]['icon']} {TIER_STYLES[tier]['label']}" for tier in TIER_ORDER
    )
    st.markdown(legend, unsafe_allow_html=True)
    st.caption("Faixas fixas: Superou ≥110% · Na meta ≥100% · Atenção ≥90% · Crítico abaixo de 90%")

    if config.is_feature_enabled("DEBUG_MODE"):
        st.markdown("---")
        with st.expander("🔧 System Status"):
            db_config = config.get_db_config()
            st.text(f"Database: {db_config.masked_url()}")
            st.text(f"Environment: {'cloud' if config.is_cloud else 'local'}")
            st.json(config.app_config)

    st.markdown(f"""
    <div class="footer">
        <strong>{APP_NAME}</strong> v{APP_VERSION}
    </div>
    """, unsafe_allow_html=True)


# ==================== MAIN ====================

def main():
    """Main application entry point"""
    show_main_app()


if __name__ == "__main__":
    main()
