# utils/strategic_performance/constants.py
"""
Constants for Strategic Performance Module

Centralized configuration for:
- Semaphore tiers (colors, icons, labels)
- Fixed tier thresholds
- Polarity and calculation mode vocabularies
- Month labels
- Excel styles and chart settings
"""

# =====================================================================
# SEMAPHORE TIERS
# =====================================================================

# Fixed global tier-by-percentage scheme
SURPASS_THRESHOLD = 110.0
ON_TARGET_THRESHOLD = 100.0
ATTENTION_THRESHOLD = 90.0

# Tolerance for the "=" rule operator
EQUALITY_TOLERANCE = 1e-6

TIER_STYLES = {
    "surpass": {
        "label": "Superou",
        "color": "blue",
        "hex": "#1f77b4",
        "fill": "BDD7EE",
        "icon": "🔵",
    },
    "on_target": {
        "label": "Na meta",
        "color": "green",
        "hex": "#28a745",
        "fill": "C6EFCE",
        "icon": "🟢",
    },
    "attention": {
        "label": "Atenção",
        "color": "yellow",
        "hex": "#f1c40f",
        "fill": "FFEB9C",
        "icon": "🟡",
    },
    "critical": {
        "label": "Crítico",
        "color": "red",
        "hex": "#dc3545",
        "fill": "FFC7CE",
        "icon": "🔴",
    },
    "no_data": {
        "label": "Sem dados",
        "color": "grey",
        "hex": "#9ca3af",
        "fill": "EDEDED",
        "icon": "⚪",
    },
}

# Display order (best to worst, no-data last)
TIER_ORDER = ["surpass", "on_target", "attention", "critical", "no_data"]

# Rule evaluation priority for custom semaphore settings
RULE_PRIORITY = ["blue", "green", "yellow", "red"]

NO_DATA_DISPLAY = "-"

# =====================================================================
# POLARITY & CALCULATION MODES
# =====================================================================

POLARITY_ALIASES = {
    "higher_better": "higher_better",
    "maior_melhor": "higher_better",
    "lower_better": "lower_better",
    "menor_melhor": "lower_better",
    "stable_band": "stable_band",
    "estavel": "stable_band",
    "estável": "stable_band",
}

POLARITY_LABELS = {
    "higher_better": "Quanto Maior, Melhor",
    "lower_better": "Quanto Menor, Melhor",
    "stable_band": "Estável",
}

CALC_MODE_ALIASES = {
    "isolated": "isolated",
    "isolado": "isolated",
    "accumulated": "accumulated",
    "acumulado": "accumulated",
    "year_to_date": "year_to_date",
    "ytd": "year_to_date",
    "average": "average",
    "media": "average",
    "média": "average",
    "rolling": "rolling",
    "movel": "rolling",
    "móvel": "rolling",
}

CALC_MODE_LABELS = {
    "isolated": "Isolado (mês)",
    "accumulated": "Acumulado",
    "year_to_date": "Acumulado no ano",
    "average": "Média",
    "rolling": "Janela móvel",
}

DEFAULT_ROLLING_WINDOW = 3

SEMAPHORE_OPERATORS = ["=", ">", "<", ">=", "<=", "between"]

# Labels shipped with a fresh document (global semaphore defaults)
DEFAULT_SEMAPHORE_LABELS = {
    "blue": "Acima de 110%",
    "green": "De 100% a 110%",
    "yellow": "De 90% a 99%",
    "red": "Abaixo de 90%",
}

# =====================================================================
# MONTHS & LOCALE
# =====================================================================

MONTHS_IN_YEAR = 12

MONTH_ORDER = [
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez"
]

MONTH_FULL_NAMES = [
    "Janeiro", "Fevereiro", "Março", "Abril", "Maio", "Junho",
    "Julho", "Agosto", "Setembro", "Outubro", "Novembro", "Dezembro"
]

# (thousands separator, decimal separator)
NUMBER_LOCALES = {
    "pt_BR": (".", ","),
    "en_US": (",", "."),
}

DEFAULT_NUMBER_LOCALE = "pt_BR"

STATUS_LABELS = {
    "final": "Definitivo",
    "draft": "Rascunho",
}

# =====================================================================
# STORAGE
# =====================================================================

DOCUMENT_TABLE = "kpi_system"
DEFAULT_DOCUMENT_ID = "company_data"

# =====================================================================
# CACHE
# =====================================================================

CACHE_KEY_DATA = "strategic_performance_data"
CACHE_TTL_SECONDS = 300

# =====================================================================
# CHART DIMENSIONS
# =====================================================================

CHART_WIDTH = 800
CHART_HEIGHT = 400

COLORS = {
    "planned": "#aec7e8",
    "realized": "#1f77b4",
    "percentage": "#800080",
    "text_dark": "#333333",
    "grid": "#e0e0e0",
}

# =====================================================================
# EXCEL EXPORT STYLES
# =====================================================================

EXCEL_STYLES = {
    "header_fill_color": "1F4E79",
    "header_font_color": "FFFFFF",
    "subheader_fill_color": "D9E1F2",
    "number_format": "#,##0.00",
    "percent_format": "0.00",
}
