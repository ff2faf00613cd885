# utils/strategic_performance/semaphore.py
"""
Semaphore classification

One classifier interface with two interchangeable providers:
- FixedTierClassifier: global tier-by-percentage scheme
  (>=110 surpass, >=100 on target, >=90 attention, else critical)
- RuleSetClassifier: per-indicator or global SemaphoreSettings,
  evaluated blue -> green -> yellow -> red, first match wins

Also parses the free-text tier labels stored with indicators
("Acima de 110%", "De 90% a 99%", ">= 100") into SemaphoreRule objects.
"""

import logging
import re
import unicodedata
from abc import ABC, abstractmethod
from typing import Mapping, Optional

from .constants import (
    ATTENTION_THRESHOLD,
    ON_TARGET_THRESHOLD,
    RULE_PRIORITY,
    SURPASS_THRESHOLD,
)
from .models import (
    RULE_TIERS,
    Indicator,
    SemaphoreRule,
    SemaphoreSettings,
    SemaphoreTier,
)
from .parsing import parse_numeric

logger = logging.getLogger(__name__)


# =============================================================================
# CLASSIFIERS
# =============================================================================

class SemaphoreClassifier(ABC):
    """Maps a performance percentage to a semaphore tier."""

    @abstractmethod
    def classify(self, percentage: float) -> SemaphoreTier:
        ...


class FixedTierClassifier(SemaphoreClassifier):
    """Default scheme, always available."""

    def __init__(
        self,
        surpass: float = SURPASS_THRESHOLD,
        on_target: float = ON_TARGET_THRESHOLD,
        attention: float = ATTENTION_THRESHOLD,
    ):
        self.surpass = surpass
        self.on_target = on_target
        self.attention = attention

    def classify(self, percentage: float) -> SemaphoreTier:
        if percentage >= self.surpass:
            return SemaphoreTier.SURPASS
        if percentage >= self.on_target:
            return SemaphoreTier.ON_TARGET
        if percentage >= self.attention:
            return SemaphoreTier.ATTENTION
        return SemaphoreTier.CRITICAL

    def __repr__(self) -> str:
        return f"FixedTierClassifier({self.surpass}, {self.on_target}, {self.attention})"


class RuleSetClassifier(SemaphoreClassifier):
    """Configured operator/threshold rules; no match falls back to critical."""

    def __init__(self, settings: SemaphoreSettings):
        self.settings = settings

    def classify(self, percentage: float) -> SemaphoreTier:
        for slot in RULE_PRIORITY:
            rule = self.settings.rule_for(slot)
            if rule is not None and rule.matches(percentage):
                return RULE_TIERS[slot]
        return SemaphoreTier.CRITICAL

    def __repr__(self) -> str:
        return f"RuleSetClassifier({self.settings!r})"


DEFAULT_CLASSIFIER = FixedTierClassifier()


def select_classifier(
    indicator: Optional[Indicator] = None,
    global_settings: Optional[SemaphoreSettings] = None,
) -> SemaphoreClassifier:
    """
    Pick the classifier for an indicator.

    The indicator's own rules win, then the global rules; with neither
    configured the fixed scheme applies.
    """
    if indicator is not None and indicator.semaphore is not None and indicator.semaphore.is_configured:
        return RuleSetClassifier(indicator.semaphore)
    if global_settings is not None and global_settings.is_configured:
        return RuleSetClassifier(global_settings)
    return DEFAULT_CLASSIFIER


# =============================================================================
# RULE PARSING
# =============================================================================

_NUMBER = r"(-?\d+(?:[.,]\d+)?)\s*%?"

# Checked in order; more specific operators before their prefixes
_SYMBOL_PATTERNS = [
    (re.compile(rf"^between\s+{_NUMBER}\s*(?:and|,|;|\s)\s*{_NUMBER}$"), "between"),
    (re.compile(rf"^>=\s*{_NUMBER}$"), ">="),
    (re.compile(rf"^<=\s*{_NUMBER}$"), "<="),
    (re.compile(rf"^=>\s*{_NUMBER}$"), ">="),
    (re.compile(rf"^=<\s*{_NUMBER}$"), "<="),
    (re.compile(rf"^>\s*{_NUMBER}$"), ">"),
    (re.compile(rf"^<\s*{_NUMBER}$"), "<"),
    (re.compile(rf"^==?\s*{_NUMBER}$"), "="),
    (re.compile(rf"^{_NUMBER}\s*(?:-|a|to|ate)\s*{_NUMBER}$"), "between"),
]

_LABEL_PATTERNS = [
    (re.compile(rf"^de\s+{_NUMBER}\s*(?:a|ate)\s+{_NUMBER}$"), "between"),
    (re.compile(rf"^entre\s+{_NUMBER}\s*e\s+{_NUMBER}$"), "between"),
    (re.compile(rf"^(?:acima de|maior que|superior a|mais de)\s+{_NUMBER}$"), ">"),
    (re.compile(rf"^(?:abaixo de|menor que|inferior a|menos de)\s+{_NUMBER}$"), "<"),
    (re.compile(rf"^(?:a partir de|minimo|no minimo|maior ou igual a)\s+{_NUMBER}$"), ">="),
    (re.compile(rf"^(?:ate|maximo|no maximo|menor ou igual a)\s+{_NUMBER}$"), "<="),
    (re.compile(rf"^(?:igual a|exatamente)\s+{_NUMBER}$"), "="),
]


def _normalize_text(text: str) -> str:
    text = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Mn")
    return re.sub(r"\s+", " ", text.strip().lower())


def parse_semaphore_rule(value) -> Optional[SemaphoreRule]:
    """
    Parse one tier rule.

    Accepts a SemaphoreRule, a dict {"operator", "value", "value2"} or
    free text in operator notation or Portuguese labels. Blank input and
    unrecognised text both give None.
    """
    if value is None or isinstance(value, SemaphoreRule):
        return value

    if isinstance(value, Mapping):
        return _rule_from_mapping(value)

    text = _normalize_text(str(value))
    if not text:
        return None

    for patterns in (_SYMBOL_PATTERNS, _LABEL_PATTERNS):
        for pattern, operator in patterns:
            match = pattern.match(text)
            if match:
                numbers = [parse_numeric(group) for group in match.groups()]
                if operator == "between":
                    return SemaphoreRule("between", numbers[0], numbers[1])
                return SemaphoreRule(operator, numbers[0])

    logger.warning(f"Unrecognised semaphore rule text: '{value}'")
    return None


def _rule_from_mapping(value: Mapping) -> Optional[SemaphoreRule]:
    operator = str(value.get("operator", "")).strip().lower()
    if not operator or value.get("value") in (None, ""):
        return None
    value2 = value.get("value2")
    try:
        return SemaphoreRule(
            operator=operator,
            value=parse_numeric(value.get("value")),
            value2=parse_numeric(value2) if value2 not in (None, "") else None,
        )
    except ValueError as e:
        logger.warning(f"Invalid semaphore rule {dict(value)}: {e}")
        return None


def parse_semaphore_settings(value) -> Optional[SemaphoreSettings]:
    """Build SemaphoreSettings from a {blue, green, yellow, red} mapping."""
    if value is None or isinstance(value, SemaphoreSettings):
        return value
    if not isinstance(value, Mapping):
        logger.warning(f"Ignoring semaphore settings of type {type(value).__name__}")
        return None
    return SemaphoreSettings(**{slot: parse_semaphore_rule(value.get(slot)) for slot in RULE_PRIORITY})


def rule_to_dict(rule: Optional[SemaphoreRule]) -> Optional[dict]:
    if rule is None:
        return None
    data = {"operator": rule.operator, "value": rule.value}
    if rule.value2 is not None:
        data["value2"] = rule.value2
    return data
