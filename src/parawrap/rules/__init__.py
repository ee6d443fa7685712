from parawrap.rules.autocorrect import correct
from parawrap.rules.classifier import classify
from parawrap.rules.detector import detect
from parawrap.rules.engine import ParameterListWrappingRule, format_text, lint_text
from parawrap.rules.layout import DEFAULT_INDENT_SIZE, analyze
from parawrap.rules.model import (
    RULE_ID,
    AnchoredViolation,
    LayoutSnapshot,
    ParameterLayout,
    Violation,
)

__all__ = [
    "AnchoredViolation",
    "DEFAULT_INDENT_SIZE",
    "LayoutSnapshot",
    "ParameterLayout",
    "ParameterListWrappingRule",
    "RULE_ID",
    "Violation",
    "analyze",
    "classify",
    "correct",
    "detect",
    "format_text",
    "lint_text",
]
