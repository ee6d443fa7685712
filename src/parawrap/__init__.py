"""Parawrap package root."""

from parawrap.exceptions import MalformedTreeError, ParawrapError, ParseFailure
from parawrap.rules import ParameterListWrappingRule, Violation

__all__ = [
    "__version__",
    "MalformedTreeError",
    "ParameterListWrappingRule",
    "ParawrapError",
    "ParseFailure",
    "Violation",
]

__version__ = "0.1.0"
