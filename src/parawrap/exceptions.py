"""Error taxonomy for parawrap."""

from __future__ import annotations


class ParawrapError(RuntimeError):
    """Base class for every error raised by parawrap."""


class ParseFailure(ParawrapError):
    """The source could not be turned into a syntax tree at all.

    This is fatal for the file being processed. The rule never sees it; the
    host (runner or CLI) reports it and moves on to the next file.
    """

    def __init__(self, message: str, *, line: int = 0, column: int = 0):
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        base = super().__str__()
        if self.line:
            return f"{base} at {self.line}:{self.column}"
        return base


class MalformedTreeError(ParawrapError):
    """A parameter list is missing a delimiter or contains an error node.

    Raised by the layout analyzer and recovered by the rule for that single
    list: nothing is reported and nothing is rewritten.
    """
