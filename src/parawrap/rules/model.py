from __future__ import annotations

from dataclasses import dataclass, field

from parawrap.syntax.tree import SyntaxNode

RULE_ID = "parameter-list-wrapping"

PARAMETER_ON_SEPARATE_LINE = (
    "Parameter should be on a separate line (unless all parameters can fit a single line)"
)


def unexpected_indentation(expected: int, actual: int) -> str:
    return f"Unexpected indentation (expected {expected}, actual {actual})"


def missing_newline_before(closing_text: str) -> str:
    return f'Missing newline before "{closing_text}"'


@dataclass(frozen=True, order=True)
class Violation:
    line: int
    column: int
    rule_id: str
    message: str

    def render(self, path: str) -> str:
        return f"{path}:{self.line}:{self.column}: {self.rule_id} {self.message}"

    def as_entry(self, path: str) -> dict[str, object]:
        return {
            "path": path,
            "line": self.line,
            "col": self.column,
            "code": self.rule_id,
            "message": self.message,
            "severity": "warning",
        }


@dataclass(frozen=True)
class AnchoredViolation:
    """A violation together with the node it is reported at."""

    anchor: SyntaxNode
    violation: Violation


@dataclass(frozen=True)
class ParameterLayout:
    node: SyntaxNode
    break_before: bool
    # width after the last line break of the preceding whitespace
    actual_indent: int | None
    # 0-based column of the parameter's first token when analysed
    column: int
    prefix: SyntaxNode | None


@dataclass(frozen=True)
class LayoutSnapshot:
    parameter_list: SyntaxNode
    is_multiline: bool = False
    declaration_indent: int = 0
    # leading whitespace of the declaration line, tabs included
    declaration_indent_text: str = ""
    expected_param_indent: int = 0
    parameters: tuple[ParameterLayout, ...] = ()
    closing: SyntaxNode | None = None
    closing_break_present: bool = False
    closing_actual_indent: int | None = None
    closing_prefix: SyntaxNode | None = None
    # whitespace leaves that start a line holding a comment directly in the list
    comment_prefixes: tuple[SyntaxNode, ...] = field(default_factory=tuple)

    @property
    def parameter_indent_text(self) -> str:
        extra = self.expected_param_indent - self.declaration_indent
        return self.declaration_indent_text + " " * extra

    @property
    def is_empty(self) -> bool:
        return not self.parameters

    @property
    def per_parameter_break_present(self) -> tuple[bool, ...]:
        return tuple(parameter.break_before for parameter in self.parameters)

    @property
    def is_valid(self) -> bool:
        if not self.is_multiline or self.is_empty:
            return True
        return (
            all(
                parameter.break_before
                and parameter.actual_indent == self.expected_param_indent
                for parameter in self.parameters
            )
            and self.closing_break_present
            and self.closing_actual_indent == self.declaration_indent
        )
