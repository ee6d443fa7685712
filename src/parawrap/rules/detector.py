from __future__ import annotations

from parawrap.rules.model import (
    PARAMETER_ON_SEPARATE_LINE,
    RULE_ID,
    AnchoredViolation,
    LayoutSnapshot,
    Violation,
    missing_newline_before,
    unexpected_indentation,
)
from parawrap.syntax.tree import SyntaxNode


def _at(node: SyntaxNode, message: str) -> AnchoredViolation:
    line, column = node.tree.position(node)
    return AnchoredViolation(
        anchor=node,
        violation=Violation(line=line, column=column, rule_id=RULE_ID, message=message),
    )


def detect(snapshot: LayoutSnapshot) -> list[AnchoredViolation]:
    """Violations of the wrapping invariant, in document order."""
    if not snapshot.is_multiline or snapshot.is_empty:
        return []
    found: list[AnchoredViolation] = []
    expected = snapshot.expected_param_indent
    for parameter in snapshot.parameters:
        if not parameter.break_before:
            found.append(_at(parameter.node, PARAMETER_ON_SEPARATE_LINE))
        elif parameter.actual_indent != expected:
            found.append(
                _at(parameter.node, unexpected_indentation(expected, parameter.actual_indent))
            )
    closing = snapshot.closing
    if closing is None:
        return found
    if not snapshot.closing_break_present:
        found.append(_at(closing, missing_newline_before(closing.text)))
    elif snapshot.closing_actual_indent != snapshot.declaration_indent:
        found.append(
            _at(
                closing,
                unexpected_indentation(
                    snapshot.declaration_indent, snapshot.closing_actual_indent
                ),
            )
        )
    return found
