from __future__ import annotations

from parawrap.rules.layout import indent_after_break, starts_line
from parawrap.rules.model import LayoutSnapshot, ParameterLayout
from parawrap.syntax.kinds import NodeKind
from parawrap.syntax.tree import SyntaxNode


def _reindent(text: str, indent_text: str) -> str:
    head, newline, _ = text.rpartition("\n")
    return head + newline + indent_text


def _shift(text: str, delta: int) -> str:
    head, _, indent = text.rpartition("\n")
    if delta > 0:
        indent = " " * delta + indent
    else:
        indent = indent[min(-delta, len(indent)) :]
    return head + "\n" + indent


def _set_prefix(anchor: SyntaxNode, prefix: SyntaxNode | None, indent_text: str) -> None:
    tree = anchor.tree
    if prefix is not None and prefix.kind is NodeKind.WHITE_SPACE:
        tree.replace_text(prefix, tree.newline + indent_text)
    else:
        tree.insert_before(anchor, NodeKind.WHITE_SPACE, tree.newline + indent_text)


def _shift_continuation_lines(parameter: ParameterLayout, target: int) -> None:
    # keep multi-line annotations and default values aligned with their parameter
    delta = target - parameter.column
    if delta == 0:
        return
    tree = parameter.node.tree
    for leaf in list(parameter.node.leaves()):
        if starts_line(leaf):
            tree.replace_text(leaf, _shift(leaf.text, delta))


def correct(snapshot: LayoutSnapshot) -> int:
    """Rewrite whitespace so the list satisfies the wrapping invariant.

    Edits are computed from ``snapshot`` and applied once; returns the number
    of whitespace leaves replaced or inserted. Existing line breaks keep their
    terminator; new ones use the tree's.
    """
    if snapshot.is_valid:
        return 0
    tree = snapshot.parameter_list.tree
    expected = snapshot.expected_param_indent
    parameter_indent = snapshot.parameter_indent_text
    edits = 0
    for prefix in snapshot.comment_prefixes:
        if indent_after_break(prefix.text) != expected:
            tree.replace_text(prefix, _reindent(prefix.text, parameter_indent))
            edits += 1
    for parameter in snapshot.parameters:
        if parameter.break_before and parameter.actual_indent == expected:
            continue
        _set_prefix(parameter.node, parameter.prefix, parameter_indent)
        _shift_continuation_lines(parameter, expected)
        edits += 1
    closing = snapshot.closing
    if closing is not None and not (
        snapshot.closing_break_present
        and snapshot.closing_actual_indent == snapshot.declaration_indent
    ):
        _set_prefix(closing, snapshot.closing_prefix, snapshot.declaration_indent_text)
        edits += 1
    return edits
