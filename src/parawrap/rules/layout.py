from __future__ import annotations

from parawrap.exceptions import MalformedTreeError
from parawrap.rules.model import LayoutSnapshot, ParameterLayout
from parawrap.syntax.kinds import NodeKind, is_comment
from parawrap.syntax.tree import SyntaxNode

DEFAULT_INDENT_SIZE = 4


def starts_line(leaf: SyntaxNode | None) -> bool:
    """True when ``leaf`` is whitespace ending the previous line."""
    return leaf is not None and leaf.kind is NodeKind.WHITE_SPACE and "\n" in leaf.text


def indent_after_break(text: str) -> int:
    return len(text) - text.rfind("\n") - 1


def _delimiters(parameter_list: SyntaxNode) -> tuple[SyntaxNode, SyntaxNode]:
    children = parameter_list.children
    if len(children) < 2:
        raise MalformedTreeError("parameter list is missing a delimiter")
    opening, closing = children[0], children[-1]
    if opening.kind is not NodeKind.LPAR or closing.kind is not NodeKind.RPAR:
        raise MalformedTreeError("parameter list is missing a delimiter")
    for node in parameter_list.walk():
        if node.kind is NodeKind.ERROR_ELEMENT:
            raise MalformedTreeError(f"error node {node.text!r} inside parameter list")
    return opening, closing


def analyze(
    parameter_list: SyntaxNode, *, indent_size: int = DEFAULT_INDENT_SIZE
) -> LayoutSnapshot:
    """Describe how ``parameter_list`` is laid out in the current tree.

    Raises :class:`MalformedTreeError` when the list has no delimiters or
    contains an error node.
    """
    opening, closing = _delimiters(parameter_list)
    inner = parameter_list.children[1:-1]
    if not any(child.kind is NodeKind.VALUE_PARAMETER for child in inner):
        return LayoutSnapshot(parameter_list=parameter_list)

    tree = parameter_list.tree
    is_multiline = any(
        starts_line(leaf) for leaf in parameter_list.leaves()
    )
    declaration_indent_text = tree.line_indent_text(opening)
    declaration_indent = len(declaration_indent_text)
    expected_param_indent = declaration_indent + indent_size

    parameters: list[ParameterLayout] = []
    comment_prefixes: list[SyntaxNode] = []
    previous = opening
    for child in inner:
        if child.kind is NodeKind.VALUE_PARAMETER:
            broken = starts_line(previous)
            actual = indent_after_break(previous.text) if broken else None
            parameters.append(
                ParameterLayout(
                    node=child,
                    break_before=broken,
                    actual_indent=actual,
                    column=actual if actual is not None else tree.column(child),
                    prefix=previous,
                )
            )
            previous = child.last_leaf() or child
        else:
            if is_comment(child.kind) and starts_line(previous):
                comment_prefixes.append(previous)
            previous = child

    closing_break = starts_line(previous)
    return LayoutSnapshot(
        parameter_list=parameter_list,
        is_multiline=is_multiline,
        declaration_indent=declaration_indent,
        declaration_indent_text=declaration_indent_text,
        expected_param_indent=expected_param_indent,
        parameters=tuple(parameters),
        closing=closing,
        closing_break_present=closing_break,
        closing_actual_indent=indent_after_break(previous.text) if closing_break else None,
        closing_prefix=previous,
        comment_prefixes=tuple(comment_prefixes),
    )
