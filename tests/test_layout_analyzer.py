from __future__ import annotations

import pytest

from parawrap.exceptions import MalformedTreeError
from parawrap.rules.autocorrect import correct
from parawrap.rules.classifier import classify, owner_kind
from parawrap.rules.detector import detect
from parawrap.rules.layout import analyze, indent_after_break, starts_line
from parawrap.syntax.kinds import NodeKind
from parawrap.syntax.parser import parse
from parawrap.syntax.tree import SyntaxTree


def _lists(source: str):
    tree = parse(source)
    return tree, [
        node for node in tree.root.walk() if node.kind is NodeKind.VALUE_PARAMETER_LIST
    ]


def test_indent_after_break() -> None:
    assert indent_after_break("\n    ") == 4
    assert indent_after_break("\n\n  ") == 2
    assert indent_after_break("\n") == 0


def test_starts_line_requires_whitespace_with_newline() -> None:
    tree = parse("fun f(a: Int,\n b: Int)")
    leaves = list(tree.root.leaves())
    assert [leaf.text for leaf in leaves if starts_line(leaf)] == ["\n "]
    assert not starts_line(None)


def test_snapshot_of_single_line_list() -> None:
    _, (parameter_list,) = _lists("fun f(a: Int, b: Int)")
    snapshot = analyze(parameter_list)
    assert not snapshot.is_multiline
    assert snapshot.is_valid
    assert snapshot.per_parameter_break_present == (False, False)
    assert detect(snapshot) == []


def test_snapshot_of_partially_wrapped_list() -> None:
    _, (parameter_list,) = _lists("class A {\n    fun f(a: Int,\n          b: Int)\n}")
    snapshot = analyze(parameter_list)
    assert snapshot.is_multiline
    assert snapshot.declaration_indent == 4
    assert snapshot.expected_param_indent == 8
    assert snapshot.per_parameter_break_present == (False, True)
    assert [parameter.actual_indent for parameter in snapshot.parameters] == [None, 10]
    assert [parameter.column for parameter in snapshot.parameters] == [10, 10]
    assert not snapshot.closing_break_present
    assert not snapshot.is_valid


def test_indent_size_changes_expected_indent() -> None:
    _, (parameter_list,) = _lists("fun f(\n  a: Int\n)")
    assert analyze(parameter_list, indent_size=2).is_valid
    assert not analyze(parameter_list, indent_size=4).is_valid


def test_empty_list_snapshot() -> None:
    _, (parameter_list,) = _lists("fun f(\n    // nothing\n)")
    snapshot = analyze(parameter_list)
    assert snapshot.is_empty
    assert snapshot.is_valid
    assert detect(snapshot) == []


def _hand_built_list(*parts: tuple[NodeKind, str]):
    tree = SyntaxTree()
    function = tree.append(tree.root, NodeKind.FUN)
    tree.append(function, NodeKind.IDENTIFIER, "fun")
    tree.append(function, NodeKind.WHITE_SPACE, " ")
    tree.append(function, NodeKind.IDENTIFIER, "f")
    parameter_list = tree.append(function, NodeKind.VALUE_PARAMETER_LIST)
    for kind, text in parts:
        if kind is NodeKind.VALUE_PARAMETER:
            parameter = tree.append(parameter_list, kind)
            tree.append(parameter, NodeKind.IDENTIFIER, text)
        else:
            tree.append(parameter_list, kind, text)
    return parameter_list


def test_error_node_makes_list_malformed() -> None:
    parameter_list = _hand_built_list(
        (NodeKind.LPAR, "("),
        (NodeKind.VALUE_PARAMETER, "a"),
        (NodeKind.COMMA, ","),
        (NodeKind.WHITE_SPACE, "\n "),
        (NodeKind.VALUE_PARAMETER, "b"),
        (NodeKind.RPAR, ")"),
    )
    analyze(parameter_list)
    error_parameter = parameter_list.children[4]
    parameter_list.tree.append(error_parameter, NodeKind.ERROR_ELEMENT, "#")
    with pytest.raises(MalformedTreeError):
        analyze(parameter_list)


def test_missing_closing_makes_list_malformed() -> None:
    parameter_list = _hand_built_list(
        (NodeKind.LPAR, "("),
        (NodeKind.VALUE_PARAMETER, "a"),
    )
    with pytest.raises(MalformedTreeError):
        analyze(parameter_list)
    with pytest.raises(MalformedTreeError):
        analyze(_hand_built_list((NodeKind.LPAR, "(")))


def test_classify_excludes_lambda_parameters() -> None:
    _, lists = _lists("fun f(a: Int) {\n    run { x,\n  y -> x }\n}")
    assert [owner_kind(node) for node in lists] == [
        NodeKind.FUN,
        NodeKind.FUNCTION_LITERAL,
    ]
    assert classify(lists[0]) == lists[0]
    assert classify(lists[1]) is None
    assert classify(lists[0].parent) is None


def test_detect_anchors_at_parameters_and_closing() -> None:
    _, (parameter_list,) = _lists("fun f(a: Int,\n  b: Int)")
    anchored = detect(analyze(parameter_list))
    assert [item.anchor.kind for item in anchored] == [
        NodeKind.VALUE_PARAMETER,
        NodeKind.VALUE_PARAMETER,
        NodeKind.RPAR,
    ]
    assert [(item.violation.line, item.violation.column) for item in anchored] == [
        (1, 7),
        (2, 3),
        (2, 9),
    ]


def test_correct_counts_edits_and_is_noop_on_valid_list() -> None:
    tree, (parameter_list,) = _lists("fun f(a: Int,\n  b: Int)")
    assert correct(analyze(parameter_list)) == 3
    assert tree.text() == "fun f(\n    a: Int,\n    b: Int\n)"
    assert correct(analyze(parameter_list)) == 0


def test_correct_keeps_blank_lines_before_comments() -> None:
    tree, (parameter_list,) = _lists("fun f(\n  a: Int,\n\n  // tail\n  b: Int\n)")
    correct(analyze(parameter_list))
    assert tree.text() == "fun f(\n    a: Int,\n\n    // tail\n    b: Int\n)"


def test_tab_indented_declaration_keeps_its_indent_text() -> None:
    tree, (parameter_list,) = _lists("class A {\n\tfun f(a: Int,\n\t      b: Int)\n}")
    snapshot = analyze(parameter_list)
    assert snapshot.declaration_indent_text == "\t"
    assert snapshot.declaration_indent == 1
    assert snapshot.parameter_indent_text == "\t    "
    correct(snapshot)
    assert tree.text() == "class A {\n\tfun f(\n\t    a: Int,\n\t    b: Int\n\t)\n}"
    assert analyze(parameter_list).is_valid
