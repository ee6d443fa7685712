from __future__ import annotations

import textwrap

import pytest

from parawrap.rules.engine import ParameterListWrappingRule, format_text, lint_text
from parawrap.rules.model import RULE_ID, Violation
from parawrap.syntax.parser import parse

SEPARATE_LINE = (
    "Parameter should be on a separate line (unless all parameters can fit a single line)"
)
MISSING_NEWLINE = 'Missing newline before ")"'


def _src(text: str) -> str:
    return textwrap.dedent(text).strip("\n")


def _v(line: int, column: int, message: str) -> Violation:
    return Violation(line=line, column=column, rule_id=RULE_ID, message=message)


def _format(text: str, **kwargs) -> str:
    formatted, _ = format_text(text, **kwargs)
    return formatted


def test_lint_class_parameter_list() -> None:
    source = _src(
        """
        class ClassA(paramA: String, paramB: String,
                     paramC: String)
        """
    )
    assert lint_text(source) == [
        _v(1, 14, SEPARATE_LINE),
        _v(1, 30, SEPARATE_LINE),
        _v(2, 14, "Unexpected indentation (expected 4, actual 13)"),
        _v(2, 28, MISSING_NEWLINE),
    ]


def test_lint_class_parameter_list_single_line_is_valid() -> None:
    source = "class ClassA(paramA: String, paramB: String, paramC: String)"
    assert lint_text(source) == []


def test_lint_class_parameter_list_exploded_is_valid() -> None:
    source = _src(
        """
        class ClassA(
            paramA: String,
            paramB: String,
            paramC: String
        )
        """
    )
    assert lint_text(source) == []


def test_format_class_parameter_list() -> None:
    source = _src(
        """
        class ClassA(paramA: String, paramB: String,
                     paramC: String)
        """
    )
    assert _format(source) == _src(
        """
        class ClassA(
            paramA: String,
            paramB: String,
            paramC: String
        )
        """
    )


def test_lint_function_parameter_list() -> None:
    source = _src(
        """
        fun f(a: Any,
              b: Any,
              c: Any) {
        }
        """
    )
    assert lint_text(source) == [
        _v(1, 7, SEPARATE_LINE),
        _v(2, 7, "Unexpected indentation (expected 4, actual 6)"),
        _v(3, 7, "Unexpected indentation (expected 4, actual 6)"),
        _v(3, 13, MISSING_NEWLINE),
    ]


def test_format_function_parameter_list() -> None:
    source = _src(
        """
        fun f(a: Any,
              b: Any,
              c: Any) {
        }
        """
    )
    assert _format(source) == _src(
        """
        fun f(
            a: Any,
            b: Any,
            c: Any
        ) {
        }
        """
    )


def test_lambda_parameters_are_ignored() -> None:
    source = _src(
        """
        val fieldExample =
              LongNameClass { paramA,
                              paramB,
                              paramC ->
                  ClassB(paramA, paramB, paramC)
              }
        """
    )
    assert lint_text(source) == []
    assert _format(source) == source


def test_format_preserves_enclosing_indent() -> None:
    source = _src(
        """
        class A {
            fun f(a: Any,
                  b: Any,
                  c: Any) {
            }
        }
        """
    )
    assert _format(source) == _src(
        """
        class A {
            fun f(
                a: Any,
                b: Any,
                c: Any
            ) {
            }
        }
        """
    )


def test_format_shifts_annotation_continuation_lines() -> None:
    source = _src(
        """
        class A {
            fun f(@Annotation
                  a: Any,
                  @Annotation([
                      "v1",
                      "v2"
                  ])
                  b: Any,
                  c: Any =
                      false,
                  @Annotation d: Any) {
            }
        }
        """
    )
    assert _format(source) == _src(
        """
        class A {
            fun f(
                @Annotation
                a: Any,
                @Annotation([
                    "v1",
                    "v2"
                ])
                b: Any,
                c: Any =
                    false,
                @Annotation d: Any
            ) {
            }
        }
        """
    )


def test_format_corrects_closing_parenthesis_indent() -> None:
    source = _src(
        """
        class A {
            fun f(a: Any,
                  b: Any,
                  c: Any
               ) {
            }
        }
        """
    )
    assert _format(source) == _src(
        """
        class A {
            fun f(
                a: Any,
                b: Any,
                c: Any
            ) {
            }
        }
        """
    )


def test_format_nested_function_type() -> None:
    source = _src(
        """
        fun visit(
            node: ASTNode,
                autoCorrect: Boolean,
            emit: (offset: Int, errorMessage: String,
            canBeAutoCorrected: Boolean) -> Unit
        ) {}
        """
    )
    assert _format(source) == _src(
        """
        fun visit(
            node: ASTNode,
            autoCorrect: Boolean,
            emit: (
                offset: Int,
                errorMessage: String,
                canBeAutoCorrected: Boolean
            ) -> Unit
        ) {}
        """
    )


def test_format_nested_declarations_already_valid() -> None:
    source = _src(
        """
        fun visit(
            node: ASTNode,
            autoCorrect: Boolean,
            emit: (offset: Int, errorMessage: String, canBeAutoCorrected: Boolean) -> Unit
        ) {}
        """
    )
    assert lint_text(source) == []
    assert _format(source) == source


def test_comments_between_parameters_are_not_reported() -> None:
    source = _src(
        """
        data class A(
           /*
            * comment
            */
           //
           var v: String
        )
        """
    )
    assert lint_text(source) == [
        _v(6, 4, "Unexpected indentation (expected 4, actual 3)"),
    ]


def test_format_reindents_comment_lines_with_the_parameters() -> None:
    source = _src(
        """
        data class A(
           //
           var v: String
        )
        """
    )
    assert _format(source) == _src(
        """
        data class A(
            //
            var v: String
        )
        """
    )


def test_secondary_constructor_parameter_list() -> None:
    source = _src(
        """
        class A {
            constructor(a: Int,
                        b: Int)
        }
        """
    )
    assert lint_text(source) == [
        _v(2, 17, SEPARATE_LINE),
        _v(3, 17, "Unexpected indentation (expected 8, actual 16)"),
        _v(3, 23, MISSING_NEWLINE),
    ]
    assert _format(source) == _src(
        """
        class A {
            constructor(
                a: Int,
                b: Int
            )
        }
        """
    )


def test_function_type_in_property_declaration() -> None:
    source = _src(
        """
        val f: (a: Int,
                b: Int) -> Unit = TODO()
        """
    )
    assert lint_text(source) == [
        _v(1, 9, SEPARATE_LINE),
        _v(2, 9, "Unexpected indentation (expected 4, actual 8)"),
        _v(2, 15, MISSING_NEWLINE),
    ]


def test_custom_indent_size() -> None:
    source = _src(
        """
        fun f(a: Int,
          b: Int)
        """
    )
    assert lint_text(source, indent_size=2) == [
        _v(1, 7, SEPARATE_LINE),
        _v(2, 9, MISSING_NEWLINE),
    ]
    assert _format(source, indent_size=2) == "fun f(\n  a: Int,\n  b: Int\n)"


def test_multiline_default_value_forces_wrapping() -> None:
    source = _src(
        """
        fun f(a: Int, b: () -> Unit = {
        })
        """
    )
    assert [violation.message for violation in lint_text(source)] == [
        SEPARATE_LINE,
        SEPARATE_LINE,
        MISSING_NEWLINE,
    ]


@pytest.mark.parametrize(
    "source",
    [
        "fun f() {}",
        "fun f(\n) {}",
        "fun f(a: Int) = a",
        "class A(val a: Int, val b: String)",
        "fun <T> List<T>.f(a: T, b: (T) -> Unit) {}",
    ],
)
def test_single_line_and_empty_lists_are_valid(source: str) -> None:
    assert lint_text(source) == []
    assert _format(source) == source


@pytest.mark.parametrize(
    "source",
    [
        "fun f(a: Int,\n      b: Int #) {}",
        "fun f(a: Int,\n      b: Int",
    ],
)
def test_malformed_lists_are_skipped(source: str) -> None:
    assert lint_text(source) == []
    assert _format(source) == source


@pytest.mark.parametrize(
    "source",
    [
        "val r = when {\n    x > 0 -> 1\n    matches(a,\n            b) -> 2\n    else -> 3\n}",
        "val v = foo(a,\n    b)",
        "val g = if (check(a,\n        b)) 1 else 2",
        "var x: Int = 0\n    set(\n        value) {\n        field = value\n    }",
        "val xs = listOf(1,\n    2).fold(0) { a,\n  b -> a + b }",
    ],
)
def test_code_without_parameter_lists_is_left_alone(source: str) -> None:
    assert lint_text(source) == []
    assert _format(source) == source


def test_tab_indented_declaration_keeps_tabs() -> None:
    source = "\tfun f(a: Int,\n\t      b: Int) {}"
    formatted = _format(source)
    assert formatted == "\tfun f(\n\t    a: Int,\n\t    b: Int\n\t) {}"
    assert lint_text(formatted) == []


FORMAT_CASES = [
    _src(
        """
        class ClassA(paramA: String, paramB: String,
                     paramC: String)
        """
    ),
    _src(
        """
        class A {
            fun f(a: Any,
                  b: Any,
                  c: Any
               ) {
            }

            fun g(x: Int,
                  y: (p: Int,
                      q: Int) -> Unit) = Unit
        }
        """
    ),
    _src(
        """
        fun visit(
            node: ASTNode,
                autoCorrect: Boolean,
            emit: (offset: Int, errorMessage: String,
            canBeAutoCorrected: Boolean) -> Unit
        ) {}
        """
    ),
]


@pytest.mark.parametrize("source", FORMAT_CASES)
def test_format_output_is_clean_and_stable(source: str) -> None:
    formatted, violations = format_text(source)
    assert violations == lint_text(source)
    assert violations
    assert lint_text(formatted) == []
    assert _format(formatted) == formatted


@pytest.mark.parametrize("source", FORMAT_CASES)
def test_violations_come_out_in_position_order(source: str) -> None:
    violations = lint_text(source)
    positions = [(violation.line, violation.column) for violation in violations]
    assert positions == sorted(positions)


def test_check_does_not_touch_the_tree(rule: ParameterListWrappingRule) -> None:
    source = FORMAT_CASES[1]
    tree = parse(source)
    size = len(tree)
    assert rule.check(tree)
    assert tree.text() == source
    assert len(tree) == size


def test_fix_reports_violations_found_before_correction(
    rule: ParameterListWrappingRule,
) -> None:
    source = FORMAT_CASES[0]
    tree = parse(source)
    violations, fixed = rule.fix(tree)
    assert fixed is tree
    assert violations == lint_text(source)
    assert rule.check(tree) == []


def test_fix_leaves_valid_tree_untouched(rule: ParameterListWrappingRule) -> None:
    source = "fun f(\n    a: Int\n) {}"
    tree = parse(source)
    size = len(tree)
    violations, fixed = rule.fix(tree)
    assert violations == []
    assert fixed.text() == source
    assert len(fixed) == size


def test_indent_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ParameterListWrappingRule(indent_size=0)
