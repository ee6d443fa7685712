from __future__ import annotations

import structlog

from parawrap.exceptions import MalformedTreeError
from parawrap.rules.autocorrect import correct
from parawrap.rules.classifier import classify, owner_kind
from parawrap.rules.detector import detect
from parawrap.rules.layout import DEFAULT_INDENT_SIZE, analyze
from parawrap.rules.model import RULE_ID, LayoutSnapshot, Violation
from parawrap.syntax.parser import parse
from parawrap.syntax.tree import SyntaxNode, SyntaxTree

logger = structlog.get_logger(__name__)


class ParameterListWrappingRule:
    """Single-line-or-fully-exploded layout for parameter lists.

    Applies to parameter lists of functions, primary and secondary
    constructors and function types. Lambda parameter lists are never
    inspected.
    """

    rule_id = RULE_ID

    def __init__(self, indent_size: int = DEFAULT_INDENT_SIZE) -> None:
        if indent_size < 1:
            raise ValueError(f"indent_size must be positive, got {indent_size}")
        self.indent_size = indent_size

    def _snapshot(self, node: SyntaxNode) -> LayoutSnapshot | None:
        parameter_list = classify(node)
        if parameter_list is None:
            return None
        try:
            return analyze(parameter_list, indent_size=self.indent_size)
        except MalformedTreeError as exc:
            logger.debug(
                "parameter_list_skipped",
                owner=str(owner_kind(parameter_list)),
                reason=str(exc),
            )
            return None

    def check(self, tree: SyntaxTree) -> list[Violation]:
        """Report violations without touching the tree.

        Each violation is held back until the traversal reaches the node it
        is reported at, so the result comes out in (line, column) order.
        """
        violations: list[Violation] = []
        pending: dict[int, list[Violation]] = {}
        for node in tree.root.walk():
            violations.extend(pending.pop(node.index, ()))
            snapshot = self._snapshot(node)
            if snapshot is None:
                continue
            for anchored in detect(snapshot):
                pending.setdefault(anchored.anchor.index, []).append(anchored.violation)
        return violations

    def fix(self, tree: SyntaxTree) -> tuple[list[Violation], SyntaxTree]:
        """Report violations as they stood, then correct the tree in place.

        Lists are corrected as the traversal reaches them, so a nested list is
        analysed against the indentation its enclosing list was given.
        """
        violations = self.check(tree)
        if not violations:
            return violations, tree
        corrected = 0
        for node in tree.root.walk():
            snapshot = self._snapshot(node)
            if snapshot is None or snapshot.is_valid:
                continue
            edits = correct(snapshot)
            corrected += 1
            logger.debug(
                "parameter_list_corrected",
                owner=str(owner_kind(node)),
                edits=edits,
            )
        logger.debug("parameter_lists_fixed", lists=corrected, violations=len(violations))
        return violations, tree


def lint_text(source: str, *, indent_size: int = DEFAULT_INDENT_SIZE) -> list[Violation]:
    return ParameterListWrappingRule(indent_size).check(parse(source))


def format_text(
    source: str, *, indent_size: int = DEFAULT_INDENT_SIZE
) -> tuple[str, list[Violation]]:
    violations, tree = ParameterListWrappingRule(indent_size).fix(parse(source))
    return tree.text(), violations
