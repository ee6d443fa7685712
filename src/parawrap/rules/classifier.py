from __future__ import annotations

from parawrap.syntax.kinds import (
    EXCLUDED_OWNER_KINDS,
    PARAMETER_LIST_OWNER_KINDS,
    NodeKind,
)
from parawrap.syntax.tree import SyntaxNode

# Owner kind -> whether its parameter list is subject to the wrapping rule.
# A list under any owner missing from this table is not a parameter list the
# rule knows about and is skipped.
_OWNER_DECISIONS: dict[NodeKind, bool] = {
    **{kind: True for kind in PARAMETER_LIST_OWNER_KINDS},
    **{kind: False for kind in EXCLUDED_OWNER_KINDS},
}


def classify(node: SyntaxNode) -> SyntaxNode | None:
    """Return ``node`` if it is a parameter list the rule applies to."""
    if node.kind is not NodeKind.VALUE_PARAMETER_LIST:
        return None
    owner = node.parent
    if owner is None:
        return None
    if _OWNER_DECISIONS.get(owner.kind, False):
        return node
    return None


def owner_kind(node: SyntaxNode) -> NodeKind | None:
    owner = node.parent
    return None if owner is None else owner.kind
