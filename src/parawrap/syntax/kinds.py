from __future__ import annotations

from enum import StrEnum


class NodeKind(StrEnum):
    # composite
    FILE = "FILE"
    FUN = "FUN"
    CLASS = "CLASS"
    PRIMARY_CONSTRUCTOR = "PRIMARY_CONSTRUCTOR"
    SECONDARY_CONSTRUCTOR = "SECONDARY_CONSTRUCTOR"
    FUNCTION_TYPE = "FUNCTION_TYPE"
    FUNCTION_LITERAL = "FUNCTION_LITERAL"
    VALUE_PARAMETER_LIST = "VALUE_PARAMETER_LIST"
    VALUE_PARAMETER = "VALUE_PARAMETER"
    # trivia
    WHITE_SPACE = "WHITE_SPACE"
    EOL_COMMENT = "EOL_COMMENT"
    BLOCK_COMMENT = "BLOCK_COMMENT"
    # punctuation
    LPAR = "LPAR"
    RPAR = "RPAR"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    LBRACKET = "LBRACKET"
    RBRACKET = "RBRACKET"
    LT = "LT"
    GT = "GT"
    COMMA = "COMMA"
    COLON = "COLON"
    DOT = "DOT"
    EQ = "EQ"
    ARROW = "ARROW"
    AT = "AT"
    # everything else
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    ERROR_ELEMENT = "ERROR_ELEMENT"


COMPOSITE_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.FILE,
        NodeKind.FUN,
        NodeKind.CLASS,
        NodeKind.PRIMARY_CONSTRUCTOR,
        NodeKind.SECONDARY_CONSTRUCTOR,
        NodeKind.FUNCTION_TYPE,
        NodeKind.FUNCTION_LITERAL,
        NodeKind.VALUE_PARAMETER_LIST,
        NodeKind.VALUE_PARAMETER,
    }
)

COMMENT_KINDS: frozenset[NodeKind] = frozenset(
    {NodeKind.EOL_COMMENT, NodeKind.BLOCK_COMMENT}
)

TRIVIA_KINDS: frozenset[NodeKind] = COMMENT_KINDS | {NodeKind.WHITE_SPACE}

# Kinds whose parameter list is subject to the wrapping rule.
PARAMETER_LIST_OWNER_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.FUN,
        NodeKind.PRIMARY_CONSTRUCTOR,
        NodeKind.SECONDARY_CONSTRUCTOR,
        NodeKind.FUNCTION_TYPE,
    }
)

EXCLUDED_OWNER_KINDS: frozenset[NodeKind] = frozenset({NodeKind.FUNCTION_LITERAL})


def is_leaf(kind: NodeKind) -> bool:
    return kind not in COMPOSITE_KINDS


def is_trivia(kind: NodeKind) -> bool:
    return kind in TRIVIA_KINDS


def is_comment(kind: NodeKind) -> bool:
    return kind in COMMENT_KINDS
