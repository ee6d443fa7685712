from parawrap.syntax.kinds import NodeKind
from parawrap.syntax.parser import parse
from parawrap.syntax.tree import LineIndex, SyntaxNode, SyntaxTree

__all__ = [
    "LineIndex",
    "NodeKind",
    "SyntaxNode",
    "SyntaxTree",
    "parse",
]
