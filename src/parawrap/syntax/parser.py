"""Build a :class:`SyntaxTree` from the tree-sitter Kotlin grammar.

tree-sitter does the parsing; this module keeps only the structure the
wrapping rule needs. Function, class, constructor and function-type headers
and lambda literals become composite nodes with their parameter lists split
into parameters. Every other node is flattened into leaves, and the bytes
between tree-sitter tokens become whitespace leaves, so ``parse(text).text()``
always reproduces ``text`` exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Iterator, Union

import tree_sitter_kotlin as ts_kotlin
from tree_sitter import Language, Node, Parser

from parawrap.exceptions import ParseFailure
from parawrap.syntax.kinds import NodeKind, is_trivia
from parawrap.syntax.tree import LineIndex, SyntaxNode, SyntaxTree

_BOM = "\ufeff"

_OWNER_TYPES: dict[str, NodeKind] = {
    "function_declaration": NodeKind.FUN,
    "anonymous_function": NodeKind.FUN,
    "class_declaration": NodeKind.CLASS,
    "primary_constructor": NodeKind.PRIMARY_CONSTRUCTOR,
    "secondary_constructor": NodeKind.SECONDARY_CONSTRUCTOR,
    "function_type": NodeKind.FUNCTION_TYPE,
    "lambda_literal": NodeKind.FUNCTION_LITERAL,
}

# Grammar nodes holding an owner's parameter list.
_LIST_TYPES: dict[NodeKind, frozenset[str]] = {
    NodeKind.FUN: frozenset({"function_value_parameters"}),
    NodeKind.SECONDARY_CONSTRUCTOR: frozenset({"function_value_parameters"}),
    NodeKind.CLASS: frozenset({"class_parameters"}),
    NodeKind.PRIMARY_CONSTRUCTOR: frozenset({"class_parameters"}),
    NodeKind.FUNCTION_TYPE: frozenset({"function_type_parameters"}),
    NodeKind.FUNCTION_LITERAL: frozenset({"lambda_parameters"}),
}

# Owners whose grammar may inline the parenthesised list into the owner node.
_INLINE_LIST_OWNERS = frozenset({NodeKind.PRIMARY_CONSTRUCTOR, NodeKind.FUNCTION_TYPE})

_COMMENT_TYPES = frozenset(
    {"line_comment", "multiline_comment", "block_comment", "comment", "shebang_line"}
)
_STRING_TYPES = frozenset(
    {
        "string_literal",
        "line_string_literal",
        "multi_line_string_literal",
        "multiline_string_literal",
        "character_literal",
    }
)
_ATOMIC_TYPES = _COMMENT_TYPES | _STRING_TYPES | {"ERROR"}

_PUNCTUATION: dict[str, NodeKind] = {
    "(": NodeKind.LPAR,
    ")": NodeKind.RPAR,
    "{": NodeKind.LBRACE,
    "}": NodeKind.RBRACE,
    "[": NodeKind.LBRACKET,
    "]": NodeKind.RBRACKET,
    "<": NodeKind.LT,
    ">": NodeKind.GT,
    ",": NodeKind.COMMA,
    ":": NodeKind.COLON,
    ".": NodeKind.DOT,
    "=": NodeKind.EQ,
    "->": NodeKind.ARROW,
    "@": NodeKind.AT,
}
_LIST_DELIMITERS = frozenset({"(", ")", ","})


@dataclass(frozen=True)
class _Leaf:
    kind: NodeKind
    text: str


@dataclass(frozen=True)
class _Owner:
    kind: NodeKind
    node: Node


_Item = Union[_Leaf, _Owner]


@lru_cache(maxsize=1)
def _parser() -> Parser:
    return Parser(Language(ts_kotlin.language()))


def parse(source: str) -> SyntaxTree:
    """Parse ``source`` into a :class:`SyntaxTree`.

    Syntax errors do not fail the parse; they become ``ERROR_ELEMENT`` leaves.
    Raises :class:`parawrap.exceptions.ParseFailure` when no tree can be
    built at all, e.g. for text that cannot be encoded as UTF-8.
    """
    try:
        encoded = source.encode("utf-8")
    except UnicodeEncodeError as exc:
        line, column = LineIndex(source).position(exc.start)
        raise ParseFailure(
            f"cannot encode {source[exc.start]!r} as UTF-8", line=line, column=column
        ) from exc

    tree = SyntaxTree(newline=_newline_of(source))
    bom = _BOM.encode("utf-8")
    if encoded.startswith(bom):
        tree.append(tree.root, NodeKind.WHITE_SPACE, _BOM)
        encoded = encoded[len(bom) :]
    root = _root_of(_parser().parse(encoded))
    builder = _Builder(encoded, tree)
    # a file tree-sitter could not make sense of at all is still walked
    builder.emit(tree.root, builder.items(root.children, 0, len(encoded)))
    return tree


def _newline_of(source: str) -> str:
    first = source.find("\n")
    if first > 0 and source[first - 1] == "\r":
        return "\r\n"
    return "\n"


def _root_of(result) -> Node:
    if result is None:
        raise ParseFailure("tree-sitter returned no tree")
    return result.root_node


def _token_kind(text: str) -> NodeKind:
    kind = _PUNCTUATION.get(text)
    if kind is not None:
        return kind
    first = text[0]
    if first.isdigit():
        return NodeKind.NUMBER
    if first.isalpha() or first in "_`":
        return NodeKind.IDENTIFIER
    return NodeKind.OPERATOR


def _is_trivia_leaf(item: _Item) -> bool:
    return isinstance(item, _Leaf) and is_trivia(item.kind)


class _Builder:
    def __init__(self, source: bytes, tree: SyntaxTree) -> None:
        self.source = source
        self.tree = tree

    def _text(self, start: int, end: int) -> str:
        return self.source[start:end].decode("utf-8")

    def _gap(self, start: int, end: int) -> _Leaf:
        text = self._text(start, end)
        kind = NodeKind.WHITE_SPACE if text.isspace() else NodeKind.ERROR_ELEMENT
        return _Leaf(kind, text)

    def _spans(
        self, nodes: Iterable[Node], start: int, end: int
    ) -> Iterator[Node | _Leaf]:
        """Yield ``nodes`` in order with the uncovered bytes between them as leaves."""
        cursor = start
        for node in nodes:
            if node.start_byte > cursor:
                yield self._gap(cursor, node.start_byte)
            yield node
            cursor = max(cursor, node.end_byte)
        if end > cursor:
            yield self._gap(cursor, end)

    def _leaf(self, node: Node) -> _Leaf:
        if node.is_missing:
            return _Leaf(NodeKind.ERROR_ELEMENT, "")
        text = self._text(node.start_byte, node.end_byte)
        if node.type == "ERROR":
            return _Leaf(NodeKind.ERROR_ELEMENT, text)
        if node.type in _COMMENT_TYPES:
            kind = NodeKind.BLOCK_COMMENT if text.startswith("/*") else NodeKind.EOL_COMMENT
            return _Leaf(kind, text)
        if node.type in _STRING_TYPES:
            return _Leaf(NodeKind.STRING, text)
        return _Leaf(_token_kind(text), text)

    def items(self, nodes: Iterable[Node], start: int, end: int) -> Iterator[_Item]:
        """Flatten ``nodes`` to leaves, stopping at parameter list owners."""
        stack = [self._spans(nodes, start, end)]
        while stack:
            item = next(stack[-1], None)
            if item is None:
                stack.pop()
                continue
            if isinstance(item, _Leaf):
                yield item
                continue
            kind = _OWNER_TYPES.get(item.type)
            if kind is not None:
                yield _Owner(kind, item)
            elif item.is_missing or item.child_count == 0 or item.type in _ATOMIC_TYPES:
                if item.is_missing or item.end_byte > item.start_byte:
                    yield self._leaf(item)
            else:
                stack.append(self._spans(item.children, item.start_byte, item.end_byte))

    def emit(self, parent: SyntaxNode, items: Iterable[_Item]) -> None:
        for item in items:
            if isinstance(item, _Leaf):
                self.tree.append(parent, item.kind, item.text)
            else:
                self._owner(parent, item.kind, item.node)

    def _list_span(self, kind: NodeKind, children: list[Node]) -> tuple[int, int] | None:
        list_types = _LIST_TYPES[kind]
        for position, child in enumerate(children):
            if child.type in list_types:
                return position, position
        if kind not in _INLINE_LIST_OWNERS:
            return None
        opening = next(
            (i for i, child in enumerate(children) if child.type == "(" and not child.is_missing),
            None,
        )
        if opening is None:
            return None
        for position in range(opening + 1, len(children)):
            if children[position].type == ")":
                return opening, position
        return opening, len(children) - 1

    def _owner(self, parent: SyntaxNode, kind: NodeKind, node: Node) -> None:
        composite = self.tree.append(parent, kind)
        children = node.children
        span = self._list_span(kind, children)
        if span is None:
            self.emit(composite, self.items(children, node.start_byte, node.end_byte))
            return
        first, last = span
        list_start = children[first].start_byte
        list_end = children[last].end_byte
        self.emit(composite, self.items(children[:first], node.start_byte, list_start))
        if first == last and children[first].type in _LIST_TYPES[kind]:
            list_node = children[first]
            holder = composite
            if kind is NodeKind.CLASS:
                holder = self.tree.append(composite, NodeKind.PRIMARY_CONSTRUCTOR)
            self._parameter_list(holder, list_node.children, list_start, list_end)
        else:
            self._parameter_list(composite, children[first : last + 1], list_start, list_end)
        self.emit(composite, self.items(children[last + 1 :], list_end, node.end_byte))

    def _parameter_list(
        self, owner: SyntaxNode, nodes: list[Node], start: int, end: int
    ) -> None:
        parameter_list = self.tree.append(owner, NodeKind.VALUE_PARAMETER_LIST)
        segment: list[_Item] = []
        for item in self._spans(nodes, start, end):
            if isinstance(item, _Leaf):
                segment.append(item)
            elif item.type in _LIST_DELIMITERS and not item.is_missing:
                self._parameter(parameter_list, segment)
                segment = []
                self.tree.append(parameter_list, _PUNCTUATION[item.type], item.type)
            else:
                segment.extend(self.items([item], item.start_byte, item.end_byte))
        self._parameter(parameter_list, segment)

    def _parameter(self, parameter_list: SyntaxNode, segment: list[_Item]) -> None:
        # trivia around a parameter belongs to the list, not the parameter
        lead = 0
        while lead < len(segment) and _is_trivia_leaf(segment[lead]):
            lead += 1
        trail = len(segment)
        while trail > lead and _is_trivia_leaf(segment[trail - 1]):
            trail -= 1
        self.emit(parameter_list, segment[:lead])
        if trail > lead:
            parameter = self.tree.append(parameter_list, NodeKind.VALUE_PARAMETER)
            self.emit(parameter, segment[lead:trail])
        self.emit(parameter_list, segment[trail:])
