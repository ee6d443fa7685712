"""Arena-backed syntax tree.

Nodes live in a flat list owned by :class:`SyntaxTree` and are addressed by
index. Parent and child links are stored as indices, so there are no
ownership cycles and rewriting whitespace is a matter of replacing a leaf's
text or splicing a new index into a parent's child list.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterator

from parawrap.syntax.kinds import NodeKind, is_leaf

_ROOT_PARENT = -1


@dataclass
class _NodeData:
    kind: NodeKind
    text: str
    parent: int
    children: list[int] = field(default_factory=list)


class LineIndex:
    """Line-start offset table for one text, queried by binary search."""

    def __init__(self, text: str) -> None:
        starts = [0]
        for offset, char in enumerate(text):
            if char == "\n":
                starts.append(offset + 1)
        self._starts = starts

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 1-based (line, column) of a 0-based offset."""
        line = bisect_right(self._starts, offset) - 1
        return line + 1, offset - self._starts[line] + 1


@dataclass(frozen=True)
class SyntaxNode:
    tree: SyntaxTree
    index: int

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"SyntaxNode({self.kind.value}#{self.index} {self.text!r})"
        return f"SyntaxNode({self.kind.value}#{self.index})"

    @property
    def _data(self) -> _NodeData:
        return self.tree._nodes[self.index]

    @property
    def kind(self) -> NodeKind:
        return self._data.kind

    @property
    def is_leaf(self) -> bool:
        return is_leaf(self._data.kind)

    @property
    def text(self) -> str:
        if self.is_leaf:
            return self._data.text
        return "".join(leaf.text for leaf in self.leaves())

    @property
    def parent(self) -> SyntaxNode | None:
        parent = self._data.parent
        if parent == _ROOT_PARENT:
            return None
        return SyntaxNode(self.tree, parent)

    @property
    def children(self) -> list[SyntaxNode]:
        return [SyntaxNode(self.tree, child) for child in self._data.children]

    def walk(self) -> Iterator[SyntaxNode]:
        """Pre-order traversal of this subtree, self included."""
        nodes = self.tree._nodes
        stack = [self.index]
        while stack:
            index = stack.pop()
            yield SyntaxNode(self.tree, index)
            stack.extend(reversed(nodes[index].children))

    def leaves(self) -> Iterator[SyntaxNode]:
        for node in self.walk():
            if node.is_leaf:
                yield node

    def first_leaf(self) -> SyntaxNode | None:
        return next(self.leaves(), None)

    def last_leaf(self) -> SyntaxNode | None:
        if self.is_leaf:
            return self
        for child in reversed(self.children):
            leaf = child.last_leaf()
            if leaf is not None:
                return leaf
        return None

    def prev_sibling(self) -> SyntaxNode | None:
        parent = self._data.parent
        if parent == _ROOT_PARENT:
            return None
        siblings = self.tree._nodes[parent].children
        position = siblings.index(self.index) - 1
        if position >= 0:
            return SyntaxNode(self.tree, siblings[position])
        return None

    def prev_leaf(self) -> SyntaxNode | None:
        node: SyntaxNode | None = self
        while node is not None:
            sibling = node.prev_sibling()
            while sibling is not None:
                leaf = sibling.last_leaf()
                if leaf is not None:
                    return leaf
                sibling = sibling.prev_sibling()
            node = node.parent
        return None


class SyntaxTree:
    """A parsed file.

    ``newline`` is the line terminator used when a line break has to be
    inserted; the parser sets it from the first line break of the source.
    """

    def __init__(self, newline: str = "\n") -> None:
        self.newline = newline
        self._nodes: list[_NodeData] = [_NodeData(NodeKind.FILE, "", _ROOT_PARENT)]
        self._offsets: list[int] | None = None
        self._line_index: LineIndex | None = None

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def root(self) -> SyntaxNode:
        return SyntaxNode(self, 0)

    def text(self) -> str:
        return self.root.text

    def append(self, parent: SyntaxNode, kind: NodeKind, text: str = "") -> SyntaxNode:
        if parent.is_leaf:
            raise ValueError(f"cannot add children to leaf {parent!r}")
        index = len(self._nodes)
        self._nodes.append(_NodeData(kind, text if is_leaf(kind) else "", parent.index))
        self._nodes[parent.index].children.append(index)
        self._invalidate()
        return SyntaxNode(self, index)

    def replace_text(self, node: SyntaxNode, text: str) -> None:
        if not node.is_leaf:
            raise ValueError(f"cannot replace text of composite {node!r}")
        self._nodes[node.index].text = text
        self._invalidate()

    def insert_before(self, anchor: SyntaxNode, kind: NodeKind, text: str) -> SyntaxNode:
        parent = anchor.parent
        if parent is None:
            raise ValueError("cannot insert a sibling of the root")
        index = len(self._nodes)
        self._nodes.append(_NodeData(kind, text, parent.index))
        siblings = self._nodes[parent.index].children
        siblings.insert(siblings.index(anchor.index), index)
        self._invalidate()
        return SyntaxNode(self, index)

    def _invalidate(self) -> None:
        self._offsets = None
        self._line_index = None

    def offsets(self) -> list[int]:
        """Start offset of every node, indexed like the arena."""
        if self._offsets is None:
            offsets = [0] * len(self._nodes)
            cursor = 0
            stack = [0]
            while stack:
                index = stack.pop()
                data = self._nodes[index]
                offsets[index] = cursor
                if is_leaf(data.kind):
                    cursor += len(data.text)
                else:
                    stack.extend(reversed(data.children))
            self._offsets = offsets
        return self._offsets

    def line_index(self) -> LineIndex:
        if self._line_index is None:
            self._line_index = LineIndex(self.text())
        return self._line_index

    def position(self, node: SyntaxNode) -> tuple[int, int]:
        return self.line_index().position(self.offsets()[node.index])

    def _line_prefix(self, node: SyntaxNode) -> str:
        # text between the last line break before ``node`` and ``node``
        pieces: list[str] = []
        start = node.first_leaf() or node
        leaf = start.prev_leaf()
        while leaf is not None:
            text = leaf.text
            newline = text.rfind("\n")
            if newline >= 0:
                pieces.append(text[newline + 1 :])
                break
            pieces.append(text)
            leaf = leaf.prev_leaf()
        return "".join(reversed(pieces))

    def column(self, node: SyntaxNode) -> int:
        """0-based visual column of ``node`` in the current tree."""
        return len(self._line_prefix(node))

    def line_indent_text(self, node: SyntaxNode) -> str:
        """Leading whitespace of the line ``node`` starts on, in the current tree."""
        prefix = self._line_prefix(node)
        return prefix[: len(prefix) - len(prefix.lstrip(" \t"))]
