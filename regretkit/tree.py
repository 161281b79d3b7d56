"""Sampled game trees, their nodes, and information sets."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, NamedTuple, Optional

Policy = list[tuple[Any, float]]
"""A distribution over edges, as (edge, probability) pairs."""


class Branch(NamedTuple):
    """A child not yet added to a tree: the edge, the resulting game, the parent index."""

    edge: Any
    game: Any
    parent: int


class Counterfactual(NamedTuple):
    """Regret and policy update vectors for one information bucket."""

    info: Any
    regret: Policy
    policy: Policy


class Node:
    """A position inside a Tree, addressed by index."""

    __slots__ = ("_tree", "_index")

    def __init__(self, tree: "Tree", index: int) -> None:
        self._tree = tree
        self._index = index

    @property
    def index(self) -> int:
        return self._index

    @property
    def tree(self) -> "Tree":
        return self._tree

    @property
    def game(self) -> Any:
        return self._tree._vertices[self._index][0]

    @property
    def info(self) -> Any:
        return self._tree._vertices[self._index][1]

    def at(self, index: int) -> "Node":
        """Return another node of the same tree."""
        return self._tree.at(index)

    def up(self) -> Optional[tuple["Node", Any]]:
        """Return (parent, incoming edge), or None at a root."""
        parent = self._tree._parents[self._index]
        if parent is None:
            return None
        return Node(self._tree, parent), self._tree._incoming[self._index]

    def parent(self) -> Optional["Node"]:
        parent = self._tree._parents[self._index]
        return None if parent is None else Node(self._tree, parent)

    def incoming(self) -> Any:
        """Return the edge that led here, or None at a root."""
        return self._tree._incoming[self._index]

    def follow(self, edge: Any) -> Optional["Node"]:
        """Return the child reached by ``edge``, if there is one."""
        return next((c for c in self.children() if c.incoming() == edge), None)

    def outgoing(self) -> list[Any]:
        return [self._tree._incoming[i] for i in self._tree._children[self._index]]

    def children(self) -> list["Node"]:
        return [Node(self._tree, i) for i in self._tree._children[self._index]]

    def descendants(self) -> list["Node"]:
        """Return the leaves below this node, depth first; a leaf returns itself."""
        leaves = []
        stack = [self._index]
        while stack:
            index = stack.pop()
            kids = self._tree._children[index]
            if kids:
                stack.extend(reversed(kids))
            else:
                leaves.append(Node(self._tree, index))
        return leaves

    def branches(self) -> list[Branch]:
        """Return a branch for every choice available from this node's information."""
        return [Branch(e, self.game.apply(e), self._index) for e in self.info.choices()]

    def ancestry(self) -> Iterator[tuple["Node", Any]]:
        """Walk towards the root, yielding (parent, edge taken from that parent)."""
        node: Node = self
        while (step := node.up()) is not None:
            node, edge = step
            yield node, edge

    def __iter__(self) -> Iterator[tuple["Node", Any]]:
        return self.ancestry()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self._index == other._index and self._tree is other._tree

    def __hash__(self) -> int:
        return hash((id(self._tree), self._index))

    def __repr__(self) -> str:
        return f"{self.info!r} ({self._index}/{len(self._tree)})"


class Tree:
    """A directed tree whose vertices hold (game, info) and whose arcs hold edges."""

    def __init__(self) -> None:
        self._vertices: list[tuple[Any, Any]] = []
        self._parents: list[Optional[int]] = []
        self._incoming: list[Any] = []
        self._children: list[list[int]] = []

    def __len__(self) -> int:
        return len(self._vertices)

    def all(self) -> Iterator[Node]:
        """Iterate over every node in insertion order."""
        return (Node(self, i) for i in range(len(self._vertices)))

    def at(self, index: int) -> Node:
        if not 0 <= index < len(self._vertices):
            raise IndexError(f"no node at index {index}")
        return Node(self, index)

    def seed(self, info: Any, game: Any) -> Node:
        """Add a root node."""
        return self._add(game, info, None, None)

    def grow(self, info: Any, leaf: Branch) -> Node:
        """Attach the game of ``leaf`` under its parent."""
        edge, game, parent = leaf
        if not 0 <= parent < len(self._vertices):
            raise IndexError(f"no parent node at index {parent}")
        return self._add(game, info, parent, edge)

    def _add(self, game: Any, info: Any, parent: Optional[int], edge: Any) -> Node:
        index = len(self._vertices)
        self._vertices.append((game, info))
        self._parents.append(parent)
        self._incoming.append(edge)
        self._children.append([])
        if parent is not None:
            self._children[parent].append(index)
        return Node(self, index)

    def partition(self) -> dict[Any, "InfoSet"]:
        """Group non-leaf nodes by their info."""
        sets: dict[Any, InfoSet] = {}
        for node in self.all():
            if node.children():
                if node.info not in sets:
                    sets[node.info] = InfoSet(self)
                sets[node.info].push(node.index)
        return sets

    def _show(self, index: int, prefix: str, lines: list[str]) -> None:
        kids = self._children[index]
        for i, child in enumerate(kids):
            last = i == len(kids) - 1
            stem = "└" if last else "├"
            gaps = "    " if last else "│   "
            lines.append(
                f"{prefix}{stem}──{self._incoming[child]!r} → {self._vertices[child][1]!r}"
            )
            self._show(child, prefix + gaps, lines)

    def __str__(self) -> str:
        if not self._vertices:
            return ""
        lines = [f"ROOT   {self._vertices[0][1]!r}"]
        self._show(0, "", lines)
        return "\n" + "\n".join(lines) + "\n"


class InfoSet:
    """Nodes of one tree that share the same information."""

    def __init__(self, tree: Tree) -> None:
        self._tree = tree
        self._span: list[int] = []

    def __len__(self) -> int:
        return len(self._span)

    def push(self, index: int) -> None:
        self._span.append(index)

    def span(self) -> list[Node]:
        return [self._tree.at(i) for i in self._span]

    def head(self) -> Node:
        if not self._span:
            raise IndexError("infoset holds no nodes")
        return self._tree.at(self._span[0])

    def info(self) -> Any:
        return self.head().info