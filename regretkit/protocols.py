"""Structural interfaces a game must provide to be solved by regret minimisation."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .transport import Support

if TYPE_CHECKING:
    from .tree import Branch, Node, Tree


@runtime_checkable
class Turn(Protocol):
    """Whose turn it is; one value stands for chance."""

    @classmethod
    @abstractmethod
    def chance(cls) -> "Turn":
        """Return the turn value that represents chance."""


class Edge(Support, Protocol):
    """An action leading from one game state to another; hashable and ordered."""


@runtime_checkable
class Game(Protocol):
    """Tree-local game state."""

    @classmethod
    @abstractmethod
    def root(cls) -> "Game":
        """Return the starting state."""

    @abstractmethod
    def turn(self) -> Any:
        """Return whose turn it is in this state."""

    @abstractmethod
    def apply(self, edge: Any) -> "Game":
        """Return the state reached by taking ``edge``."""

    @abstractmethod
    def payoff(self, turn: Any) -> float:
        """Return the utility of this terminal state for ``turn``."""


@runtime_checkable
class Info(Protocol):
    """An information bucket; knows which edges may leave it."""

    @abstractmethod
    def choices(self) -> list[Any]:
        """Return the edges available from this information."""


@runtime_checkable
class Encoder(Protocol):
    """Maps game states, in tree context, to information buckets."""

    @abstractmethod
    def seed(self, game: Any) -> Any:
        """Return the information for a root state."""

    @abstractmethod
    def info(self, tree: "Tree", leaf: "Branch") -> Any:
        """Return the information for a branch about to be grown."""

    def branches(self, node: "Node") -> list["Branch"]:
        """Return the branches that leave ``node``."""
        return node.branches()