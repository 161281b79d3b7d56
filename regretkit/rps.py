"""Rock-paper-scissors: a tiny zero-sum game for checking regret minimisation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Any, ClassVar

from .blueprint import Blueprint
from .profile import Profile
from .protocols import Encoder
from .tree import Branch, Tree

logger = logging.getLogger(__name__)

CFR_TREE_COUNT_RPS = 8192
CFR_BATCH_SIZE_RPS = 1

P_WIN = 1.0
ASYMMETRIC_UTILITY = 2.0
"""Multiplier on wins involving scissors; moves the equilibrium off uniform."""
S_WIN = P_WIN * ASYMMETRIC_UTILITY


@total_ordering
class Edge(Enum):
    """A throw."""

    R = 0
    P = 1
    S = 2

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self.value < other.value

    def __hash__(self) -> int:
        return hash(self.value)


@total_ordering
class Turn(Enum):
    """Who moves; the terminal turn doubles as chance."""

    P1 = 0
    P2 = 1
    Terminal = 2

    @classmethod
    def chance(cls) -> "Turn":
        return cls.Terminal

    def choices(self) -> list[Edge]:
        """Throws available to this turn; none once the game is over."""
        return [] if self is Turn.Terminal else list(Edge)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Turn):
            return NotImplemented
        return self.value < other.value

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.name


_PAYOFFS = {
    7: P_WIN,  # P beats R
    5: -P_WIN,  # R loses to P
    6: S_WIN,  # R beats S
    11: S_WIN,  # S beats P
    10: -S_WIN,  # S loses to R
    9: -S_WIN,  # P loses to S
    4: 0.0,
    8: 0.0,
    12: 0.0,
}


@dataclass(frozen=True, order=True)
class Game:
    """State 0 is the root, 1-3 await the second throw, 4-12 are terminal."""

    state: int = 0

    @classmethod
    def root(cls) -> "Game":
        return cls(0)

    def turn(self) -> Turn:
        if self.state == 0:
            return Turn.P1
        if 1 <= self.state <= 3:
            return Turn.P2
        if 4 <= self.state <= 12:
            return Turn.Terminal
        raise ValueError(f"invalid game state {self.state}")

    def apply(self, edge: Edge) -> "Game":
        if not 0 <= self.state <= 3:
            raise ValueError(f"no moves from game state {self.state}")
        return Game(3 * self.state + edge.value + 1)

    def payoff(self, turn: Turn) -> float:
        if turn is Turn.P1:
            direction = 1.0
        elif turn is Turn.P2:
            direction = -1.0
        else:
            raise ValueError(f"no payoff for turn {turn}")
        if 0 <= self.state <= 3:
            raise ValueError("payoff evaluated at a non-terminal node")
        if self.state not in _PAYOFFS:
            raise ValueError(f"invalid game state {self.state}")
        return direction * _PAYOFFS[self.state]


@dataclass(eq=False)
class RPS(Blueprint, Profile, Encoder):
    """Trainer, profile and encoder for rock-paper-scissors in one object."""

    game_class: ClassVar[type] = Game
    epoch_count: int = 0
    encounters: dict[Turn, dict[Edge, list[float]]] = field(default_factory=dict)

    # blueprint

    @classmethod
    def train(cls) -> None:
        logger.info("%s", cls().solve())

    @classmethod
    def tree_count(cls) -> int:
        return CFR_TREE_COUNT_RPS

    @classmethod
    def batch_size(cls) -> int:
        return CFR_BATCH_SIZE_RPS

    def encoder(self) -> "RPS":
        return self

    def profile(self) -> "RPS":
        return self

    def advance(self) -> None:
        self.increment()

    def _memory(self, info: Turn, edge: Edge) -> list[float]:
        return self.encounters.setdefault(info, {}).setdefault(edge, [0.0, 0.0])

    def set_policy(self, info: Turn, edge: Edge, value: float) -> None:
        self._memory(info, edge)[0] = value

    def set_regret(self, info: Turn, edge: Edge, value: float) -> None:
        self._memory(info, edge)[1] = value

    # profile

    def increment(self) -> None:
        self.epoch_count += 1

    def epochs(self) -> int:
        return self.epoch_count

    def walker(self) -> Turn:
        return Turn.P1 if self.epochs() % 2 == 0 else Turn.P2

    def sum_policy(self, info: Turn, edge: Edge) -> float:
        memory = self.encounters.get(info, {}).get(edge)
        return memory[0] if memory is not None else 0.0

    def sum_regret(self, info: Turn, edge: Edge) -> float:
        memory = self.encounters.get(info, {}).get(edge)
        return memory[1] if memory is not None else 0.0

    # encoder

    def seed(self, game: Any) -> Turn:
        return Turn.P1

    def info(self, tree: Tree, leaf: Branch) -> Turn:
        return leaf.game.turn()

    def __str__(self) -> str:
        lines = [f"Turns: {self.epoch_count}"]
        for turn in sorted(self.encounters):
            lines.append(f"  {turn.name}:")
            for edge in sorted(self.encounters[turn]):
                lines.append(
                    f"    {edge.name}"
                    f"  R {self.sum_regret(turn, edge):>+6.2f},"
                    f" W {self.sum_policy(turn, edge):>6.2f},"
                    f" P {self.policy(turn, edge):>6.2f},"
                    f"  A {self.advice(turn, edge):>6.2f}"
                )
        return "\n".join(lines) + "\n"