"""Strategy profiles: regret matching, reach probabilities and counterfactual values."""

from __future__ import annotations

import math
import random
from abc import ABC, abstractmethod
from typing import Any, Sequence

from .tree import Branch, InfoSet, Node, Policy

Probability = float
Utility = float

POLICY_MIN: Probability = 1.1754944e-38
"""Smallest positive weight an action may carry; keeps normalisation well defined."""

SAMPLING_THRESHOLD: float = 0.5
"""Temperature: how strongly accumulated weights steer sampling."""

SAMPLING_ACTIVATION: float = 0.5
"""Inertia added to both sides of the sampling ratio."""

SAMPLING_EXPLORATION: Probability = 0.01
"""Floor on the sampling probability of any action."""


def _finite(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        raise ArithmeticError(f"non-finite value: {value}")
    return value


def _non_negative(value: float) -> float:
    if value < 0.0:
        raise ValueError(f"accumulated policy must be non-negative, got {value}")
    return value


class Profile(ABC):
    """Accumulated regrets and policy weights, with the CFR calculations built on them.

    Subclasses supply the epoch counter, the current traverser and lookups of
    accumulated values; everything else is derived.
    """

    @abstractmethod
    def increment(self) -> None:
        """Advance the epoch counter."""

    @abstractmethod
    def walker(self) -> Any:
        """Return the turn whose regrets are being updated this epoch."""

    @abstractmethod
    def epochs(self) -> int:
        """Return the number of completed iterations."""

    @abstractmethod
    def sum_policy(self, info: Any, edge: Any) -> Probability:
        """Return the accumulated policy weight for ``edge`` at ``info``."""

    @abstractmethod
    def sum_regret(self, info: Any, edge: Any) -> Utility:
        """Return the accumulated regret for ``edge`` at ``info``."""

    # exploration

    def explore(self, node: Node, branches: list[Branch]) -> list[Branch]:
        """External sampling: expand all of the walker's branches, sample one elsewhere."""
        if not branches:
            return branches
        turn = node.game.turn()
        if turn == self.walker():
            return branches
        if turn == type(turn).chance():
            return self.explore_any(node, branches)
        return self.explore_one(node, branches)

    def explore_any(self, node: Node, branches: list[Branch]) -> list[Branch]:
        """Pick one branch uniformly at random."""
        if not branches:
            raise ValueError("cannot sample from no branches")
        rng = self.rng(node.info)
        return [branches[rng.randrange(len(branches))]]

    def explore_one(self, node: Node, branches: list[Branch]) -> list[Branch]:
        """Pick one branch weighted by the sampling distribution."""
        if not branches:
            raise ValueError("cannot sample from no branches")
        info = node.info
        rng = self.rng(info)
        weights = [self.sample(info, branch[0]) for branch in branches]
        if not any(w > 0.0 for w in weights):
            raise ValueError("at least one sampling weight must be positive")
        choice = rng.choices(range(len(branches)), weights=weights)[0]
        return [branches[choice]]

    # update vectors

    def regret_vector(self, infoset: InfoSet) -> Policy:
        """Counterfactual regret of every choice at this information set."""
        return [
            (edge, _finite(self.info_gain(infoset, edge)))
            for edge in infoset.info().choices()
        ]

    def policy_vector(self, infoset: InfoSet) -> Policy:
        """Regret-matching distribution over the choices at this information set."""
        info = infoset.info()
        regrets = [
            (edge, max(self.sum_regret(info, edge), POLICY_MIN))
            for edge in info.choices()
        ]
        denominator = sum(r for _, r in regrets)
        return [(edge, r / denominator) for edge, r in regrets]

    # strategies

    def policy(self, info: Any, edge: Any) -> Probability:
        """Immediate strategy from accumulated regrets."""
        numer = max(self.sum_regret(info, edge), POLICY_MIN)
        denom = sum(
            max(_finite(self.sum_regret(info, e)), POLICY_MIN) for e in info.choices()
        )
        return numer / denom

    def advice(self, info: Any, edge: Any) -> Probability:
        """Long-run average strategy from accumulated policy weights."""
        numer = max(self.sum_policy(info, edge), POLICY_MIN)
        denom = sum(
            max(_non_negative(_finite(self.sum_policy(info, e))), POLICY_MIN)
            for e in info.choices()
        )
        return numer / denom

    def sample(self, info: Any, edge: Any) -> Probability:
        """Sampling probability q(a), floored by the exploration parameter."""
        numer = max(self.sum_policy(info, edge), POLICY_MIN)
        denom = sum(
            max(_non_negative(_finite(self.sum_policy(info, e))), POLICY_MIN)
            for e in info.choices()
        )
        denom = self.activation() + denom
        numer = self.activation() + numer * self.threshold()
        return max(numer / denom, self.exploration())

    # reach probabilities

    def outgoing_reach(self, node: Node, edge: Any) -> Probability:
        """Probability of leaving ``node`` along ``edge``."""
        return self.policy(node.info, edge)

    def relative_reach(self, root: Node, leaf: Node) -> Probability:
        """Probability of reaching ``leaf`` once below ``root``."""
        reach = 1.0
        for parent, incoming in leaf.ancestry():
            if parent == root:
                break
            reach *= self.outgoing_reach(parent, incoming)
        return reach

    def expected_reach(self, root: Node) -> Probability:
        """Probability of reaching ``root`` when everyone follows the profile."""
        return math.prod(
            self.outgoing_reach(parent, incoming) for parent, incoming in root.ancestry()
        )

    def cfactual_reach(self, root: Node) -> Probability:
        """Reach probability counting only the other players' moves."""
        walker = self.walker()
        return math.prod(
            self.outgoing_reach(parent, incoming)
            for parent, incoming in root.ancestry()
            if parent.game.turn() != walker
        )

    def sampling_reach(self, leaf: Node) -> Probability:
        """Probability that the sampling scheme produced the path to ``leaf``."""
        walker = self.walker()
        return math.prod(
            self.sample(parent.info, incoming)
            for parent, incoming in leaf.ancestry()
            if parent.game.turn() != walker
        )

    # utilities

    def relative_value(self, root: Node, leaf: Node) -> Utility:
        """Importance-weighted utility of ``leaf`` for the player acting at ``root``."""
        return (
            self.relative_reach(root, leaf)
            * leaf.game.payoff(root.game.turn())
            / self.sampling_reach(leaf)
        )

    def _require_walker(self, root: Node) -> None:
        if self.walker() != root.game.turn():
            raise ValueError("node does not belong to the current walker")

    def expected_value(self, root: Node) -> Utility:
        """Expected utility at ``root`` following the profile."""
        self._require_walker(root)
        return self.expected_reach(root) * sum(
            self.relative_value(root, leaf) for leaf in root.descendants()
        )

    def cfactual_value(self, root: Node, edge: Any) -> Utility:
        """Counterfactual utility of always taking ``edge`` at ``root``."""
        self._require_walker(root)
        child = root.follow(edge)
        if child is None:
            raise KeyError(f"edge {edge!r} does not leave this node")
        return self.cfactual_reach(root) * sum(
            self.relative_value(root, leaf) for leaf in child.descendants()
        )

    # counterfactual gains

    def info_gain(self, infoset: InfoSet, edge: Any) -> Utility:
        """Regret for ``edge`` summed over every node of the information set."""
        return sum(_finite(self.node_gain(root, edge)) for root in infoset.span())

    def node_gain(self, root: Node, edge: Any) -> Utility:
        """Regret for ``edge`` at one node."""
        self._require_walker(root)
        return self.cfactual_value(root, edge) - self.expected_value(root)

    # sampling

    def rng(self, info: Any) -> random.Random:
        """Generator seeded by epoch and information, so equal infos sample alike."""
        return random.Random(hash((self.epochs(), info)))

    def threshold(self) -> float:
        return SAMPLING_THRESHOLD

    def activation(self) -> float:
        return SAMPLING_ACTIVATION

    def exploration(self) -> Probability:
        return SAMPLING_EXPLORATION


def normalise(weights: Sequence[tuple[Any, float]]) -> Policy:
    """Scale non-negative weights so they sum to one."""
    total = sum(w for _, w in weights)
    if total <= 0.0:
        raise ValueError("weights must have a positive sum")
    return [(edge, w / total) for edge, w in weights]