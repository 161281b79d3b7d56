"""Training loop for regret minimisation: tree sampling, update vectors and discounting."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Optional

from .profile import POLICY_MIN, Profile
from .tree import Branch, Counterfactual, InfoSet, Node, Tree

logger = logging.getLogger(__name__)

REGRET_MIN: float = -3e5
"""Floor applied to accumulated regrets."""

_INTERRUPTED = threading.Event()


def request_interrupt() -> None:
    """Ask every running training loop to stop after its current batch."""
    _INTERRUPTED.set()


def clear_interrupt() -> None:
    """Withdraw a pending interrupt request."""
    _INTERRUPTED.clear()


class Blueprint(ABC):
    """Drives training: samples trees, computes counterfactuals, updates the profile.

    Subclasses name the game class, say how many trees to sample and in what
    batches, and give access to the encoder, the profile and the accumulators.
    """

    game_class: ClassVar[type]

    @classmethod
    @abstractmethod
    def train(cls) -> None:
        """Run a full training session."""

    @classmethod
    @abstractmethod
    def batch_size(cls) -> int:
        """Number of trees sampled per update."""

    @classmethod
    @abstractmethod
    def tree_count(cls) -> int:
        """Total number of trees sampled during training."""

    @classmethod
    def iterations(cls) -> int:
        """Number of batches in a training session."""
        return cls.tree_count() // cls.batch_size()

    @abstractmethod
    def encoder(self) -> Any:
        """Return the encoder that maps game states to information."""

    @abstractmethod
    def profile(self) -> Profile:
        """Return the strategy profile being trained."""

    @abstractmethod
    def advance(self) -> None:
        """Move on to the next iteration."""

    @abstractmethod
    def set_regret(self, info: Any, edge: Any, value: float) -> None:
        """Store the accumulated regret for ``edge`` at ``info``."""

    @abstractmethod
    def set_policy(self, info: Any, edge: Any, value: float) -> None:
        """Store the accumulated policy weight for ``edge`` at ``info``."""

    # training

    def solve(self) -> "Blueprint":
        """Run every iteration, or until interrupted, and return self."""
        logger.info("training for %d iterations; request_interrupt() stops gracefully",
                    self.iterations())
        for _ in range(self.iterations()):
            for update in self.batch():
                self.update_regret(update)
                self.update_weight(update)
            if self.interrupted():
                break
        return self

    def interrupted(self) -> bool:
        """Report a pending interrupt, or advance to the next iteration."""
        if _INTERRUPTED.is_set():
            logger.warning("training interrupted @ %d", self.profile().epochs())
            return True
        self.advance()
        return False

    def update_regret(self, cfr: Counterfactual) -> None:
        """Fold a regret vector into the accumulated, discounted regrets."""
        info = cfr.info
        profile = self.profile()
        for edge, regret in cfr.regret:
            accumulated = profile.sum_regret(info, edge)
            discount = self.discount(accumulated)
            self.set_regret(info, edge, max(accumulated * discount + regret, REGRET_MIN))

    def update_weight(self, cfr: Counterfactual) -> None:
        """Fold a policy vector into the accumulated, discounted policy weights."""
        info = cfr.info
        profile = self.profile()
        for edge, policy in cfr.policy:
            discount = self.discount(None)
            accumulated = profile.sum_policy(info, edge)
            self.set_policy(info, edge, max(accumulated * discount + policy, POLICY_MIN))

    def batch(self) -> list[Counterfactual]:
        """Sample a batch of trees and return an update for each walker infoset."""
        walker = self.profile().walker()
        trees = [self.tree() for _ in range(self.batch_size())]
        infosets = [
            infoset
            for tree in trees
            for infoset in tree.partition().values()
            if infoset.head().game.turn() == walker
        ]
        return [self.counterfactual(infoset) for infoset in infosets]

    def tree(self) -> Tree:
        """Grow one sampled tree depth first from the root."""
        tree = Tree()
        root = self.root()
        node = tree.seed(self.encoder().seed(root), root)
        todo: list[Branch] = list(self._expand(node))
        while todo:
            leaf = todo.pop()
            node = tree.grow(self.encoder().info(tree, leaf), leaf)
            todo.extend(self._expand(node))
        return tree

    def _expand(self, node: Node) -> list[Branch]:
        return self.profile().explore(node, self.encoder().branches(node))

    def counterfactual(self, infoset: InfoSet) -> Counterfactual:
        """Regret and policy vectors at one information set."""
        profile = self.profile()
        return Counterfactual(
            infoset.info(),
            profile.regret_vector(infoset),
            profile.policy_vector(infoset),
        )

    def root(self) -> Any:
        """Return the starting game state."""
        return self.game_class.root()

    # discounting

    def discount(self, regret: Optional[float]) -> float:
        """Discount factor for policy weights (``None``) or for a regret value."""
        t = float(self.profile().epochs())
        if regret is None:
            return (t / (t + 1.0)) ** self.gamma()
        p = float(self.period())
        if t % p != 0.0:
            return 1.0
        if regret > 0.0:
            x = (t / p) ** self.alpha()
        elif regret < 0.0:
            x = (t / p) ** self.omega()
        else:
            x = t / p
        return x / (x + 1.0)

    def alpha(self) -> float:
        return 1.5

    def omega(self) -> float:
        return 0.5

    def gamma(self) -> float:
        return 1.5

    def period(self) -> int:
        return 1