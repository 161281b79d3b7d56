"""Probability densities over arbitrary supports and optimal-transport couplings."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol, Union

Probability = float


class Support(Protocol):
    """Marker for values that can be the support of a probability distribution."""


class Density(ABC):
    """A probability distribution over some support."""

    @abstractmethod
    def density(self, x: Any) -> Probability:
        """Return the probability mass at ``x``."""

    @abstractmethod
    def support(self) -> Iterator[Any]:
        """Iterate over the points that carry mass."""


class Measure(ABC):
    """Element-wise distance between points of two supports."""

    @abstractmethod
    def distance(self, x: Any, y: Any) -> float:
        """Return the distance between ``x`` and ``y``."""


class Coupling(ABC):
    """A transport plan between two densities under some measure."""

    @abstractmethod
    def minimize(self) -> "Coupling":
        """Optimise the plan and return the optimised coupling."""

    @abstractmethod
    def flow(self, x: Any, y: Any) -> float:
        """Return the mass moved from ``x`` to ``y``."""

    @abstractmethod
    def cost(self) -> float:
        """Return the total transport cost of the (minimised) plan."""


Distribution = Union[Density, Mapping[Any, Probability], Iterable[tuple[Any, Probability]]]


def density(distribution: Distribution, x: Any) -> Probability:
    """Probability of ``x`` under a Density, a mapping, or a sequence of pairs.

    Points outside the support have probability zero. For a sequence of
    pairs, the first pair whose point equals ``x`` wins.
    """
    if isinstance(distribution, Density):
        return distribution.density(x)
    if isinstance(distribution, Mapping):
        return float(distribution.get(x, 0.0))
    for point, probability in distribution:
        if point == x:
            return float(probability)
    return 0.0


def support(distribution: Distribution) -> Iterator[Any]:
    """Iterate over the support of a Density, a mapping, or a sequence of pairs."""
    if isinstance(distribution, Density):
        return iter(distribution.support())
    if isinstance(distribution, Mapping):
        return iter(distribution.keys())
    return (point for point, _ in distribution)