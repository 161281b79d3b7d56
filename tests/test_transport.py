import pytest
from hypothesis import given
from hypothesis import strategies as st

from regretkit.transport import Coupling, Density, Measure, density, support


class Uniform(Density):
    def __init__(self, points):
        self.points = list(points)

    def density(self, x):
        return 1.0 / len(self.points) if x in self.points else 0.0

    def support(self):
        return iter(self.points)


class Absolute(Measure):
    def distance(self, x, y):
        return abs(x - y)


class Identity(Coupling):
    def __init__(self, p, measure):
        self.p = p
        self.measure = measure
        self.minimized = False

    def minimize(self):
        self.minimized = True
        return self

    def flow(self, x, y):
        return density(self.p, x) if x == y else 0.0

    def cost(self):
        return sum(
            self.flow(x, y) * self.measure.distance(x, y)
            for x in support(self.p)
            for y in support(self.p)
        )


def test_mapping_density_and_missing_point():
    dist = {"a": 0.25, "b": 0.75}
    assert density(dist, "b") == 0.75
    assert density(dist, "z") == 0.0


def test_pairs_density_uses_first_match():
    dist = [("a", 0.1), ("b", 0.2), ("a", 0.7)]
    assert density(dist, "a") == 0.1
    assert density(dist, "c") == 0.0


def test_support_preserves_order():
    assert list(support([("x", 0.5), ("y", 0.5)])) == ["x", "y"]
    assert list(support({"q": 0.3, "p": 0.7})) == ["q", "p"]


def test_density_subclass_dispatch():
    u = Uniform([1, 2, 4, 8])
    assert density(u, 2) == u.density(2)
    assert density(u, 3) == 0.0
    assert list(support(u)) == [1, 2, 4, 8]


def test_abstract_classes_cannot_be_instantiated():
    with pytest.raises(TypeError):
        Density()
    with pytest.raises(TypeError):
        Measure()
    with pytest.raises(TypeError):
        Coupling()


def test_coupling_contract():
    p = {1: 0.5, 3: 0.5}
    coupling = Identity(p, Absolute()).minimize()
    assert coupling.minimized is True
    assert density(p, 1) == 0.5
    assert coupling.flow(1, 1) == density(p, 1)
    assert coupling.flow(1, 3) == 0.0
    assert list(support(p)) == [1, 3]
    assert coupling.cost() == 0.0


@given(st.dictionaries(st.integers(), st.floats(0, 1), max_size=20))
def test_mapping_mass_over_support(dist):
    total = sum(density(dist, x) for x in support(dist))
    assert total == pytest.approx(sum(dist.values()))


@given(st.lists(st.tuples(st.integers(0, 5), st.floats(0, 1)), max_size=15))
def test_pairs_match_first_occurrence(pairs):
    first = {}
    for point, p in pairs:
        first.setdefault(point, p)
    for point in range(7):
        assert density(pairs, point) == first.get(point, 0.0)