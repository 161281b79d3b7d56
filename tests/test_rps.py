import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from regretkit.rps import ASYMMETRIC_UTILITY, RPS, Edge, Game, Turn
from regretkit.tree import Branch, Tree


class QuickRPS(RPS):
    @classmethod
    def tree_count(cls):
        return 24

    @classmethod
    def batch_size(cls):
        return 2


def test_edges_are_ordered_rock_paper_scissors():
    assert sorted([Edge.S, Edge.R, Edge.P]) == Turn.P1.choices()
    assert Edge.R < Edge.S


def test_turn_choices_and_chance():
    assert Turn.chance() is Turn.Terminal
    assert Turn.P1.choices() == [Edge.R, Edge.P, Edge.S]
    assert Turn.P2.choices() == [Edge.R, Edge.P, Edge.S]
    assert Turn.Terminal.choices() == []
    assert str(Turn.P2) == "P2"


def test_game_turns():
    assert Game.root() == Game(0)
    assert Game(0).turn() is Turn.P1
    assert [Game(s).turn() for s in (1, 2, 3)] == [Turn.P2] * 3
    assert all(Game(s).turn() is Turn.Terminal for s in range(4, 13))
    with pytest.raises(ValueError):
        Game(13).turn()


@pytest.mark.parametrize(
    "state, edge, expected",
    [
        (0, Edge.R, 1), (0, Edge.P, 2), (0, Edge.S, 3),
        (1, Edge.R, 4), (1, Edge.P, 5), (1, Edge.S, 6),
        (2, Edge.R, 7), (2, Edge.P, 8), (2, Edge.S, 9),
        (3, Edge.R, 10), (3, Edge.P, 11), (3, Edge.S, 12),
    ],
)
def test_game_transitions(state, edge, expected):
    assert Game(state).apply(edge) == Game(expected)


def test_apply_from_terminal_raises():
    with pytest.raises(ValueError):
        Game(5).apply(Edge.R)


def test_payoffs_for_player_one():
    assert Game(7).payoff(Turn.P1) == 1.0
    assert Game(5).payoff(Turn.P1) == -1.0
    assert Game(4).payoff(Turn.P1) == 0.0
    assert Game(6).payoff(Turn.P1) == ASYMMETRIC_UTILITY * Game(7).payoff(Turn.P1)
    assert Game(9).payoff(Turn.P1) == Game(10).payoff(Turn.P1)


@given(st.integers(min_value=4, max_value=12))
def test_payoff_is_zero_sum(state):
    game = Game(state)
    assert game.payoff(Turn.P1) == -game.payoff(Turn.P2)


def test_payoff_errors():
    with pytest.raises(ValueError):
        Game(2).payoff(Turn.P1)
    with pytest.raises(ValueError):
        Game(7).payoff(Turn.Terminal)


@given(st.sampled_from(list(Edge)), st.sampled_from(list(Edge)))
def test_two_throws_reach_a_terminal_state(first, second):
    end = Game.root().apply(first).apply(second)
    assert end.turn() is Turn.Terminal


def test_accumulators_default_to_zero_and_store():
    rps = RPS()
    assert rps.sum_policy(Turn.P1, Edge.R) == 0.0
    assert rps.sum_regret(Turn.P1, Edge.R) == 0.0
    rps.set_policy(Turn.P1, Edge.R, 0.25)
    rps.set_regret(Turn.P1, Edge.R, -2.5)
    assert rps.sum_policy(Turn.P1, Edge.R) == 0.25
    assert rps.sum_regret(Turn.P1, Edge.R) == -2.5
    assert rps.sum_regret(Turn.P2, Edge.R) == 0.0


def test_walker_alternates_with_epochs():
    rps = RPS()
    assert rps.walker() is Turn.P1
    rps.advance()
    assert rps.epochs() == 1
    assert rps.walker() is Turn.P2
    rps.increment()
    assert rps.walker() is Turn.P1


def test_encoder_and_profile_are_self():
    rps = RPS()
    assert rps.encoder() is rps
    assert rps.profile() is rps


def test_encoding_hides_first_throw():
    rps = RPS()
    tree = Tree()
    assert rps.seed(Game.root()) is Turn.P1
    root = tree.seed(Turn.P1, Game.root())
    infos = {rps.info(tree, Branch(e, Game.root().apply(e), root.index)) for e in Edge}
    assert infos == {Turn.P2}
    assert rps.info(tree, Branch(Edge.R, Game(4), root.index)) is Turn.Terminal


def test_display_lists_encounters():
    rps = RPS()
    assert str(rps) == "Turns: 0\n"
    rps.set_regret(Turn.P1, Edge.R, 1.0)
    text = str(rps)
    assert "  P1:" in text
    assert "    R  R  +1.00" in text


def test_solve_rock_paper_scissors():
    rps = QuickRPS()
    solved = RPS.solve(rps)
    assert solved is rps
    assert solved.epochs() == 12
    assert set(solved.encounters) == {Turn.P1, Turn.P2}
    for turn in (Turn.P1, Turn.P2):
        total = sum(solved.advice(turn, e) for e in Edge)
        assert total == pytest.approx(1.0)
        assert all(0.0 <= solved.advice(turn, e) <= 1.0 for e in Edge)


def test_solve_is_deterministic():
    first = RPS.solve(QuickRPS())
    second = RPS.solve(QuickRPS())
    for turn in (Turn.P1, Turn.P2):
        for edge in Edge:
            assert first.sum_regret(turn, edge) == second.sum_regret(turn, edge)
            assert first.sum_policy(turn, edge) == second.sum_policy(turn, edge)


def test_train_logs_solution(caplog):
    with caplog.at_level(logging.INFO, logger="regretkit.rps"):
        RPS.train.__func__(QuickRPS)
    assert "Turns: 12" in caplog.text


def test_default_counts():
    assert RPS.iterations() == RPS.tree_count() // RPS.batch_size()
    assert RPS.batch_size() >= 1