import random
import threading

import pytest

from holdem_lab.core.cards import parse_cards
from holdem_lab.core.sim import EquityEstimator, estimate_equity


def test_equity_bounds_and_counts():
    estimator = EquityEstimator(rng=random.Random(7), samples=300)
    result = estimator.simulate(parse_cards(["Qs", "Jh"]), [parse_cards(["9c", "9d"])])
    assert result.iterations == 300
    assert result.wins + result.splits <= 300
    assert 0.0 <= result.equity <= 1.0
    assert not result.stopped_early


def test_seeded_runs_are_reproducible():
    hole = parse_cards(["Ah", "Kh"])
    opponents = [parse_cards(["Qd", "Qc"])]
    first = estimate_equity(hole, opponents, (), 200, rng=random.Random(99))
    second = estimate_equity(hole, opponents, (), 200, rng=random.Random(99))
    assert first == second


def test_complete_board_is_exact():
    hole = parse_cards(["As", "Ah"])
    opponents = [parse_cards(["Ks", "Kh"])]
    board = parse_cards(["Ad", "7c", "8d", "2h", "Js"])
    assert estimate_equity(hole, opponents, board, 50, rng=random.Random(1)) == 1.0
    assert estimate_equity(opponents[0], [hole], board, 50, rng=random.Random(1)) == 0.0


def test_board_plays_for_both_counts_half():
    board = parse_cards(["Ts", "Js", "Qs", "Ks", "As"])
    equity = estimate_equity(parse_cards(["2h", "2d"]), [parse_cards(["3h", "3d"])], board, 20)
    assert equity == 0.5


def test_folded_player_has_no_equity():
    board = parse_cards(["Ts", "Js", "Qs", "Ks", "As"])
    equity = estimate_equity((), [parse_cards(["2h", "3d"])], board, 50, rng=random.Random(3))
    assert equity == 0.0


def test_aces_against_kings_converges():
    equity = estimate_equity(
        parse_cards(["As", "Ah"]),
        [parse_cards(["Ks", "Kh"])],
        (),
        4000,
        rng=random.Random(2024),
    )
    assert 0.77 <= equity <= 0.87


def test_aces_against_random_hand():
    equity = estimate_equity(parse_cards(["As", "Ah"]), [None], (), 5000, rng=random.Random(5))
    assert 0.82 <= equity <= 0.88


def test_flop_equity_uses_known_board():
    hole = parse_cards(["As", "Ah"])
    opponents = [parse_cards(["Ks", "Kh"])]
    flop = parse_cards(["Kd", "7c", "2h"])
    equity = estimate_equity(hole, opponents, flop, 1000, rng=random.Random(3))
    assert equity < 0.2


def test_largest_opponent_decides():
    hole = parse_cards(["Js", "Jh"])
    weak = parse_cards(["2c", "7d"])
    strong = parse_cards(["As", "Ah"])
    alone = estimate_equity(hole, [weak], (), 1000, rng=random.Random(8))
    crowded = estimate_equity(hole, [weak, strong], (), 1000, rng=random.Random(8))
    assert crowded < alone


def test_folded_opponent_never_wins():
    equity = estimate_equity(parse_cards(["7s", "2h"]), [()], (), 100, rng=random.Random(4))
    assert equity == 1.0


def test_cancel_event_stops_before_first_iteration():
    event = threading.Event()
    event.set()
    estimator = EquityEstimator(rng=random.Random(1), samples=500, cancel_event=event)
    result = estimator.simulate(parse_cards(["As", "Ah"]), [parse_cards(["Ks", "Kh"])])
    assert result.iterations == 0
    assert result.equity == 0.0
    assert result.stopped_early


def test_deadline_stops_simulation():
    estimator = EquityEstimator(rng=random.Random(1), samples=500, deadline=0.0)
    result = estimator.simulate(parse_cards(["As", "Ah"]), [parse_cards(["Ks", "Kh"])])
    assert result.stopped_early
    assert result.requested == 500


def test_shared_cards_are_rejected():
    with pytest.raises(ValueError):
        estimate_equity(parse_cards(["As", "Ah"]), [parse_cards(["As", "Kh"])], (), 10)
    with pytest.raises(ValueError):
        estimate_equity(
            parse_cards(["As", "Ah"]),
            [parse_cards(["Ks", "Kh"])],
            parse_cards(["2c", "3c", "4c", "5c", "6c", "7c"]),
            10,
        )
