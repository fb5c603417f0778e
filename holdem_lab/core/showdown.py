"""Showdown resolution and retrospective equity report."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence, Tuple

from .cards import Card, create_deck, deal, exclude, shuffle
from .hand_eval import NO_HAND, HandRank, best_rank, evaluate
from .sim import BOARD_SIZE, DEFAULT_ITERATIONS, EquityEstimator, known_cards

LOGGER = logging.getLogger(__name__)

PLAYER = "Player"
SPLIT = "Split"

FLOP_SIZE = 3
TURN_SIZE = 4


@dataclass(frozen=True)
class EquitySnapshot:
    """Player win percentages (0-100) at each street."""

    preflop: int
    flop: int
    turn: int
    river: int


@dataclass(frozen=True)
class ShowdownReport:
    winner: str
    winning_hand_description: str
    player_hand_description: str
    opponent_hand_descriptions: Tuple[str, ...]
    equities: EquitySnapshot
    commentary: str
    board: Tuple[Card, ...] = ()


def opponent_label(index: int) -> str:
    return f"Opponent {index + 1}"


def _party_rank(hole: Sequence[Card], board: Sequence[Card]) -> HandRank:
    if not hole:
        return NO_HAND
    return evaluate(tuple(hole) + tuple(board))


def _percent(probability: float) -> int:
    return int(probability * 100 + 0.5)


def complete_board(
    player_hole: Sequence[Card],
    opponent_holes: Sequence[Sequence[Card]],
    board: Sequence[Card],
    rng: random.Random | None = None,
) -> Tuple[Card, ...]:
    """Run the board out to the river from the cards nobody can see."""

    board = tuple(board)
    if len(board) > BOARD_SIZE:
        raise ValueError(f"A board holds at most {BOARD_SIZE} cards")
    if len(board) == BOARD_SIZE:
        return board
    remaining = exclude(create_deck(), known_cards(player_hole, opponent_holes, board))
    dealt, _ = deal(shuffle(remaining, rng), BOARD_SIZE - len(board))
    LOGGER.debug("Completed board with %d random cards", len(dealt))
    return board + dealt


def determine_winner(player: HandRank, opponents: Sequence[HandRank]) -> Tuple[str, str]:
    """Return the winner label and the winning hand's description.

    Opponents tied with one another for the best hand are not split; the
    first of them is reported as the winner.
    """

    best_index, best = best_rank(opponents)
    if player > best:
        return PLAYER, player.description
    if player < best:
        return opponent_label(best_index), best.description
    return SPLIT, player.description


def write_commentary(winner: str, preflop_equity: float, opponent_count: int, description: str) -> str:
    if winner == PLAYER:
        if preflop_equity < 1 / (opponent_count + 1):
            return "Amazing win! You beat the odds against multiple opponents."
        if preflop_equity > 0.7:
            return "Dominant performance. You were ahead most of the way."
        return f"Well played. Your {description} secured the pot."
    if winner == SPLIT:
        return "It's a split pot! A rare tie game."
    return f"{winner} takes it with {description}. Tough field today!"


def resolve_showdown(
    player_hole: Sequence[Card],
    opponent_holes: Sequence[Sequence[Card]],
    board: Sequence[Card],
    *,
    iterations: int = DEFAULT_ITERATIONS,
    rng: random.Random | None = None,
    estimator: EquityEstimator | None = None,
) -> ShowdownReport:
    """Decide the hand and build the equity curve for the player.

    Flop and turn equity are simulated on the run-out board, so a hand that
    ended early still gets a full curve. The river value follows the actual
    result rather than a simulation.
    """

    rng = rng or random.Random()
    estimator = estimator or EquityEstimator(rng=rng, samples=iterations)
    player_hole = tuple(player_hole)
    opponent_holes = [tuple(hole) for hole in opponent_holes]
    final_board = complete_board(player_hole, opponent_holes, board, rng)
    player_rank = _party_rank(player_hole, final_board)
    opponent_ranks = [_party_rank(hole, final_board) for hole in opponent_holes]
    winner, winning_description = determine_winner(player_rank, opponent_ranks)
    LOGGER.debug("Showdown winner %s with %s", winner, winning_description)

    preflop = estimator.estimate_equity(player_hole, opponent_holes, ())
    flop = estimator.estimate_equity(player_hole, opponent_holes, final_board[:FLOP_SIZE])
    turn = estimator.estimate_equity(player_hole, opponent_holes, final_board[:TURN_SIZE])
    river = {PLAYER: 1.0, SPLIT: 0.5}.get(winner, 0.0)

    equities = EquitySnapshot(
        preflop=_percent(preflop),
        flop=_percent(flop),
        turn=_percent(turn),
        river=_percent(river),
    )
    return ShowdownReport(
        winner=winner,
        winning_hand_description=winning_description,
        player_hand_description=player_rank.description,
        opponent_hand_descriptions=tuple(rank.description for rank in opponent_ranks),
        equities=equities,
        commentary=write_commentary(winner, preflop, len(opponent_holes), winning_description),
        board=final_board,
    )


__all__ = [
    "resolve_showdown",
    "complete_board",
    "determine_winner",
    "write_commentary",
    "ShowdownReport",
    "EquitySnapshot",
    "PLAYER",
    "SPLIT",
]
