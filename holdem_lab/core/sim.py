"""Monte Carlo equity simulation."""
from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .cards import Card, create_deck, exclude, shuffle
from .hand_eval import NO_HAND, evaluate

LOGGER = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 800
BOARD_SIZE = 5

# ``None`` marks an opponent whose hole cards are unknown.
OpponentHole = Optional[Sequence[Card]]


@dataclass(frozen=True)
class EquityResult:
    wins: int
    splits: int
    iterations: int
    requested: int

    @property
    def equity(self) -> float:
        if self.iterations == 0:
            return 0.0
        return (self.wins + self.splits * 0.5) / self.iterations

    @property
    def stopped_early(self) -> bool:
        return self.iterations < self.requested


def known_cards(
    player_hole: Sequence[Card],
    opponent_holes: Iterable[OpponentHole],
    board: Sequence[Card],
) -> List[Card]:
    """Collect every visible card, rejecting cards held by two parties."""

    cards = list(player_hole)
    for hole in opponent_holes:
        cards.extend(hole or ())
    cards.extend(board)
    if len(set(cards)) != len(cards):
        raise ValueError("The same card is held by more than one party")
    return cards


class EquityEstimator:
    """Estimates the player's share of the pot by completing the board at random.

    The run stops early when ``cancel_event`` is set or ``deadline`` seconds
    have elapsed; both are checked between iterations.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        samples: int = DEFAULT_ITERATIONS,
        deadline: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.rng = rng or random.Random()
        self.samples = samples
        self.deadline = deadline
        self.cancel_event = cancel_event

    def simulate(
        self,
        player_hole: Sequence[Card],
        opponent_holes: Sequence[OpponentHole],
        board: Sequence[Card] = (),
        iterations: int | None = None,
    ) -> EquityResult:
        requested = self.samples if iterations is None else iterations
        if requested < 0:
            raise ValueError("iterations must be positive")
        if len(board) > BOARD_SIZE:
            raise ValueError(f"A board holds at most {BOARD_SIZE} cards")
        player_hole = tuple(player_hole)
        board = tuple(board)
        holes = [None if hole is None else tuple(hole) for hole in opponent_holes]
        remaining = exclude(create_deck(), known_cards(player_hole, holes, board))
        missing = BOARD_SIZE - len(board)
        needed = missing + 2 * sum(1 for hole in holes if hole is None)
        if needed > len(remaining):
            raise ValueError("Not enough cards remaining")

        wins = 0
        splits = 0
        done = 0
        start = time.perf_counter()
        for _ in range(requested):
            if self._should_stop(start):
                LOGGER.info("Equity simulation stopped after %d of %d iterations", done, requested)
                break
            deck = shuffle(remaining, self.rng)
            full_board = board + deck[:missing]
            offset = missing
            player_rank = evaluate(player_hole + full_board) if player_hole else NO_HAND
            best_opponent = NO_HAND
            for hole in holes:
                if hole is None:
                    hole = deck[offset : offset + 2]
                    offset += 2
                if not hole:
                    continue
                rank = evaluate(hole + full_board)
                if rank > best_opponent:
                    best_opponent = rank
            if player_rank > best_opponent:
                wins += 1
            elif player_rank == best_opponent:
                splits += 1
            done += 1

        result = EquityResult(wins=wins, splits=splits, iterations=done, requested=requested)
        LOGGER.debug(
            "Equity %.3f over %d iterations (board=%d cards, opponents=%d)",
            result.equity,
            done,
            len(board),
            len(holes),
        )
        return result

    def estimate_equity(
        self,
        player_hole: Sequence[Card],
        opponent_holes: Sequence[OpponentHole],
        board: Sequence[Card] = (),
        iterations: int | None = None,
    ) -> float:
        return self.simulate(player_hole, opponent_holes, board, iterations).equity

    def _should_stop(self, start: float) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            return True
        return self.deadline is not None and time.perf_counter() - start >= self.deadline


def estimate_equity(
    player_hole: Sequence[Card],
    opponent_holes: Sequence[OpponentHole],
    known_board: Sequence[Card] = (),
    iterations: int = DEFAULT_ITERATIONS,
    *,
    rng: random.Random | None = None,
) -> float:
    """Estimate the player's win probability, counting ties as half a win."""

    estimator = EquityEstimator(rng=rng, samples=iterations)
    return estimator.estimate_equity(player_hole, opponent_holes, known_board)


__all__ = ["EquityEstimator", "EquityResult", "estimate_equity", "known_cards", "DEFAULT_ITERATIONS"]
