"""Single-hand session: dealing, street progression and analysis."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from .cards import Card, Deck, create_deck, deal, draw_opponent_hand, shuffle
from .config import SimulationConfig
from .showdown import ShowdownReport, resolve_showdown
from .sim import EquityEstimator

LOGGER = logging.getLogger(__name__)


class Stage(Enum):
    IDLE = auto()
    PREFLOP = auto()
    FLOP = auto()
    TURN = auto()
    RIVER = auto()
    SHOWDOWN = auto()
    ANALYZING = auto()
    RESULTS = auto()


DEALT_STAGES = (Stage.PREFLOP, Stage.FLOP, Stage.TURN, Stage.RIVER)
# cards revealed when leaving each stage
_STREET_CARDS = {Stage.PREFLOP: (3, Stage.FLOP), Stage.FLOP: (1, Stage.TURN), Stage.TURN: (1, Stage.RIVER)}


class InvalidStage(ValueError):
    """Raised when an action is not allowed in the current stage."""


class AnalysisFailed(RuntimeError):
    """Raised when the showdown analysis could not be completed."""


@dataclass
class HandSession:
    """State of one dealt hand, replaced wholesale by :meth:`start_hand`."""

    config: SimulationConfig = field(default_factory=SimulationConfig)
    rng: random.Random = field(default_factory=random.Random)
    stage: Stage = Stage.IDLE
    deck: Deck = ()
    player_hole: Tuple[Card, ...] = ()
    opponent_holes: List[Tuple[Card, ...]] = field(default_factory=list)
    board: List[Card] = field(default_factory=list)
    report: Optional[ShowdownReport] = None

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "HandSession":
        return cls(config=config, rng=config.make_rng())

    def start_hand(self) -> None:
        deck = shuffle(create_deck(), self.rng)
        self.player_hole, deck = deal(deck, 2)
        self.opponent_holes = []
        for _ in range(self.config.opponents):
            hand, deck = draw_opponent_hand(
                deck,
                rng=self.rng,
                bias_toward=self.config.starting_hands,
                probability=self.config.strong_hand_probability,
            )
            self.opponent_holes.append(hand)
        self.deck = deck
        self.board = []
        self.report = None
        self.stage = Stage.PREFLOP
        LOGGER.debug("Dealt new hand against %d opponents", len(self.opponent_holes))

    def advance(self) -> Stage:
        """Reveal the next street, or move from the river to the showdown."""

        if self.stage == Stage.RIVER:
            self.stage = Stage.SHOWDOWN
            return self.stage
        if self.stage not in _STREET_CARDS:
            raise InvalidStage(f"Cannot advance from {self.stage.name}")
        count, next_stage = _STREET_CARDS[self.stage]
        dealt, self.deck = deal(self.deck, count)
        self.board.extend(dealt)
        self.stage = next_stage
        return self.stage

    def fold(self) -> None:
        if self.stage not in DEALT_STAGES:
            raise InvalidStage(f"Cannot fold during {self.stage.name}")
        self.stage = Stage.SHOWDOWN

    def run_to_showdown(self) -> None:
        while self.stage in DEALT_STAGES:
            self.advance()

    def analyze(self) -> ShowdownReport:
        if self.stage != Stage.SHOWDOWN:
            raise InvalidStage(f"Cannot analyze during {self.stage.name}")
        self.stage = Stage.ANALYZING
        estimator = EquityEstimator(
            rng=self.rng,
            samples=self.config.iterations,
            deadline=self.config.deadline_seconds,
        )
        try:
            report = resolve_showdown(
                self.player_hole,
                self.opponent_holes,
                self.board,
                rng=self.rng,
                estimator=estimator,
            )
        except Exception as exc:
            LOGGER.exception("Showdown analysis failed")
            self.stage = Stage.SHOWDOWN
            raise AnalysisFailed("Failed to analyze game") from exc
        self.report = report
        self.board = list(report.board)
        self.stage = Stage.RESULTS
        return report


__all__ = ["HandSession", "Stage", "AnalysisFailed", "InvalidStage"]
