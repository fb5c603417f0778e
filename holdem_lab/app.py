"""Console bootstrap for the hold'em analyzer."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .core.cards import Card, format_cards, parse_cards
from .core.config import SimulationConfig, load_config
from .core.showdown import ShowdownReport, resolve_showdown
from .core.sim import EquityEstimator
from .core.table import AnalysisFailed, HandSession

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="holdem-lab", description="Texas Hold'em showdown and equity analyzer")
    parser.add_argument("--config", help="JSON file with simulation settings")
    parser.add_argument("--hole", help="player hole cards, e.g. 'As Ah'")
    parser.add_argument(
        "--opponent",
        action="append",
        default=[],
        help="opponent hole cards, repeat once per opponent",
    )
    parser.add_argument("--board", default="", help="community cards dealt so far")
    parser.add_argument("--opponents", type=int, help="number of opponents to deal")
    parser.add_argument("--iterations", type=int, help="Monte Carlo samples per street")
    parser.add_argument("--seed", type=int, help="random seed")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def _config_from_args(args: argparse.Namespace) -> SimulationConfig:
    config = load_config(args.config)
    return SimulationConfig(
        opponents=args.opponents if args.opponents is not None else config.opponents,
        iterations=args.iterations if args.iterations is not None else config.iterations,
        strong_hand_probability=config.strong_hand_probability,
        strong_hands=config.strong_hands,
        seed=args.seed if args.seed is not None else config.seed,
        deadline_seconds=config.deadline_seconds,
    )


def _split_cards(text: str) -> List[Card]:
    return parse_cards(text.replace(",", " ").split())


def format_report(
    report: ShowdownReport,
    player_hole: Sequence[Card],
    opponent_holes: Sequence[Sequence[Card]],
) -> str:
    lines = [
        f"Player: {format_cards(player_hole)}  {report.player_hand_description}",
    ]
    for index, (hole, description) in enumerate(zip(opponent_holes, report.opponent_hand_descriptions)):
        lines.append(f"Opponent {index + 1}: {format_cards(hole)}  {description}")
    equities = report.equities
    lines.extend(
        [
            f"Board: {format_cards(report.board)}",
            f"Winner: {report.winner} ({report.winning_hand_description})",
            f"Equity: preflop {equities.preflop}% | flop {equities.flop}% | "
            f"turn {equities.turn}% | river {equities.river}%",
            report.commentary,
        ]
    )
    return "\n".join(lines)


def run(argv: Optional[list[str]] = None) -> int:
    """Analyze one hand and print the report."""

    args = build_parser().parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = _config_from_args(args)
        if args.hole:
            player_hole = _split_cards(args.hole)
            opponent_holes = [_split_cards(text) for text in args.opponent]
            if not opponent_holes:
                raise ValueError("--hole needs at least one --opponent")
            rng = config.make_rng()
            estimator = EquityEstimator(rng=rng, samples=config.iterations, deadline=config.deadline_seconds)
            report = resolve_showdown(
                player_hole,
                opponent_holes,
                _split_cards(args.board),
                rng=rng,
                estimator=estimator,
            )
        else:
            session = HandSession.from_config(config)
            session.start_hand()
            session.run_to_showdown()
            report = session.analyze()
            player_hole, opponent_holes = session.player_hole, session.opponent_holes
    except (ValueError, AnalysisFailed) as exc:
        LOGGER.debug("Analysis aborted", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(format_report(report, player_hole, opponent_holes))
    return 0


__all__ = ["run", "build_parser", "format_report"]
