"""Simulation settings loaded from JSON."""
from __future__ import annotations

import json
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .cards import StartingHand
from .sim import DEFAULT_ITERATIONS

DATA_PATH = Path(__file__).resolve().parent.parent / "data"
DEFAULT_CONFIG = DATA_PATH / "simulation.json"
MAX_OPPONENTS = 8


@dataclass
class SimulationConfig:
    opponents: int = 1
    iterations: int = DEFAULT_ITERATIONS
    strong_hand_probability: float = 0.5
    strong_hands: Tuple[str, ...] = ("AA", "AK", "QQ", "T9s")
    seed: Optional[int] = None
    deadline_seconds: Optional[float] = None
    starting_hands: Tuple[StartingHand, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not 1 <= self.opponents <= MAX_OPPONENTS:
            raise ValueError(f"opponents must be between 1 and {MAX_OPPONENTS}")
        if self.iterations < 1:
            raise ValueError("iterations must be positive")
        if not 0.0 <= self.strong_hand_probability <= 1.0:
            raise ValueError("strong_hand_probability must be between 0 and 1")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ValueError("deadline_seconds must be positive")
        self.strong_hands = tuple(self.strong_hands)
        self.starting_hands = tuple(StartingHand.parse(label) for label in self.strong_hands)

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)


def config_from_dict(data: Dict[str, Any]) -> SimulationConfig:
    """Build a config from parsed JSON, ignoring keys it does not know."""

    defaults = SimulationConfig()
    try:
        return SimulationConfig(
            opponents=int(data.get("opponents", defaults.opponents)),
            iterations=int(data.get("iterations", defaults.iterations)),
            strong_hand_probability=float(data.get("strong_hand_probability", defaults.strong_hand_probability)),
            strong_hands=tuple(data.get("strong_hands", defaults.strong_hands)),
            seed=data.get("seed", defaults.seed),
            deadline_seconds=data.get("deadline_seconds", defaults.deadline_seconds),
        )
    except TypeError as exc:
        raise ValueError(f"Invalid simulation config: {exc}") from exc


def load_config(path: Path | str | None = None) -> SimulationConfig:
    path = Path(path) if path is not None else DEFAULT_CONFIG
    if not path.exists():
        return SimulationConfig()
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return config_from_dict(data)


__all__ = ["SimulationConfig", "load_config", "config_from_dict", "DATA_PATH"]
