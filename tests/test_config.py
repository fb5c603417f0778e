import json

import pytest

from holdem_lab.core.cards import StartingHand
from holdem_lab.core.config import SimulationConfig, load_config


def test_load_config_from_file(tmp_path):
    config_path = tmp_path / "simulation.json"
    config_path.write_text(
        json.dumps(
            {
                "opponents": 3,
                "iterations": 2000,
                "strong_hand_probability": 0.25,
                "strong_hands": ["KK", "AQs"],
                "seed": 17,
                "theme": "dark",
            }
        )
    )

    config = load_config(config_path)
    assert config.opponents == 3
    assert config.iterations == 2000
    assert config.strong_hand_probability == 0.25
    assert config.starting_hands == (StartingHand(13, 13), StartingHand(14, 12, True))
    assert config.seed == 17
    assert config.deadline_seconds is None


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "absent.json")
    assert config == SimulationConfig()
    assert config.iterations == 800
    assert [str(hand) for hand in config.starting_hands] == ["AA", "AK", "QQ", "T9s"]


def test_seeded_rng_is_reproducible():
    config = SimulationConfig(seed=4)
    assert config.make_rng().random() == config.make_rng().random()


@pytest.mark.parametrize(
    "payload",
    [
        {"opponents": 0},
        {"opponents": 9},
        {"iterations": 0},
        {"strong_hand_probability": 1.5},
        {"strong_hands": ["XY"]},
        {"deadline_seconds": -1},
        {"iterations": None},
    ],
)
def test_invalid_values_rejected(tmp_path, payload):
    config_path = tmp_path / "simulation.json"
    config_path.write_text(json.dumps(payload))
    with pytest.raises(ValueError):
        load_config(config_path)


def test_non_object_rejected(tmp_path):
    config_path = tmp_path / "simulation.json"
    config_path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_config(config_path)
