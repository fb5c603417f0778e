"""Card and deck utilities."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

LOGGER = logging.getLogger(__name__)

SUITS = ("♠", "♥", "♦", "♣")
RANKS = ("2", "3", "4", "5", "6", "7", "8", "9", "T", "J", "Q", "K", "A")
RANK_TO_VALUE = {r: i + 2 for i, r in enumerate(RANKS)}
VALUE_TO_RANK = {v: r for r, v in RANK_TO_VALUE.items()}
SUIT_ALIASES = {"s": "♠", "h": "♥", "d": "♦", "c": "♣"}

Deck = Tuple["Card", ...]


@dataclass(frozen=True)
class Card:
    """Representation of a standard playing card."""

    rank: int
    suit: str

    def __str__(self) -> str:
        return f"{VALUE_TO_RANK[self.rank]}{self.suit}"


@dataclass(frozen=True)
class StartingHand:
    """A two-card starting hand pattern such as ``AK`` or ``T9s``."""

    high: int
    low: int
    suited: bool = False

    @classmethod
    def parse(cls, label: str) -> "StartingHand":
        if len(label) not in (2, 3) or (len(label) == 3 and label[2].lower() != "s"):
            raise ValueError(f"Unknown starting hand {label!r}")
        try:
            high, low = RANK_TO_VALUE[label[0].upper()], RANK_TO_VALUE[label[1].upper()]
        except KeyError:
            raise ValueError(f"Unknown starting hand {label!r}") from None
        if len(label) == 3 and high == low:
            raise ValueError(f"A pair cannot be suited: {label!r}")
        return cls(max(high, low), min(high, low), len(label) == 3)

    def __str__(self) -> str:
        suffix = "s" if self.suited else ""
        return f"{VALUE_TO_RANK[self.high]}{VALUE_TO_RANK[self.low]}{suffix}"


STRONG_HANDS = tuple(StartingHand.parse(label) for label in ("AA", "AK", "QQ", "T9s"))


def create_deck() -> Deck:
    """Return the 52 cards in a fixed suit-major order."""

    return tuple(Card(RANK_TO_VALUE[r], s) for s in SUITS for r in RANKS)


def shuffle(deck: Sequence[Card], rng: random.Random | None = None) -> Deck:
    """Return a shuffled copy of ``deck``; the input is left untouched."""

    cards = list(deck)
    (rng or random).shuffle(cards)
    return tuple(cards)


def exclude(deck: Sequence[Card], known: Iterable[Card]) -> Deck:
    lookup = {(card.rank, card.suit) for card in known}
    return tuple(card for card in deck if (card.rank, card.suit) not in lookup)


def deal(deck: Sequence[Card], count: int = 1) -> Tuple[Deck, Deck]:
    """Take ``count`` cards from the top of the deck.

    Returns the dealt cards and the remaining deck.
    """

    if count < 0:
        raise ValueError("count must be positive")
    if count > len(deck):
        raise ValueError("Not enough cards remaining")
    return tuple(deck[:count]), tuple(deck[count:])


def acquire_starting_hand(deck: Sequence[Card], target: StartingHand) -> Optional[Tuple[Card, Card]]:
    """Search the deck for two cards matching ``target``.

    Returns ``None`` when the deck no longer holds a matching combination.
    """

    for first in deck:
        if first.rank != target.high:
            continue
        for second in deck:
            if second == first or second.rank != target.low:
                continue
            if target.suited and second.suit != first.suit:
                continue
            return first, second
    return None


def draw_opponent_hand(
    deck: Sequence[Card],
    *,
    rng: random.Random | None = None,
    bias_toward: Sequence[StartingHand] = STRONG_HANDS,
    probability: float = 0.5,
) -> Tuple[Tuple[Card, Card], Deck]:
    """Deal an opponent two cards, favouring the ``bias_toward`` hands.

    With ``probability`` one of the targets is picked and looked up in the
    deck. If it cannot be made from the remaining cards, or the bias roll
    fails, the top two cards are dealt instead.
    """

    rng = rng or random.Random()
    if bias_toward and rng.random() < probability:
        target = rng.choice(list(bias_toward))
        hand = acquire_starting_hand(deck, target)
        if hand is not None:
            LOGGER.debug("Opponent dealt targeted hand %s (%s %s)", target, *hand)
            return hand, exclude(deck, hand)
        LOGGER.debug("Targeted hand %s unavailable, dealing from the top", target)
    dealt, remaining = deal(deck, 2)
    return (dealt[0], dealt[1]), remaining


def parse_cards(repr_cards: Iterable[str]) -> List[Card]:
    """Parse string representations into :class:`Card` objects.

    Accepts ``As``, ``10h``, ``T♦`` and similar tokens.
    """

    cards = []
    for token in repr_cards:
        token = token.strip()
        rank_symbol, suit = token[:-1], token[-1]
        if rank_symbol == "10":
            rank_symbol = "T"
        suit = SUIT_ALIASES.get(suit.lower(), suit)
        if rank_symbol.upper() not in RANK_TO_VALUE or suit not in SUITS:
            raise ValueError(f"Cannot parse card {token!r}")
        cards.append(Card(RANK_TO_VALUE[rank_symbol.upper()], suit))
    return cards


def format_cards(cards: Iterable[Card]) -> str:
    return " ".join(str(card) for card in cards)


__all__ = [
    "Card",
    "Deck",
    "StartingHand",
    "STRONG_HANDS",
    "create_deck",
    "shuffle",
    "exclude",
    "deal",
    "acquire_starting_hand",
    "draw_opponent_hand",
    "parse_cards",
    "format_cards",
    "SUITS",
    "RANKS",
]
