"""Hand evaluation utilities for Texas Hold'em."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, List, Optional, Sequence, Tuple

from .cards import Card

MAX_POOL = 7


class HandCategory(IntEnum):
    NONE = -1
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8


HAND_RANKS = {
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FLUSH: "Flush",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.PAIR: "Pair",
    HandCategory.HIGH_CARD: "High Card",
    HandCategory.NONE: "No Hand",
}

RANK_NAMES = {
    2: "Two",
    3: "Three",
    4: "Four",
    5: "Five",
    6: "Six",
    7: "Seven",
    8: "Eight",
    9: "Nine",
    10: "Ten",
    11: "Jack",
    12: "Queen",
    13: "King",
    14: "Ace",
}

_PRIMARY_SLOTS = 2
_KICKER_SLOTS = 5


def _plural(rank: int) -> str:
    name = RANK_NAMES[rank]
    return f"{name}es" if name.endswith("x") else f"{name}s"


@dataclass(frozen=True, order=True)
class HandRank:
    """Comparable representation of a poker hand rank.

    Hands are ordered by category, then the primary rank groups (quad, trip,
    pair ranks or the straight's high card), then the kickers.
    """

    category: HandCategory
    primary: Tuple[int, ...] = ()
    kickers: Tuple[int, ...] = ()
    description: str = field(default="", compare=False)

    @property
    def key(self) -> Tuple[int, ...]:
        """Fixed-width comparison key, missing slots filled with zeros."""

        primary = self.primary + (0,) * (_PRIMARY_SLOTS - len(self.primary))
        kickers = self.kickers + (0,) * (_KICKER_SLOTS - len(self.kickers))
        return (int(self.category) + 1,) + primary + kickers

    @property
    def value(self) -> int:
        """The key packed big-endian into a single integer, 4 bits per slot."""

        encoded = 0
        for value in self.key:
            encoded = (encoded << 4) | value
        return encoded

    def describe(self) -> str:
        category = self.category
        if category == HandCategory.NONE:
            return HAND_RANKS[category]
        if category == HandCategory.STRAIGHT_FLUSH:
            return f"Straight Flush, {RANK_NAMES[self.primary[0]]} High"
        if category == HandCategory.FOUR_OF_A_KIND:
            return f"Four of a Kind, {_plural(self.primary[0])}"
        if category == HandCategory.FULL_HOUSE:
            return f"Full House, {_plural(self.primary[0])} full of {_plural(self.primary[1])}"
        if category == HandCategory.FLUSH:
            return f"Flush, {RANK_NAMES[self.kickers[0]]} High"
        if category == HandCategory.STRAIGHT:
            return f"Straight, {RANK_NAMES[self.primary[0]]} High"
        if category == HandCategory.THREE_OF_A_KIND:
            return f"Three of a Kind, {_plural(self.primary[0])}"
        if category == HandCategory.TWO_PAIR:
            return f"Two Pair, {_plural(self.primary[0])} and {_plural(self.primary[1])}"
        if category == HandCategory.PAIR:
            return f"Pair of {_plural(self.primary[0])}"
        if not self.kickers:
            return HAND_RANKS[category]
        return f"High Card {RANK_NAMES[self.kickers[0]]}"


NO_HAND = HandRank(HandCategory.NONE, description=HAND_RANKS[HandCategory.NONE])


def evaluate(cards: Sequence[Card]) -> HandRank:
    """Rank the best 5-card hand that can be made from up to seven cards.

    An empty pool stands for a folded party and yields the lowest rank.
    """

    if len(cards) > MAX_POOL:
        raise ValueError(f"At most {MAX_POOL} cards can be evaluated, got {len(cards)}")
    if len(set(cards)) != len(cards):
        raise ValueError("Duplicate cards in hand pool")
    if not cards:
        return NO_HAND
    rank = _rank_pool(cards)
    return HandRank(rank.category, rank.primary, rank.kickers, rank.describe())


def _rank_pool(cards: Sequence[Card]) -> HandRank:
    ranks = sorted((card.rank for card in cards), reverse=True)
    rank_counts = Counter(ranks)

    quads = [rank for rank, count in rank_counts.items() if count == 4]
    trips = sorted((rank for rank, count in rank_counts.items() if count == 3), reverse=True)
    pairs = sorted((rank for rank, count in rank_counts.items() if count == 2), reverse=True)

    suit_counts = Counter(card.suit for card in cards)
    flush_suit = next((suit for suit, count in suit_counts.items() if count >= 5), None)
    flush_ranks: List[int] = []
    if flush_suit is not None:
        flush_ranks = sorted((card.rank for card in cards if card.suit == flush_suit), reverse=True)

    if flush_ranks:
        straight_flush_high = _straight_high(flush_ranks)
        if straight_flush_high is not None:
            return HandRank(HandCategory.STRAIGHT_FLUSH, (straight_flush_high,))

    if quads:
        quad = max(quads)
        return HandRank(HandCategory.FOUR_OF_A_KIND, (quad,), _kickers(ranks, (quad,), 1))

    if trips and pairs:
        return HandRank(HandCategory.FULL_HOUSE, (trips[0], pairs[0]))
    if len(trips) >= 2:
        # the lower set only counts for its pair
        return HandRank(HandCategory.FULL_HOUSE, (trips[0], trips[1]))

    if flush_ranks:
        return HandRank(HandCategory.FLUSH, kickers=tuple(flush_ranks[:5]))

    straight_high = _straight_high(ranks)
    if straight_high is not None:
        return HandRank(HandCategory.STRAIGHT, (straight_high,))

    if trips:
        return HandRank(HandCategory.THREE_OF_A_KIND, (trips[0],), _kickers(ranks, (trips[0],), 2))

    if len(pairs) >= 2:
        top = (pairs[0], pairs[1])
        return HandRank(HandCategory.TWO_PAIR, top, _kickers(ranks, top, 1))

    if pairs:
        return HandRank(HandCategory.PAIR, (pairs[0],), _kickers(ranks, (pairs[0],), 3))

    return HandRank(HandCategory.HIGH_CARD, kickers=tuple(ranks[:5]))


def _kickers(ranks: Sequence[int], used: Tuple[int, ...], count: int) -> Tuple[int, ...]:
    return tuple(rank for rank in ranks if rank not in used)[:count]


def _straight_high(ranks: Iterable[int]) -> Optional[int]:
    unique = sorted(set(ranks), reverse=True)
    for idx in range(len(unique) - 4):
        if unique[idx] - unique[idx + 4] == 4:
            return unique[idx]
    if {14, 2, 3, 4, 5}.issubset(unique):
        return 5
    return None


def compare_hands(hand_a: Sequence[Card], hand_b: Sequence[Card]) -> int:
    """Compare two card pools, returning 1, 0 or -1."""

    rank_a = evaluate(hand_a)
    rank_b = evaluate(hand_b)
    return (rank_a > rank_b) - (rank_a < rank_b)


def best_rank(ranks: Iterable[HandRank]) -> Tuple[int, HandRank]:
    """Return the index and value of the first highest rank."""

    best_index = -1
    best: HandRank | None = None
    for index, rank in enumerate(ranks):
        if best is None or rank > best:
            best_index, best = index, rank
    if best is None:
        return -1, NO_HAND
    return best_index, best


__all__ = [
    "evaluate",
    "compare_hands",
    "best_rank",
    "HandRank",
    "HandCategory",
    "NO_HAND",
    "HAND_RANKS",
]
