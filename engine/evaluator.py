from __future__ import annotations

import itertools
from collections import Counter
from enum import IntEnum
from typing import Dict, Iterable, List, Sequence

from .cards import Card


class HandCategory(IntEnum):
    HIGH_CARD = 1
    PAIR = 2
    TWO_PAIR = 3
    THREE_OF_A_KIND = 4
    STRAIGHT = 5
    FLUSH = 6
    FULL_HOUSE = 7
    FOUR_OF_A_KIND = 8
    STRAIGHT_FLUSH = 9
    ROYAL_FLUSH = 10


_DESCRIPTIONS: Dict[HandCategory, str] = {
    HandCategory.ROYAL_FLUSH: "Royal Flush",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FLUSH: "Flush",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.PAIR: "Pair",
    HandCategory.HIGH_CARD: "High Card",
}

# Categories read as a count ("Two Pair") rather than a single hand ("a Flush").
_NO_ARTICLE = {HandCategory.FOUR_OF_A_KIND, HandCategory.THREE_OF_A_KIND, HandCategory.TWO_PAIR}

_HAND_ODDS: Dict[HandCategory, str] = {
    HandCategory.ROYAL_FLUSH: "1 in 649,740",
    HandCategory.STRAIGHT_FLUSH: "1 in 72,193",
    HandCategory.FOUR_OF_A_KIND: "1 in 4,165",
    HandCategory.FULL_HOUSE: "1 in 694",
    HandCategory.FLUSH: "1 in 509",
    HandCategory.STRAIGHT: "1 in 255",
    HandCategory.THREE_OF_A_KIND: "1 in 47",
    HandCategory.TWO_PAIR: "1 in 21",
    HandCategory.PAIR: "1 in 2.4",
    HandCategory.HIGH_CARD: "1 in 2",
}

HAND_RANKINGS: List[Dict[str, str]] = [
    {"hand": "Royal Flush", "description": "A, K, Q, J, 10, all same suit", "example": "A♠ K♠ Q♠ J♠ 10♠"},
    {"hand": "Straight Flush", "description": "Five cards in sequence, same suit", "example": "9♥ 8♥ 7♥ 6♥ 5♥"},
    {"hand": "Four of a Kind", "description": "Four cards of same rank", "example": "K♠ K♥ K♦ K♣ 3♠"},
    {"hand": "Full House", "description": "Three of a kind + pair", "example": "A♠ A♥ A♦ 8♠ 8♥"},
    {"hand": "Flush", "description": "Five cards of same suit", "example": "K♠ J♠ 9♠ 6♠ 4♠"},
    {"hand": "Straight", "description": "Five cards in sequence", "example": "10♠ 9♥ 8♦ 7♣ 6♠"},
    {"hand": "Three of a Kind", "description": "Three cards of same rank", "example": "Q♠ Q♥ Q♦ 7♠ 4♥"},
    {"hand": "Two Pair", "description": "Two different pairs", "example": "A♠ A♥ 8♦ 8♣ K♠"},
    {"hand": "One Pair", "description": "Two cards of same rank", "example": "10♠ 10♥ K♦ 6♣ 4♠"},
    {"hand": "High Card", "description": "No matching cards", "example": "A♠ J♥ 9♦ 7♣ 5♠"},
]


def best_category(cards: Sequence[Card]) -> HandCategory:
    """Best category over every 5-card subset.

    Fewer than five cards (early streets) fall back to a partial read that only
    spots groups and a flush in progress. Showdown always has seven cards.
    """
    if len(cards) < 5:
        return _evaluate_partial(cards)
    return max(_evaluate_five(combo) for combo in itertools.combinations(cards, 5))


def evaluate_five(cards: Sequence[Card]) -> HandCategory:
    if len(cards) != 5:
        raise ValueError(f"Expected exactly 5 cards, got {len(cards)}")
    return _evaluate_five(cards)


def _evaluate_five(cards: Sequence[Card]) -> HandCategory:
    ranks = [card.rank for card in cards]
    counts = sorted(Counter(ranks).values(), reverse=True)
    is_flush = len({card.suit for card in cards}) == 1
    is_straight = is_straight_ranks(ranks)

    if is_flush and is_straight:
        if 14 in ranks and 13 in ranks:
            return HandCategory.ROYAL_FLUSH
        return HandCategory.STRAIGHT_FLUSH
    if counts[0] == 4:
        return HandCategory.FOUR_OF_A_KIND
    if counts[0] == 3 and counts[1] == 2:
        return HandCategory.FULL_HOUSE
    if is_flush:
        return HandCategory.FLUSH
    if is_straight:
        return HandCategory.STRAIGHT
    if counts[0] == 3:
        return HandCategory.THREE_OF_A_KIND
    if counts[0] == 2 and counts[1] == 2:
        return HandCategory.TWO_PAIR
    if counts[0] == 2:
        return HandCategory.PAIR
    return HandCategory.HIGH_CARD


def _evaluate_partial(cards: Sequence[Card]) -> HandCategory:
    counts = Counter(card.rank for card in cards).values()
    if 4 in counts:
        return HandCategory.FOUR_OF_A_KIND
    if 3 in counts:
        return HandCategory.THREE_OF_A_KIND
    if 2 in counts:
        return HandCategory.PAIR
    if len(cards) >= 2 and len({card.suit for card in cards}) == 1:
        return HandCategory.FLUSH
    return HandCategory.HIGH_CARD


def is_straight_ranks(ranks: Iterable[int]) -> bool:
    distinct = sorted(set(ranks))
    if len(distinct) < 5:
        return False
    for idx in range(len(distinct) - 4):
        window = distinct[idx : idx + 5]
        if window == list(range(window[0], window[0] + 5)):
            return True
    return {14, 2, 3, 4, 5}.issubset(distinct)  # Ace low


def describe(category: HandCategory) -> str:
    return _DESCRIPTIONS[HandCategory(category)]


def describe_with_article(category: HandCategory) -> str:
    text = _DESCRIPTIONS[HandCategory(category)]
    if category in _NO_ARTICLE:
        return text
    return f"a {text}"


def hand_odds(category: HandCategory) -> str:
    return _HAND_ODDS[HandCategory(category)]
