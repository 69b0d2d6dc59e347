from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from .errors import ConstructionError, EmptyDeckError

RANKS = tuple(range(2, 15))
RANK_LABELS = {10: "T", 11: "J", 12: "Q", 13: "K", 14: "A"}
RANK_NAMES = {11: "jack", 12: "queen", 13: "king", 14: "ace"}
IMAGE_BASE_URL = "https://deckofcardsapi.com/static/img"


class Suit(str, Enum):
    SPADES = "s"
    HEARTS = "h"
    DIAMONDS = "d"
    CLUBS = "c"

    @property
    def symbol(self) -> str:
        return _SUIT_SYMBOLS[self]


_SUIT_SYMBOLS = {Suit.SPADES: "♠", Suit.HEARTS: "♥", Suit.DIAMONDS: "♦", Suit.CLUBS: "♣"}
SUITS = tuple(Suit)


@dataclass(frozen=True)
class Card:
    rank: int
    suit: Suit

    def __post_init__(self) -> None:
        if self.rank not in RANKS:
            raise ValueError(f"Invalid rank: {self.rank}")
        if not isinstance(self.suit, Suit):
            try:
                object.__setattr__(self, "suit", Suit(self.suit))
            except ValueError:
                raise ValueError(f"Invalid suit: {self.suit}") from None

    @property
    def label(self) -> str:
        return f"{RANK_LABELS.get(self.rank, str(self.rank))}{self.suit.value}"

    @property
    def display(self) -> str:
        rank = "10" if self.rank == 10 else RANK_LABELS.get(self.rank, str(self.rank))
        return f"{rank}{self.suit.symbol}"

    @property
    def image_url(self) -> str:
        rank = RANK_NAMES.get(self.rank, str(self.rank))
        return f"{IMAGE_BASE_URL}/{rank}{self.suit.name[0]}.png"

    def __str__(self) -> str:
        return self.display


def shuffled_full_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """Build the 52-card universe in a uniformly random order (Fisher-Yates)."""
    rng = rng or random.Random()
    deck = [Card(rank, suit) for suit in SUITS for rank in RANKS]
    rng.shuffle(deck)
    if len(deck) != 52 or len(set(deck)) != 52:
        raise ConstructionError(f"Invalid deck size: {len(set(deck))}. Expected 52 cards.")
    return deck


class Deck:
    """Remaining cards of one hand, consumed front to back."""

    def __init__(self, cards: Sequence[Card]) -> None:
        self.cards: List[Card] = list(cards)

    def __len__(self) -> int:
        return len(self.cards)

    def draw(self) -> Card:
        if not self.cards:
            raise EmptyDeckError("Not enough cards left in deck")
        return self.cards.pop(0)

    def deal(self, count: int) -> List[Card]:
        if len(self.cards) < count:
            raise EmptyDeckError("Not enough cards left in deck")
        cards = self.cards[:count]
        del self.cards[:count]
        return cards


def cards_to_labels(cards: Sequence[Card]) -> List[str]:
    return [card.label for card in cards]


def parse_label(label: str) -> Card:
    text = label.strip()
    if len(text) not in (2, 3):
        raise ValueError(f"Invalid card label: {label}")
    rank_text, suit_text = text[:-1].upper(), text[-1].lower()
    reverse = {value: rank for rank, value in RANK_LABELS.items()}
    if rank_text in reverse:
        rank = reverse[rank_text]
    elif rank_text.isdigit():
        rank = int(rank_text)
    else:
        raise ValueError(f"Invalid rank: {rank_text}")
    return Card(rank, suit_text)  # type: ignore[arg-type]


def parse_cards(labels: Sequence[str]) -> List[Card]:
    return [parse_label(label) for label in labels]
