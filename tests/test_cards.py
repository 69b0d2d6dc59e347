import random

import pytest

from engine.cards import Card, Deck, Suit, cards_to_labels, parse_cards, parse_label, shuffled_full_deck
from engine.errors import ConstructionError, EmptyDeckError


def test_shuffled_full_deck_has_52_unique_cards():
    deck = shuffled_full_deck(random.Random(1))
    assert len(deck) == 52
    assert len(set(deck)) == 52


def test_shuffle_is_reproducible_with_seed_and_varies_without():
    assert shuffled_full_deck(random.Random(9)) == shuffled_full_deck(random.Random(9))
    assert shuffled_full_deck(random.Random(9)) != shuffled_full_deck(random.Random(10))


def test_short_deck_raises_construction_error(monkeypatch):
    monkeypatch.setattr("engine.cards.RANKS", tuple(range(2, 14)))
    with pytest.raises(ConstructionError, match="Expected 52 cards"):
        shuffled_full_deck(random.Random(3))


def test_deck_draws_front_to_back_and_raises_when_empty():
    deck = Deck(parse_cards(["Ah", "Kd"]))
    assert deck.draw() == Card(14, Suit.HEARTS)
    assert deck.draw() == Card(13, Suit.DIAMONDS)
    assert len(deck) == 0
    with pytest.raises(EmptyDeckError, match="Not enough cards"):
        deck.draw()


def test_deal_is_atomic_when_short():
    deck = Deck(parse_cards(["Ah", "Kd"]))
    with pytest.raises(EmptyDeckError):
        deck.deal(3)
    assert len(deck) == 2
    assert cards_to_labels(deck.deal(2)) == ["Ah", "Kd"]


def test_card_validation_rejects_invalid_values():
    with pytest.raises(ValueError, match="Invalid rank"):
        Card(1, Suit.HEARTS)
    with pytest.raises(ValueError, match="Invalid suit"):
        Card(5, "x")  # type: ignore[arg-type]


def test_card_labels_display_and_images():
    ten = parse_label("10h")
    assert ten == parse_label("Th")
    assert ten.label == "Th"
    assert ten.display == "10♥"
    assert str(parse_label("As")) == "A♠"
    assert parse_label("Qc").image_url == "https://deckofcardsapi.com/static/img/queenC.png"
    assert parse_label("7d").image_url == "https://deckofcardsapi.com/static/img/7D.png"
    with pytest.raises(ValueError):
        parse_label("Zz")
