"""Heads-up hold'em engine shared by the tutorial host and the console."""

from .cards import Card, Deck, Suit, parse_cards, shuffled_full_deck
from .errors import ConstructionError, EmptyDeckError, EngineError, InvalidActionError
from .evaluator import HandCategory, best_category, describe, evaluate_five
from .game import HUMAN_SEAT, GameEngine
from .guidance import Guidance, advise, guidance_for
from .models import ActionType, BotDecision, Difficulty, HandResult, Stage, TableConfig, TableSnapshot

__all__ = [
    "Card",
    "Deck",
    "Suit",
    "parse_cards",
    "shuffled_full_deck",
    "ConstructionError",
    "EmptyDeckError",
    "EngineError",
    "InvalidActionError",
    "HandCategory",
    "best_category",
    "describe",
    "evaluate_five",
    "HUMAN_SEAT",
    "GameEngine",
    "Guidance",
    "advise",
    "guidance_for",
    "ActionType",
    "BotDecision",
    "Difficulty",
    "HandResult",
    "Stage",
    "TableConfig",
    "TableSnapshot",
]
