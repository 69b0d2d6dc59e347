from __future__ import annotations

from typing import Iterable, List, Sequence

from engine.cards import RANKS, SUITS, Card, parse_cards
from engine.game import HUMAN_SEAT, GameEngine
from engine.models import ActionType, BotDecision, Difficulty, TableConfig


def create_engine(
    *,
    starting_stack: int = 2_000,
    sb: int = 50,
    bb: int = 100,
    difficulty: Difficulty = Difficulty.EASY,
    guided_mode: bool = False,
    seed: int = 42,
) -> GameEngine:
    """Instantiate an engine with a deterministic shuffle."""
    config = TableConfig(
        starting_stack=starting_stack,
        sb=sb,
        bb=bb,
        difficulty=difficulty,
        guided_mode=guided_mode,
        bot_delay_ms=0,
    )
    return GameEngine(config, seed=seed)


def stacked_deck(labels: Sequence[str]) -> List[Card]:
    """Put ``labels`` on top of the deck; the rest follow in a fixed order.

    With the human dealing, hole cards go bot, human, bot, human, then the
    flop, turn and river.
    """
    top = parse_cards(labels)
    rest = [Card(rank, suit) for suit in SUITS for rank in RANKS if Card(rank, suit) not in top]
    return top + rest


def stack_deck(monkeypatch, labels: Sequence[str]) -> None:
    cards = stacked_deck(labels)
    monkeypatch.setattr("engine.game.shuffled_full_deck", lambda rng=None: list(cards))


def total_chips(engine: GameEngine) -> int:
    return sum(player.chips for player in engine.players) + engine.pot


def passive_decision(engine: GameEngine) -> BotDecision:
    assert engine.current_actor is not None
    if engine.get_amount_to_call(engine.current_actor) == 0:
        return BotDecision(ActionType.CHECK)
    return BotDecision(ActionType.CALL)


def perform_actions(engine: GameEngine, actions: Iterable[ActionType]) -> None:
    """Apply a scripted sequence of actions for whoever is to act."""
    for action in actions:
        if engine.current_actor == HUMAN_SEAT:
            engine.handle_player_action(action)
        else:
            engine.apply_decision(BotDecision(action))


def auto_complete_hand(engine: GameEngine) -> None:
    """Check or call for both seats until the hand is over."""
    while not engine.is_hand_over():
        actor = engine.current_actor
        if actor is None:
            break
        decision = passive_decision(engine)
        if actor == HUMAN_SEAT:
            engine.handle_player_action(decision.action)
        else:
            engine.apply_decision(decision)
