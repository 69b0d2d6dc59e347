from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Optional

from .evaluator import HandCategory
from .models import ActionType, BotDecision, Difficulty


@dataclass(frozen=True)
class BotProfile:
    aggression: float
    call_stickiness: float
    bluff_chance: float


PROFILES: Dict[Difficulty, BotProfile] = {
    Difficulty.EASY: BotProfile(aggression=0.15, call_stickiness=0.3, bluff_chance=0.05),
    Difficulty.MEDIUM: BotProfile(aggression=0.35, call_stickiness=0.5, bluff_chance=0.15),
    Difficulty.HARD: BotProfile(aggression=0.55, call_stickiness=0.7, bluff_chance=0.25),
}

_RNG = random.Random()


def pot_odds(to_call: int, pot: int) -> float:
    if to_call <= 0:
        return 0.0
    return to_call / (pot + to_call)


def decide(
    category: HandCategory,
    to_call: int,
    pot: int,
    chips: int,
    big_blind: int,
    difficulty: Difficulty = Difficulty.EASY,
    rng: Optional[random.Random] = None,
) -> BotDecision:
    """Pick the house bot's move from its hand estimate and the table numbers.

    Raise amounts are increments on top of ``to_call`` and never exceed the
    stack. A single roll drives every probabilistic branch.
    """
    profile = PROFILES[difficulty]
    roll = (rng or _RNG).random()
    has_pair = category >= HandCategory.PAIR

    if to_call == 0:
        if has_pair and roll < profile.aggression:
            amount = max(big_blind, int(pot * (0.3 + profile.aggression * 0.5)))
            return BotDecision(ActionType.RAISE, min(amount, chips))
        return BotDecision(ActionType.CHECK)

    if chips <= to_call:
        # Calling puts the whole stack in.
        return BotDecision(ActionType.CALL) if has_pair else BotDecision(ActionType.FOLD)

    odds = pot_odds(to_call, pot)
    spare = chips - to_call

    if category >= HandCategory.THREE_OF_A_KIND and roll < profile.aggression:
        amount = max(to_call * 2, int(pot * (0.5 + profile.aggression * 0.5)))
        return BotDecision(ActionType.RAISE, min(amount, spare))

    if has_pair and odds < 0.5 - profile.call_stickiness * 0.3:
        return BotDecision(ActionType.CALL)

    if roll < profile.bluff_chance and odds < 0.2:
        amount = max(to_call * 2, big_blind * 3)
        return BotDecision(ActionType.RAISE, min(amount, spare))

    return BotDecision(ActionType.FOLD)
