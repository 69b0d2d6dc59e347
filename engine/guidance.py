"""Tutorial advice derived from a hand, the board and the betting numbers.

Nothing here touches engine state. ``advise`` works on plain cards and
``guidance_for`` reads a ``TableSnapshot``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence

from .cards import Card
from .evaluator import HandCategory, best_category, describe_with_article
from .models import Stage, TableSnapshot

_STAGE_LABELS: Dict[Stage, str] = {
    Stage.PRE_FLOP: "Pre-Flop",
    Stage.FLOP: "Flop",
    Stage.TURN: "Turn",
    Stage.RIVER: "River",
    Stage.SHOWDOWN: "Showdown",
    Stage.HAND_OVER: "Hand Complete",
}

_TUTORIAL_TIPS: Dict[Stage, str] = {
    Stage.PRE_FLOP: "Pre-flop is about starting hand selection. Play tight and aggressive with premium hands.",
    Stage.FLOP: "The flop reveals 60% of your final hand. Look for pairs, draws, and board texture.",
    Stage.TURN: "The turn card can change everything. Re-evaluate your hand strength and drawing odds.",
    Stage.RIVER: "Final betting round. Focus on value betting strong hands and bluff catching.",
}


@dataclass(frozen=True)
class Guidance:
    stage: str
    player_hand: str
    opponent_hand: str
    hand_strength: str
    advice: str
    pot_odds: Optional[str] = None
    outs: int = 0

    def as_payload(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class Draws:
    flush_draw: bool
    straight_draw: bool
    outs: int


@dataclass(frozen=True)
class BoardTexture:
    dangerous: bool
    wet: bool


def stage_label(stage: Stage) -> str:
    return _STAGE_LABELS.get(stage, "Unknown")


def tutorial_tip(stage: Stage) -> str:
    return _TUTORIAL_TIPS.get(stage, "Observe the action and learn from each decision.")


def pot_odds(bet: int, pot: int) -> float:
    if bet <= 0:
        return 0.0
    return bet / (pot + bet)


def strength_label(category: HandCategory) -> str:
    if category >= HandCategory.STRAIGHT:
        return "Very Strong"
    if category >= HandCategory.THREE_OF_A_KIND:
        return "Strong"
    if category >= HandCategory.TWO_PAIR:
        return "Good"
    if category >= HandCategory.PAIR:
        return "Decent"
    return "Weak"


def recommended_action(category: HandCategory, odds: float) -> str:
    if category >= HandCategory.THREE_OF_A_KIND:
        return "Strong hand - consider raising"
    if category >= HandCategory.PAIR:
        if odds < 0.3:
            return "Decent hand - calling might be safe"
        return "Consider folding if facing large bets"
    return "Weak hand - consider folding unless pot odds are very favorable"


def advise(
    player_hand: Sequence[Card],
    opponent_hand: Sequence[Card],
    community: Sequence[Card],
    stage: Stage,
    reveal_opponent: bool = False,
    pot: int = 0,
    bet_to_call: int = 0,
) -> Guidance:
    board = list(community)
    category = best_category(list(player_hand) + board)

    if reveal_opponent:
        opponent_category = best_category(list(opponent_hand) + board)
        opponent_desc = f"{describe_with_article(opponent_category)} (Strength: {int(opponent_category)})"
    else:
        opponent_desc = "(Hidden Hand)"

    odds = pot_odds(bet_to_call, pot)
    baseline = recommended_action(category, odds)
    specific = _stage_advice(stage, list(player_hand), board, category)
    # Outs only matter while cards are still to come.
    outs = analyze_draws(player_hand, board).outs if stage in (Stage.FLOP, Stage.TURN) else 0

    return Guidance(
        stage=stage_label(stage),
        player_hand=describe_with_article(category),
        opponent_hand=opponent_desc,
        hand_strength=strength_label(category),
        advice=f"{baseline}. {specific}",
        pot_odds=f"{odds * 100:.1f}%" if odds > 0 else None,
        outs=outs,
    )


def guidance_for(snapshot: TableSnapshot, seat: int = 0, reveal_opponent: bool = False) -> Guidance:
    player = snapshot.players[seat]
    opponent = next(view for view in snapshot.players if view.seat != seat)
    return advise(
        player.hand,
        opponent.hand,
        snapshot.community,
        snapshot.stage,
        reveal_opponent=reveal_opponent,
        pot=snapshot.pot,
        bet_to_call=snapshot.amount_to_call(seat),
    )


def _stage_advice(stage: Stage, hand: Sequence[Card], board: Sequence[Card], category: HandCategory) -> str:
    if stage == Stage.PRE_FLOP:
        return preflop_advice(hand)
    if stage == Stage.FLOP:
        return _flop_advice(hand, board, category)
    if stage in (Stage.TURN, Stage.RIVER):
        return _turn_river_advice(hand, board, category)
    return "Play based on your hand strength and position."


def preflop_advice(hand: Sequence[Card]) -> str:
    if len(hand) < 2:
        return "Wait for your cards."

    first, second = hand[0], hand[1]
    suited = first.suit == second.suit
    connected = abs(first.rank - second.rank) <= 1
    high_card = first.rank >= 11 or second.rank >= 11

    if first.rank == second.rank:
        if first.rank >= 10:
            return "Premium pair - consider raising aggressively"
        if first.rank >= 7:
            return "Good pair - play cautiously but confidently"
        return "Small pair - consider calling to see the flop"

    if high_card:
        if suited:
            return "Strong suited high cards - good raising hand"
        if connected:
            return "Connected high cards - solid calling hand"
        return "High cards - play carefully, position matters"

    if suited and connected:
        return "Suited connectors - speculative hand, good in late position"

    return "Marginal hand - consider folding unless in late position"


def _flop_advice(hand: Sequence[Card], board: Sequence[Card], category: HandCategory) -> str:
    draws = analyze_draws(hand, board)

    if category >= HandCategory.THREE_OF_A_KIND:
        return "Strong made hand - bet for value and protection"
    if category >= HandCategory.PAIR:
        if draws.flush_draw or draws.straight_draw:
            return "Pair with draws - good semi-bluffing opportunity"
        return "Made pair - bet for value if top pair, check-call if weak"
    if draws.flush_draw and draws.straight_draw:
        return "Monster draw - play aggressively, many outs"
    if draws.flush_draw or draws.straight_draw:
        return "Drawing hand - consider semi-bluffing or calling"
    return "Missed flop - consider folding unless you have position"


def _turn_river_advice(hand: Sequence[Card], board: Sequence[Card], category: HandCategory) -> str:
    if category >= HandCategory.TWO_PAIR:
        return "Strong hand - bet for value, don't slow play"
    if category >= HandCategory.PAIR:
        if analyze_board_texture(board).dangerous:
            return "Decent hand but dangerous board - proceed with caution"
        return "Made hand - bet for value if strong, check-call if marginal"

    draws = analyze_draws(hand, board)
    if draws.flush_draw or draws.straight_draw:
        return "Still drawing - calculate pot odds carefully"
    return "Weak hand - consider folding unless pot odds are very favorable"


def analyze_draws(hand: Sequence[Card], board: Sequence[Card]) -> Draws:
    cards = list(hand) + list(board)
    flush_draw = any(count == 4 for count in Counter(card.suit for card in cards).values())
    straight_draw = _has_four_in_a_row(sorted({card.rank for card in cards}))

    if flush_draw and straight_draw:
        outs = 15
    else:
        outs = (9 if flush_draw else 0) + (8 if straight_draw else 0)
    return Draws(flush_draw=flush_draw, straight_draw=straight_draw, outs=outs)


def _has_four_in_a_row(ranks: Sequence[int]) -> bool:
    for idx in range(len(ranks) - 3):
        window = ranks[idx : idx + 4]
        if window[-1] - window[0] == 3:
            return True
    return False


def analyze_board_texture(board: Sequence[Card]) -> BoardTexture:
    if len(board) < 3:
        return BoardTexture(dangerous=False, wet=False)

    flush_possible = any(count >= 3 for count in Counter(card.suit for card in board).values())
    ranks = sorted({card.rank for card in board})
    straight_possible = len(ranks) >= 3 and ranks[-1] - ranks[0] <= 4

    dangerous = flush_possible or straight_possible
    wet = dangerous or any(card.rank >= 10 for card in board)
    return BoardTexture(dangerous=dangerous, wet=wet)
