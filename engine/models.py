from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from .cards import Card, cards_to_labels


class Stage(str, Enum):
    PRE_FLOP = "PRE_FLOP"
    FLOP = "FLOP"
    TURN = "TURN"
    RIVER = "RIVER"
    SHOWDOWN = "SHOWDOWN"
    HAND_OVER = "HAND_OVER"


class ActionType(str, Enum):
    FOLD = "FOLD"
    CHECK = "CHECK"
    CALL = "CALL"
    RAISE = "RAISE"


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def parse(cls, value: object) -> "Difficulty":
        if isinstance(value, cls):
            return value
        text = str(value).strip().casefold()
        for member in cls:
            if text in (member.value.casefold(), member.name.casefold()):
                return member
        raise ValueError(f"Unknown difficulty: {value}")


@dataclass
class TableConfig:
    starting_stack: int = 2_000
    sb: int = 50
    bb: int = 100
    human_name: str = "You"
    bot_name: str = "Bot 1"
    difficulty: Difficulty = Difficulty.EASY
    guided_mode: bool = False
    bot_delay_ms: int = 1_500


@dataclass
class Player:
    seat: int
    name: str
    chips: int
    is_human: bool = False
    hand: List[Card] = field(default_factory=list)
    is_folded: bool = False
    is_all_in: bool = False
    is_out: bool = False
    bet_this_round: int = 0
    total_in_pot: int = 0

    @property
    def in_hand(self) -> bool:
        return not self.is_folded and not self.is_out

    @property
    def can_act(self) -> bool:
        return self.in_hand and not self.is_all_in

    def reset_for_hand(self) -> None:
        self.hand.clear()
        self.is_folded = False
        self.is_all_in = False
        self.bet_this_round = 0
        self.total_in_pot = 0

    def reset_for_round(self) -> None:
        self.bet_this_round = 0


@dataclass(frozen=True)
class BotDecision:
    action: ActionType
    amount: int = 0


@dataclass(frozen=True)
class HandResult:
    winner_names: Tuple[str, ...]
    winning_hand: str
    winner_index: int

    def as_payload(self) -> Dict[str, object]:
        return {
            "winner_names": list(self.winner_names),
            "winning_hand": self.winning_hand,
            "winner_index": self.winner_index,
        }


@dataclass(frozen=True)
class PlayerView:
    seat: int
    name: str
    chips: int
    hand: Tuple[Card, ...]
    is_folded: bool
    is_all_in: bool
    is_out: bool
    bet_this_round: int
    is_human: bool

    @classmethod
    def of(cls, player: Player) -> "PlayerView":
        return cls(
            seat=player.seat,
            name=player.name,
            chips=player.chips,
            hand=tuple(player.hand),
            is_folded=player.is_folded,
            is_all_in=player.is_all_in,
            is_out=player.is_out,
            bet_this_round=player.bet_this_round,
            is_human=player.is_human,
        )


@dataclass(frozen=True)
class TableSnapshot:
    """Read-only copy of the table handed to hosts after every operation."""

    players: Tuple[PlayerView, ...]
    community: Tuple[Card, ...]
    stage: Stage
    pot: int
    current_bet: int
    current_actor: Optional[int]
    dealer_index: int
    message: str
    history: Tuple[str, ...]
    last_hand_result: Optional[HandResult]
    difficulty: Difficulty
    guided_mode: bool
    awaiting_manual_advance: bool
    game_over: bool

    def amount_to_call(self, seat: int) -> int:
        if seat < 0 or seat >= len(self.players):
            return 0
        return max(0, self.current_bet - self.players[seat].bet_this_round)

    def as_payload(self, hide_seats: Iterable[int] = ()) -> Dict[str, object]:
        # Hidden hole cards stay masked until the hand reaches showdown.
        hidden = set(hide_seats)
        reveal = self.stage in (Stage.SHOWDOWN, Stage.HAND_OVER) and self.last_hand_result is not None
        reveal = reveal and self.last_hand_result.winning_hand != "Default Win"
        players: List[Dict[str, object]] = []
        for view in self.players:
            masked = view.seat in hidden and not reveal
            players.append(
                {
                    "seat": view.seat,
                    "name": view.name,
                    "chips": view.chips,
                    "hand": [] if masked else cards_to_labels(view.hand),
                    "hand_images": [] if masked else [card.image_url for card in view.hand],
                    "cards_hidden": masked and bool(view.hand),
                    "is_folded": view.is_folded,
                    "is_all_in": view.is_all_in,
                    "is_out": view.is_out,
                    "bet_this_round": view.bet_this_round,
                    "is_human": view.is_human,
                    "to_call": self.amount_to_call(view.seat),
                }
            )
        return {
            "stage": self.stage.value,
            "players": players,
            "community": cards_to_labels(self.community),
            "community_images": [card.image_url for card in self.community],
            "pot": self.pot,
            "current_bet": self.current_bet,
            "current_actor": self.current_actor,
            "dealer_index": self.dealer_index,
            "message": self.message,
            "history": list(self.history),
            "last_hand_result": self.last_hand_result.as_payload() if self.last_hand_result else None,
            "difficulty": self.difficulty.value,
            "guided_mode": self.guided_mode,
            "awaiting_manual_advance": self.awaiting_manual_advance,
            "game_over": self.game_over,
        }
