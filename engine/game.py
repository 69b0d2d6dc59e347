from __future__ import annotations

import logging
import random
from typing import Callable, Dict, List, Optional, Tuple, Union

from . import bot
from .betting import BettingEngine
from .cards import Card, Deck, cards_to_labels, shuffled_full_deck
from .errors import ConstructionError, EmptyDeckError, InvalidActionError
from .evaluator import HandCategory, best_category, describe, describe_with_article
from .models import (
    ActionType,
    BotDecision,
    Difficulty,
    HandResult,
    Player,
    PlayerView,
    Stage,
    TableConfig,
    TableSnapshot,
)

LOGGER = logging.getLogger("holdem_engine")

# GameEngine keeps the whole heads-up table in memory: roster, deck, board and
# betting state. It never sleeps or schedules anything; hosts decide when the
# bot moves and re-render from the snapshot each call returns.

HUMAN_SEAT = 0

# stage -> (next stage, cards to deal, announcement)
_STREETS: Dict[Stage, Tuple[Stage, int, str]] = {
    Stage.PRE_FLOP: (Stage.FLOP, 3, "Flop"),
    Stage.FLOP: (Stage.TURN, 1, "Turn"),
    Stage.TURN: (Stage.RIVER, 1, "River"),
}


class GameEngine:
    """Heads-up Texas Hold'em: one human seat against the house bot."""

    def __init__(self, config: Optional[TableConfig] = None, seed: Optional[int] = None) -> None:
        self.config = config or TableConfig()
        self.rng = random.Random(seed)
        self.players: List[Player] = [
            Player(seat=HUMAN_SEAT, name=self.config.human_name, chips=self.config.starting_stack, is_human=True),
            Player(seat=1, name=self.config.bot_name, chips=self.config.starting_stack),
        ]
        self.betting = BettingEngine(big_blind=self.config.bb)
        self.deck = Deck([])
        self.community: List[Card] = []
        self.stage = Stage.HAND_OVER
        # Rotated before every hand, so the human deals the first one.
        self.dealer_index = len(self.players) - 1
        self.current_actor: Optional[int] = None
        self.last_hand_result: Optional[HandResult] = None
        self.difficulty = self.config.difficulty
        self.guided_mode = self.config.guided_mode
        self.awaiting_manual_advance = False
        self.message = "Welcome! Start a new hand to begin."
        self.history: List[str] = []

    # Configuration ---------------------------------------------------

    @property
    def difficulty(self) -> Difficulty:
        return self._difficulty

    @difficulty.setter
    def difficulty(self, value: Union[Difficulty, str]) -> None:
        self._difficulty = Difficulty.parse(value)

    def set_difficulty(self, value: Union[Difficulty, str]) -> TableSnapshot:
        self.difficulty = value
        return self.snapshot()

    @property
    def pot(self) -> int:
        return self.betting.pot

    @property
    def current_bet(self) -> int:
        return self.betting.current_bet

    @property
    def last_aggressor(self) -> Optional[int]:
        return self.betting.last_aggressor

    # Queries ---------------------------------------------------------

    def get_amount_to_call(self, seat: int) -> int:
        if seat < 0 or seat >= len(self.players):
            return 0
        return self.betting.amount_to_call(self.players[seat])

    def is_hand_over(self) -> bool:
        return self.stage in (Stage.SHOWDOWN, Stage.HAND_OVER)

    def is_bot_turn(self) -> bool:
        if self.current_actor is None or self.is_hand_over():
            return False
        return not self.players[self.current_actor].is_human

    def is_game_over(self) -> bool:
        def busted(player: Player) -> bool:
            return player.is_out or (player.chips <= 0 and self.is_hand_over())

        human = self.players[HUMAN_SEAT]
        bots = [player for player in self.players if not player.is_human]
        return busted(human) or all(busted(player) for player in bots)

    def snapshot(self) -> TableSnapshot:
        return TableSnapshot(
            players=tuple(PlayerView.of(player) for player in self.players),
            community=tuple(self.community),
            stage=self.stage,
            pot=self.pot,
            current_bet=self.current_bet,
            current_actor=self.current_actor,
            dealer_index=self.dealer_index,
            message=self.message,
            history=tuple(self.history),
            last_hand_result=self.last_hand_result,
            difficulty=self.difficulty,
            guided_mode=self.guided_mode,
            awaiting_manual_advance=self.awaiting_manual_advance,
            game_over=self.is_game_over(),
        )

    # Hand lifecycle --------------------------------------------------

    def start_new_round(self) -> TableSnapshot:
        if self.is_game_over():
            LOGGER.info("New hand refused: game over")
            self._say("Game over! Thank you for playing.")
            return self.snapshot()

        self.stage = Stage.PRE_FLOP
        self.community = []
        self.betting.reset_for_hand()
        self.last_hand_result = None
        self.current_actor = None
        self.awaiting_manual_advance = False
        self.history = []
        for player in self.players:
            if not player.is_out:
                player.reset_for_hand()

        self.dealer_index = self._next_seat(self.dealer_index, lambda player: not player.is_out)
        try:
            self.deck = Deck(shuffled_full_deck(self.rng))
            self._deal_hole_cards()
        except (ConstructionError, EmptyDeckError) as exc:
            self._abort_hand(f"Error starting new round: {exc}")
            return self.snapshot()

        LOGGER.info("New hand: dealer=%s stacks=%s", self.dealer_index, [p.chips for p in self.players])
        self._post_blinds()
        self._say("New hand started. Cards dealt!")
        if self.betting.is_round_complete(self.players):
            self._after_betting_round()
        else:
            self._begin_turn(self._first_actor_from(self.dealer_index, include_start=True))
        return self.snapshot()

    def _deal_hole_cards(self) -> None:
        ordered = self._seats_from(self.dealer_index + 1, lambda player: not player.is_out)
        for _ in range(2):
            for seat_idx in ordered:
                self.players[seat_idx].hand.append(self.deck.draw())

    def _post_blinds(self) -> None:
        # Heads-up: the dealer posts the small blind and acts first pre-flop.
        sb_player = self.players[self.dealer_index]
        bb_player = self.players[self._next_seat(self.dealer_index, lambda player: not player.is_out)]
        sb = self.betting.post_blind(sb_player, self.config.sb)
        self._say(f"{sb_player.name} posts small blind ${sb}")
        bb = self.betting.post_blind(bb_player, self.config.bb)
        self._say(f"{bb_player.name} posts big blind ${bb}")

    # Actions ---------------------------------------------------------

    def handle_player_action(self, action: Union[ActionType, str], raise_amount: int = 0) -> TableSnapshot:
        action = ActionType(action)
        if self.is_hand_over() or self.current_actor != HUMAN_SEAT:
            LOGGER.warning(
                "Ignoring %s: stage=%s current_actor=%s", action.value, self.stage.value, self.current_actor
            )
            return self.snapshot()
        self._act(HUMAN_SEAT, action, raise_amount or 0)
        return self.snapshot()

    def compute_bot_decision(self) -> Optional[BotDecision]:
        if not self.is_bot_turn():
            return None
        assert self.current_actor is not None
        player = self.players[self.current_actor]
        category = best_category(player.hand + self.community)
        return bot.decide(
            category,
            to_call=self.get_amount_to_call(player.seat),
            pot=self.pot,
            chips=player.chips,
            big_blind=self.config.bb,
            difficulty=self.difficulty,
            rng=self.rng,
        )

    def apply_decision(self, decision: Optional[BotDecision]) -> TableSnapshot:
        if decision is None or not self.is_bot_turn():
            LOGGER.warning("No bot turn to apply: stage=%s current_actor=%s", self.stage.value, self.current_actor)
            return self.snapshot()
        assert self.current_actor is not None
        seat_idx = self.current_actor
        LOGGER.info("%s decides %s %s", self.players[seat_idx].name, decision.action.value, decision.amount)
        self.awaiting_manual_advance = False
        self._act(seat_idx, decision.action, decision.amount)
        return self.snapshot()

    def trigger_bot_action(self) -> TableSnapshot:
        return self.apply_decision(self.compute_bot_decision())

    def advance_turn(self) -> TableSnapshot:
        if not (self.guided_mode and self.awaiting_manual_advance and self.is_bot_turn()):
            LOGGER.warning("Advance ignored: guided=%s awaiting=%s", self.guided_mode, self.awaiting_manual_advance)
            return self.snapshot()
        return self.trigger_bot_action()

    def _act(self, seat_idx: int, action: ActionType, amount: int) -> None:
        player = self.players[seat_idx]
        to_call = self.betting.amount_to_call(player)
        try:
            if action == ActionType.FOLD:
                self.betting.fold(player)
                self._say(f"{player.name} folds.")
            elif action == ActionType.CHECK or (action == ActionType.CALL and to_call == 0):
                self.betting.check(player)
                self._say(f"{player.name} checks.")
            elif action == ActionType.CALL:
                committed = self.betting.call(player)
                self._announce_commit(player, committed, f"{player.name} calls ${committed}.")
            elif action == ActionType.RAISE:
                previous_bet = self.betting.current_bet
                contested = any(other.can_act for other in self.players if other.seat != seat_idx)
                committed = self.betting.raise_by(player, amount, contested=contested)
                if self.betting.current_bet > previous_bet:
                    text = f"{player.name} raises to ${self.betting.current_bet}."
                else:
                    text = f"{player.name} calls ${committed}."
                self._announce_commit(player, committed, text)
            else:
                raise InvalidActionError(f"Unsupported action {action}")
        except InvalidActionError as exc:
            LOGGER.warning("Invalid action from %s: %s", player.name, exc)
            self.betting.fold(player)
            if action == ActionType.CHECK:
                self._say(f"{player.name} folds (cannot check with bet to call).")
            else:
                self._say(f"{player.name} folds ({exc}).")

        if self._remaining_in_hand() <= 1 or self.betting.is_round_complete(self.players):
            self._after_betting_round()
        else:
            self._begin_turn(self._first_actor_from(seat_idx, include_start=False))

    def _announce_commit(self, player: Player, committed: int, text: str) -> None:
        if player.is_all_in:
            self._say(f"{player.name} is all-in with ${committed}!")
        else:
            self._say(text)

    def _begin_turn(self, seat_idx: Optional[int]) -> None:
        if seat_idx is None:
            LOGGER.info("No player can act, ending betting round")
            self._after_betting_round()
            return
        self.current_actor = seat_idx
        player = self.players[seat_idx]
        if player.is_human:
            self.awaiting_manual_advance = False
            self._say("Your turn to act.")
        elif self.guided_mode:
            self.awaiting_manual_advance = True
            self._say(f"{player.name}'s turn - Click 'Next Move' to continue")
        else:
            self.awaiting_manual_advance = False
            self._say(f"{player.name} is thinking...")

    # Round transitions -----------------------------------------------

    def _after_betting_round(self) -> None:
        if self._remaining_in_hand() > 1:
            returned = self.betting.return_uncalled(self.players)
            if returned is not None:
                owner, excess = returned
                self._say(f"Uncalled ${excess} returned to {owner.name}.")
        self.betting.end_round(self.players)
        self.current_actor = None
        self.awaiting_manual_advance = False

        if self._remaining_in_hand() <= 1:
            self._award_by_default()
            return
        if self.stage == Stage.RIVER:
            self.stage = Stage.SHOWDOWN
            self._showdown()
            return

        next_stage, count, label = _STREETS[self.stage]
        try:
            self.community.extend(self.deck.deal(count))
        except EmptyDeckError as exc:
            self._abort_hand(f"Hand aborted ({exc}). Bets returned.")
            return
        self.stage = next_stage
        self._say(f"{label} dealt!")
        LOGGER.info("%s: board=%s pot=%s", label, cards_to_labels(self.community), self.pot)

        if sum(1 for player in self.players if player.can_act) < 2:
            self._run_out_board()
            return
        self._begin_turn(self._first_actor_from(self.dealer_index, include_start=False))

    def _run_out_board(self) -> None:
        try:
            self.community.extend(self.deck.deal(5 - len(self.community)))
        except EmptyDeckError as exc:
            self._abort_hand(f"Hand aborted ({exc}). Bets returned.")
            return
        self._say("All-in! Dealing the rest of the board.")
        self.stage = Stage.SHOWDOWN
        self._showdown()

    def _showdown(self) -> None:
        contenders = [player for player in self.players if player.in_hand]
        if not contenders:
            self._conclude_hand()
            return

        scores: Dict[int, HandCategory] = {}
        for player in contenders:
            scores[player.seat] = best_category(player.hand + self.community)
            self.history.append(f"{player.name} shows {describe_with_article(scores[player.seat])}.")

        # Categories only; equal categories split regardless of kickers.
        best = max(scores.values())
        winners = [player for player in contenders if scores[player.seat] == best]
        pot = self.betting.pot
        share, remainder = divmod(pot, len(winners))
        for idx, winner in enumerate(winners):
            winner.chips += share + (1 if idx < remainder else 0)
        self.betting.pot = 0

        description = describe(best)
        self.last_hand_result = HandResult(
            winner_names=tuple(winner.name for winner in winners),
            winning_hand=description,
            winner_index=winners[0].seat,
        )
        if len(winners) == 1:
            self._say(f"{winners[0].name} wins ${pot} with {description}!")
        else:
            names = " and ".join(winner.name for winner in winners)
            self._say(f"Split pot! {names} win ${share} each with {description}!")
        self.stage = Stage.HAND_OVER
        self._conclude_hand()

    def _award_by_default(self) -> None:
        winner = next((player for player in self.players if player.in_hand), None)
        if winner is None:
            self._conclude_hand()
            return
        pot = self.betting.pot
        winner.chips += pot
        self.betting.pot = 0
        self.stage = Stage.HAND_OVER
        self.last_hand_result = HandResult(winner_names=(winner.name,), winning_hand="Default Win", winner_index=winner.seat)
        self._say(f"{winner.name} wins ${pot} by default!")
        self._conclude_hand()

    def _abort_hand(self, reason: str) -> None:
        LOGGER.error("Aborting hand: %s", reason)
        for player in self.players:
            player.chips += player.total_in_pot
            player.total_in_pot = 0
            player.bet_this_round = 0
            player.is_all_in = False
        self.betting.reset_for_hand()
        self.stage = Stage.HAND_OVER
        self._say(reason)
        self._conclude_hand()

    def _conclude_hand(self) -> None:
        for player in self.players:
            player.is_all_in = False
            if player.chips <= 0 and not player.is_out:
                player.is_out = True
                self.history.append(f"{player.name} is out of chips.")
        self.current_actor = None
        self.awaiting_manual_advance = False
        if self.is_game_over():
            LOGGER.info("Game over: stacks=%s", [p.chips for p in self.players])

    # Seat helpers ----------------------------------------------------

    def _remaining_in_hand(self) -> int:
        return sum(1 for player in self.players if player.in_hand)

    def _seats_from(self, start: int, accept: Callable[[Player], bool]) -> List[int]:
        count = len(self.players)
        ordered = []
        for offset in range(count):
            idx = (start + offset) % count
            if accept(self.players[idx]):
                ordered.append(idx)
        return ordered

    def _next_seat(self, start: int, accept: Callable[[Player], bool]) -> int:
        seats = self._seats_from(start + 1, accept)
        if not seats:
            raise RuntimeError("No eligible seat")
        return seats[0]

    def _first_actor_from(self, start: int, include_start: bool) -> Optional[int]:
        # Without include_start the search wraps round to ``start`` last.
        first = start if include_start else start + 1
        seats = self._seats_from(first, lambda player: player.can_act)
        return seats[0] if seats else None

    def _say(self, text: str) -> None:
        self.message = text
        self.history.append(text)
