from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Set, Tuple

from .errors import InvalidActionError
from .models import Player

# BettingEngine owns the chip arithmetic of a hand: the pot, the bet to match
# and who has acted since the last raise. Turn order lives in the controller.


@dataclass
class BettingEngine:
    big_blind: int
    pot: int = 0
    current_bet: int = 0
    last_aggressor: Optional[int] = None
    acted: Set[int] = field(default_factory=set)

    def reset_for_hand(self) -> None:
        self.pot = 0
        self.current_bet = 0
        self.last_aggressor = None
        self.acted.clear()

    def amount_to_call(self, player: Player) -> int:
        return max(0, self.current_bet - player.bet_this_round)

    def commit(self, player: Player, amount: int) -> int:
        amount = max(0, min(amount, player.chips))
        player.chips -= amount
        player.bet_this_round += amount
        player.total_in_pot += amount
        self.pot += amount
        if player.chips == 0:
            player.is_all_in = True
        return amount

    def post_blind(self, player: Player, amount: int) -> int:
        posted = self.commit(player, amount)
        self.current_bet = max(self.current_bet, player.bet_this_round)
        return posted

    # Actions ---------------------------------------------------------

    def fold(self, player: Player) -> None:
        player.is_folded = True
        self.acted.add(player.seat)

    def check(self, player: Player) -> None:
        if self.amount_to_call(player) > 0:
            raise InvalidActionError(f"{player.name} cannot check facing a bet of {self.current_bet}")
        self.acted.add(player.seat)

    def call(self, player: Player) -> int:
        committed = self.commit(player, self.amount_to_call(player))
        self.acted.add(player.seat)
        return committed

    def raise_by(self, player: Player, increment: int, contested: bool = True) -> int:
        """Commit the call amount plus ``increment`` (clamped to a legal raise).

        The increment is at least the big blind unless the stack cannot cover
        it, in which case the whole stack goes in. When nobody else can still
        act (``contested`` is false) the raise is only a call. Returns the
        chips committed.
        """
        to_call = self.amount_to_call(player)
        spare = player.chips - to_call
        if spare <= 0 or not contested:
            return self.call(player)
        increment = min(max(increment, self.big_blind), spare)
        committed = self.commit(player, to_call + increment)
        if player.bet_this_round > self.current_bet:
            self.current_bet = player.bet_this_round
            self.last_aggressor = player.seat
            self.acted = {player.seat}
        else:
            self.acted.add(player.seat)
        return committed

    # Round bookkeeping -----------------------------------------------

    def is_round_complete(self, players: Iterable[Player]) -> bool:
        in_hand = [player for player in players if player.in_hand]
        if len(in_hand) <= 1:
            return True
        able = [player for player in in_hand if not player.is_all_in]
        # A lone player facing all-ins only has to match the bet.
        if len(able) <= 1 and all(player.bet_this_round >= self.current_bet for player in able):
            return True
        for player in able:
            if player.seat not in self.acted or player.bet_this_round != self.current_bet:
                return False
        return True

    def return_uncalled(self, players: Iterable[Player]) -> Optional[Tuple[Player, int]]:
        """Give back the part of the top bet that no one else in the hand matched."""
        ordered = sorted((player for player in players if player.in_hand), key=lambda p: p.bet_this_round, reverse=True)
        if len(ordered) < 2:
            return None
        top, runner_up = ordered[0], ordered[1]
        excess = top.bet_this_round - runner_up.bet_this_round
        if excess <= 0:
            return None
        top.chips += excess
        top.bet_this_round -= excess
        top.total_in_pot -= excess
        top.is_all_in = False
        self.pot -= excess
        self.current_bet = runner_up.bet_this_round
        return top, excess

    def end_round(self, players: Iterable[Player]) -> None:
        for player in players:
            player.reset_for_round()
        self.current_bet = 0
        self.last_aggressor = None
        self.acted.clear()
