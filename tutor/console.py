from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from engine.evaluator import HAND_RANKINGS, HandCategory, best_category, describe, hand_odds
from engine.game import HUMAN_SEAT, GameEngine
from engine.guidance import guidance_for, tutorial_tip
from engine.models import ActionType, TableSnapshot

LOGGER = logging.getLogger("tutor_console")

# Console host: the same table as the WebSocket host, played from a terminal.
# Input and output are injectable so the loop can be scripted.

HELP_TEXT = (
    "Commands: f=fold, k=check, c=call, r <amount>=raise by amount, "
    "g=guidance, t=tip, h=hand rankings, q=quit"
)

_SHORTCUTS = {
    "f": ActionType.FOLD,
    "fold": ActionType.FOLD,
    "k": ActionType.CHECK,
    "check": ActionType.CHECK,
    "c": ActionType.CALL,
    "call": ActionType.CALL,
    "r": ActionType.RAISE,
    "raise": ActionType.RAISE,
}


def render_snapshot(snapshot: TableSnapshot, reveal: bool = False) -> str:
    lines: List[str] = []
    board = " ".join(card.display for card in snapshot.community) or "--"
    lines.append(f"[{snapshot.stage.value}] Board: {board}  Pot: ${snapshot.pot}  Bet: ${snapshot.current_bet}")
    for view in snapshot.players:
        show = view.is_human or reveal
        cards = " ".join(card.display for card in view.hand) if show else "?? ??"
        flags = []
        if view.seat == snapshot.dealer_index:
            flags.append("dealer")
        if view.is_folded:
            flags.append("folded")
        if view.is_all_in:
            flags.append("all-in")
        if view.is_out:
            flags.append("out")
        marker = ">" if snapshot.current_actor == view.seat else " "
        suffix = f" ({', '.join(flags)})" if flags else ""
        line = f"{marker} {view.name}: ${view.chips} [{cards}] bet ${view.bet_this_round}{suffix}"
        if show and len(view.hand) == 2:
            line += f" - {describe(best_category(list(view.hand) + list(snapshot.community)))}"
        lines.append(line)
    lines.append(snapshot.message)
    return "\n".join(lines)


def parse_command(text: str) -> Optional[Tuple[ActionType, int]]:
    parts = text.strip().lower().split()
    if not parts or parts[0] not in _SHORTCUTS:
        return None
    action = _SHORTCUTS[parts[0]]
    amount = 0
    if action == ActionType.RAISE:
        if len(parts) < 2 or not parts[1].isdigit():
            return None
        amount = int(parts[1])
    return action, amount


def play(
    engine: GameEngine,
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    """Play hands until the game ends or the player quits."""
    write(HELP_TEXT)
    while True:
        snapshot = engine.start_new_round()
        if snapshot.game_over and engine.is_hand_over():
            write(snapshot.message)
            return

        while not engine.is_hand_over():
            snapshot = engine.snapshot()
            write(render_snapshot(snapshot))
            if engine.is_bot_turn():
                if engine.guided_mode:
                    read("Press Enter for the bot's move... ")
                    engine.advance_turn()
                else:
                    engine.trigger_bot_action()
                continue

            text = read(f"Your move (to call ${engine.get_amount_to_call(HUMAN_SEAT)}): ").strip().lower()
            if text in ("q", "quit"):
                return
            if text == "g":
                guidance = guidance_for(snapshot, seat=HUMAN_SEAT)
                write(f"{guidance.hand_strength}: {guidance.advice}")
                if guidance.outs:
                    write(f"Outs: {guidance.outs}")
                continue
            if text == "t":
                write(tutorial_tip(snapshot.stage))
                continue
            if text == "h":
                # Rankings run from the best category down.
                for category, row in zip(sorted(HandCategory, reverse=True), HAND_RANKINGS):
                    write(f"{row['hand']}: {row['description']} ({row['example']}), odds {hand_odds(category)}")
                continue
            command = parse_command(text)
            if command is None:
                LOGGER.debug("Unrecognised command %r", text)
                write(HELP_TEXT)
                continue
            engine.handle_player_action(*command)

        write(render_snapshot(engine.snapshot(), reveal=True))
        if engine.is_game_over():
            write("Game over! Thank you for playing.")
            return
        if read("Play another hand? [Y/n] ").strip().lower().startswith("n"):
            return
