from engine.guidance import guidance_for
from engine.models import ActionType

from tutor.console import HELP_TEXT, parse_command, play, render_snapshot

from .helpers import create_engine, stack_deck


def scripted(lines):
    inputs = iter(lines)
    return lambda prompt: next(inputs)


def test_parse_command():
    assert parse_command("f") == (ActionType.FOLD, 0)
    assert parse_command("k") == (ActionType.CHECK, 0)
    assert parse_command(" CALL ") == (ActionType.CALL, 0)
    assert parse_command("r 200") == (ActionType.RAISE, 200)
    assert parse_command("r") is None
    assert parse_command("r lots") is None
    assert parse_command("") is None
    assert parse_command("dance") is None


def test_render_hides_bot_cards_unless_revealed(monkeypatch):
    stack_deck(monkeypatch, ["2c", "Ah", "7d", "Ad"])
    engine = create_engine()
    snapshot = engine.start_new_round()

    hidden = render_snapshot(snapshot)
    assert "Bot 1: $1900 [?? ??]" in hidden
    assert "> You: $1950 [A♥ A♦] bet $50 (dealer) - Pair" in hidden
    assert hidden.splitlines()[-1] == "Your turn to act."

    revealed = render_snapshot(snapshot, reveal=True)
    assert "[2♣ 7♦]" in revealed


def test_fold_then_quit():
    output = []
    play(create_engine(), read=scripted(["f", "n"]), write=output.append)

    assert output[0] == HELP_TEXT
    assert output[-1].splitlines()[-1] == "Bot 1 wins $150 by default!"


def test_quit_immediately():
    output = []
    play(create_engine(), read=scripted(["q"]), write=output.append)

    assert output[0] == HELP_TEXT
    assert "Your turn to act." in output[-1]


def test_help_guidance_tip_and_rankings():
    engine = create_engine()
    output = []
    play(engine, read=scripted(["x", "g", "t", "h", "q"]), write=output.append)

    assert output.count(HELP_TEXT) == 2
    assert any(line.startswith("Pre-flop is about starting hand selection") for line in output)
    assert any(line.startswith("Royal Flush: ") and line.endswith("odds 1 in 649,740") for line in output)
    assert any(line.startswith("High Card: ") and line.endswith("odds 1 in 2") for line in output)
    expected = guidance_for(engine.snapshot())
    assert f"{expected.hand_strength}: {expected.advice}" in output


def test_console_reports_game_over(monkeypatch):
    stack_deck(monkeypatch, ["2c", "Ah", "7d", "Ad", "9s", "Jh", "4c", "Kd", "3s"])
    engine = create_engine()
    engine.players[1].chips = 100
    output = []

    play(engine, read=scripted(["c"]), write=output.append)

    assert output[-1] == "Game over! Thank you for playing."
    assert engine.is_game_over()


def test_guidance_shows_outs_on_the_flop(monkeypatch):
    stack_deck(monkeypatch, ["Kc", "9h", "Qd", "8h", "7h", "6s", "2h"])
    engine = create_engine()
    output = []

    play(engine, read=scripted(["c", "g", "q"]), write=output.append)

    assert "Bot 1 checks." in engine.history
    assert engine.snapshot().stage.value == "FLOP"
    assert "Outs: 15" in output
