import pytest

from engine.betting import BettingEngine
from engine.errors import InvalidActionError
from engine.models import Player


def make_players(chips=(1_000, 1_000)):
    return [Player(seat=idx, name=f"P{idx}", chips=amount) for idx, amount in enumerate(chips)]


def test_commit_caps_at_stack_and_flags_all_in():
    betting = BettingEngine(big_blind=100)
    player = make_players((60, 0))[0]

    committed = betting.commit(player, 100)

    assert committed == 60
    assert player.chips == 0
    assert player.is_all_in
    assert player.bet_this_round == 60
    assert player.total_in_pot == 60
    assert betting.pot == 60


def test_blinds_set_current_bet_to_largest_post():
    betting = BettingEngine(big_blind=100)
    sb, bb = make_players()

    betting.post_blind(sb, 50)
    betting.post_blind(bb, 100)

    assert betting.current_bet == 100
    assert betting.pot == 150
    assert betting.amount_to_call(sb) == 50
    assert betting.amount_to_call(bb) == 0


def test_short_big_blind_posts_what_it_has():
    betting = BettingEngine(big_blind=100)
    sb, bb = make_players((1_000, 30))

    betting.post_blind(sb, 50)
    posted = betting.post_blind(bb, 100)

    assert posted == 30
    assert bb.is_all_in
    assert betting.current_bet == 50


def test_check_facing_bet_is_invalid():
    betting = BettingEngine(big_blind=100)
    sb, bb = make_players()
    betting.post_blind(sb, 50)
    betting.post_blind(bb, 100)

    with pytest.raises(InvalidActionError):
        betting.check(sb)
    betting.check(bb)
    assert bb.seat in betting.acted


def test_raise_increment_clamped_to_big_blind_and_stack():
    betting = BettingEngine(big_blind=100)
    sb, bb = make_players((1_000, 250))
    betting.post_blind(sb, 50)
    betting.post_blind(bb, 100)

    committed = betting.raise_by(sb, 10)
    assert committed == 150
    assert betting.current_bet == 200
    assert betting.last_aggressor == sb.seat
    assert betting.acted == {sb.seat}

    # 150 behind, 100 to call: only 50 spare for the raise.
    committed = betting.raise_by(bb, 500)
    assert committed == 150
    assert bb.is_all_in
    assert betting.current_bet == 250
    assert betting.last_aggressor == bb.seat


def test_raise_without_spare_chips_is_a_call():
    betting = BettingEngine(big_blind=100)
    sb, bb = make_players((80, 1_000))
    betting.post_blind(sb, 50)
    betting.post_blind(bb, 100)

    committed = betting.raise_by(sb, 300)

    assert committed == 30
    assert sb.is_all_in
    assert betting.current_bet == 100
    assert betting.last_aggressor is None


def test_round_completes_once_everyone_acted_and_matched():
    betting = BettingEngine(big_blind=100)
    players = make_players()
    sb, bb = players
    betting.post_blind(sb, 50)
    betting.post_blind(bb, 100)
    assert not betting.is_round_complete(players)

    betting.call(sb)
    assert not betting.is_round_complete(players)

    betting.raise_by(bb, 100)
    assert not betting.is_round_complete(players)

    betting.call(sb)
    assert betting.is_round_complete(players)


def test_round_complete_when_one_player_left():
    betting = BettingEngine(big_blind=100)
    players = make_players()
    betting.post_blind(players[0], 50)
    betting.post_blind(players[1], 100)

    betting.fold(players[0])

    assert betting.is_round_complete(players)


def test_end_round_clears_street_state_but_keeps_pot():
    betting = BettingEngine(big_blind=100)
    players = make_players()
    betting.post_blind(players[0], 50)
    betting.post_blind(players[1], 100)
    betting.call(players[0])

    betting.end_round(players)

    assert betting.pot == 200
    assert betting.current_bet == 0
    assert not betting.acted
    assert all(player.bet_this_round == 0 for player in players)
    assert all(player.total_in_pot == 100 for player in players)


def test_lone_player_facing_all_in_is_done_once_matched():
    betting = BettingEngine(big_blind=100)
    players = make_players((75, 1_000))
    short, big = players
    betting.post_blind(short, 50)
    betting.post_blind(big, 100)

    betting.call(short)

    assert short.is_all_in
    assert big.seat not in betting.acted
    assert betting.is_round_complete(players)


def test_lone_player_facing_all_in_must_still_call():
    betting = BettingEngine(big_blind=100)
    players = make_players((1_000, 100))
    small, short = players
    betting.post_blind(small, 50)
    betting.post_blind(short, 100)

    assert not betting.is_round_complete(players)
    betting.call(small)
    assert betting.is_round_complete(players)


def test_uncontested_raise_is_a_call():
    betting = BettingEngine(big_blind=100)
    small, short = make_players((1_000, 100))
    betting.post_blind(small, 50)
    betting.post_blind(short, 100)

    committed = betting.raise_by(small, 900, contested=False)

    assert committed == 50
    assert betting.current_bet == 100
    assert betting.last_aggressor is None


def test_return_uncalled_gives_back_unmatched_chips():
    betting = BettingEngine(big_blind=100)
    players = make_players((75, 1_000))
    short, big = players
    betting.post_blind(short, 50)
    betting.post_blind(big, 100)
    betting.call(short)

    owner, excess = betting.return_uncalled(players)

    assert owner is big
    assert excess == 25
    assert big.chips == 925
    assert big.bet_this_round == 75
    assert big.total_in_pot == 75
    assert betting.pot == 150
    assert betting.current_bet == 75
    assert betting.return_uncalled(players) is None
