import pytest

from engine.categories import classify_cards
from engine.events import EventKind, RecordingSink
from engine.game import MatchSession, RoundPhase
from engine.player import Team
from engine.rules_schema import RuleSet


def new_session(**kwargs):
    sink = RecordingSink()
    return MatchSession(seed=5, sink=sink, **kwargs), sink


def award_to_first_bidder(current, amount=2):
    first = current.first_bidder
    current.bid(first, amount)
    while current.phase is RoundPhase.AUCTION:
        current.pass_bid(current.current_player)
    return first


def win_immediately(current):
    landlord = current.landlord
    card = landlord.hand[0]
    landlord.hand = [card]
    current.play_hand(landlord, classify_cards([card])[0])


def test_deal_hands_out_every_card():
    session, sink = new_session()
    current = session.start_round()

    assert [len(player.hand) for player in session.turn_order] == [17, 17, 17]
    assert len(session.table.draw_pile) == 3
    assert session.table.card_count(session.players) == 54
    assert session.table.card_count() == 3
    assert current.phase is RoundPhase.AUCTION
    assert current.current_player is current.first_bidder
    holder = [player for player in session.turn_order if current.marker in player.hand]
    assert holder in ([current.first_bidder], [])
    assert sink.kinds() == [EventKind.ROUND_START, EventKind.FIRST_BIDDER]


def test_landlord_takes_kitty_and_leads():
    session, sink = new_session()
    current = session.start_round()
    kitty = list(session.table.draw_pile)

    landlord = award_to_first_bidder(current)

    assert current.phase is RoundPhase.PLAY
    assert current.landlord is landlord
    assert current.winning_bid == 2
    assert len(landlord.hand) == 20
    assert all(card in landlord.hand for card in kitty)
    assert current.kitty == kitty
    assert current.current_player is landlord
    assert landlord.team is Team.LANDLORD
    assert {p.team for p in session.players if p is not landlord} == {Team.PEASANT}
    assert [p.bid for p in session.players if p is not landlord] == [None, None]
    assert EventKind.LANDLORD in sink.kinds()


def test_round_scores_and_vote_to_continue():
    session, sink = new_session()
    current = session.start_round()
    landlord = award_to_first_bidder(current)

    win_immediately(current)

    assert current.phase is RoundPhase.VOTE
    assert landlord.score == 4
    assert sorted(p.score for p in session.players) == [-2, -2, 4]
    assert current.score_result.landlord_won
    assert EventKind.ROUND_WON in sink.kinds()
    assert EventKind.SCORES in sink.kinds()

    voters = list(current.pending_voters)
    assert landlord not in voters and len(voters) == 2
    with pytest.raises(RuntimeError):
        current.vote(voters[1], keep_playing=True)
    for voter in voters:
        assert current.current_player is voter
        current.vote(voter, keep_playing=True)

    assert current.phase is RoundPhase.COMPLETE
    record = session.finish_round()
    assert record.landlord == landlord.name
    assert record.final_bid == 2
    assert not session.is_over()


def test_resignation_ends_the_match():
    session, sink = new_session()
    current = session.start_round()
    award_to_first_bidder(current)
    win_immediately(current)

    current.vote(current.current_player, keep_playing=False)

    assert current.phase is RoundPhase.RESIGNED
    assert all(not player.hand for player in session.players)
    session.finish_round()
    assert session.is_over()
    assert sink.kinds()[-1] is EventKind.GAME_OVER
    with pytest.raises(RuntimeError):
        session.start_round()


def test_nobody_bids_voids_the_round_and_redeals():
    session, sink = new_session()
    current = session.start_round()
    while current.phase is RoundPhase.AUCTION:
        current.pass_bid(current.current_player)

    assert current.phase is RoundPhase.VOID
    assert EventKind.NO_LANDLORD in sink.kinds()
    record = session.finish_round()
    assert record.phase is RoundPhase.VOID
    assert record.landlord is None
    assert session.completed_rounds() == 0

    session.start_round()
    assert [len(player.hand) for player in session.turn_order] == [17, 17, 17]
    assert len(session.table.draw_pile) == 3
    assert session.table.card_count(session.players) == 54


def test_round_limit_ends_the_match():
    session, _ = new_session(rules=RuleSet(max_rounds=1))
    current = session.start_round()
    award_to_first_bidder(current, amount=3)
    win_immediately(current)
    for voter in list(current.pending_voters):
        current.vote(voter, keep_playing=True)
    session.finish_round()

    assert session.is_over()
    assert sum(session.final_scores()) == 0


def test_actions_outside_their_phase_are_rejected():
    session, _ = new_session()
    current = session.start_round()
    with pytest.raises(RuntimeError):
        current.pass_turn(current.first_bidder)
    with pytest.raises(RuntimeError):
        session.start_round()
    with pytest.raises(RuntimeError):
        session.finish_round()
