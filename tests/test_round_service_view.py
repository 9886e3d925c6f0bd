from dataclasses import asdict

import pytest

from engine.events import RecordingSink
from engine.game import MatchSession
from engine.service import ActionKind, ActionSpec, RoundService


def new_service():
    return RoundService(MatchSession(seed=3, sink=RecordingSink()))


def test_auction_actions_and_initial_view():
    service = new_service()
    current = service.start_round()
    bidder = current.current_player

    labels = [action.label for action in service.enabled_actions(bidder)]
    assert labels == ["Bid 1", "Bid 2", "Bid 3", "Pass"]
    others = [player for player in service.session.players if player is not bidder]
    assert all(service.enabled_actions(player) == [] for player in others)

    view = service.get_round_view(perspective=bidder.name)
    assert view.phase == "auction"
    assert view.current_player == bidder.name
    assert len(view.hand) == 17
    assert view.kitty == []
    assert view.actions == labels


def test_bid_updates_history_and_narrows_bids():
    service = new_service()
    current = service.start_round()
    bidder = current.current_player

    service.apply(bidder, ActionSpec(ActionKind.BID, (1,)))
    view = service.get_round_view()
    assert view.auction_history[-1] == {"player": bidder.name, "action": "bid", "amount": 1}
    assert view.bids[bidder.name] == 1

    following = current.current_player
    assert [action.label for action in service.enabled_actions(following)] == ["Bid 2", "Bid 3", "Pass"]


def test_opening_lead_is_picked_card_by_card():
    service = new_service()
    current = service.start_round()
    service.apply(current.current_player, ActionSpec(ActionKind.BID, (3,)))
    landlord = current.landlord
    assert current.current_player is landlord

    actions = service.enabled_actions(landlord)
    assert {action.kind for action in actions} == {ActionKind.SELECT}
    assert len(actions) == len(set(landlord.hand)) == 20

    lowest = landlord.hand[0]
    service.apply(landlord, ActionSpec(ActionKind.SELECT, (lowest,)))
    kinds = {action.kind for action in service.enabled_actions(landlord)}
    assert {ActionKind.DESELECT, ActionKind.DESELECT_ALL, ActionKind.PLAY} <= kinds
    assert ActionKind.PASS not in kinds

    hand = service.apply(landlord, ActionSpec(ActionKind.PLAY))
    assert hand.cards == (lowest,)
    assert len(landlord.hand) == 19
    assert service.selection(landlord) == []

    view = service.get_round_view(perspective=landlord.name)
    assert view.phase == "play"
    assert view.landlord == landlord.name
    assert len(view.kitty) == 3
    assert view.to_beat == hand.label
    assert asdict(view)["remaining_cards"][landlord.name] == 19


def test_unavailable_actions_are_rejected():
    service = new_service()
    current = service.start_round()
    bidder = current.current_player
    others = [player for player in service.session.players if player is not bidder]

    with pytest.raises(ValueError):
        service.apply(others[0], ActionSpec(ActionKind.PASS))
    with pytest.raises(ValueError):
        service.apply(bidder, ActionSpec(ActionKind.PLAY))


def test_play_selection_plays_a_legal_hand():
    service = new_service()
    current = service.start_round()
    service.apply(current.current_player, ActionSpec(ActionKind.BID, (3,)))
    landlord = current.landlord

    legal = service.legal_hands(landlord)
    assert legal
    hand = max(legal, key=lambda candidate: candidate.card_count)
    service.play_selection(landlord, hand)

    assert len(landlord.hand) == 20 - hand.card_count
    assert frozenset(service.session.table.last_played) == hand.card_set


def test_session_view_lists_scores_and_order():
    service = new_service()
    view = service.get_session_view()
    assert view.round is None
    assert set(view.scores) == {"North", "East", "West"}
    assert sorted(view.turn_order) == ["East", "North", "West"]
    assert not view.match_over
