import random
from collections import Counter

import pytest

from engine.cards import BLACK_JOKER, RED_JOKER, Card, Rank, Suit
from engine.categories import (
    ENUMERABLE_CATEGORIES,
    HandCategory,
    KickerType,
    classify_cards,
    list_possible_hands,
)
from engine.deck import build_deck


def cards_of(rank, suits=(Suit.SPADES, Suit.HEARTS, Suit.CLUBS, Suit.DIAMONDS)):
    return [Card(rank, suit) for suit in suits]


def random_hands(count=6, size=17):
    rng = random.Random(1234)
    deck = build_deck()
    return [rng.sample(deck, size) for _ in range(count)]


def test_trio_scenario():
    fours = cards_of(Rank.FOUR, (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS))

    hands = list_possible_hands(fours, HandCategory.TRIO)
    assert len(hands) == 1
    hand = hands[0]
    assert hand.category is HandCategory.TRIO
    assert hand.chain[0].kicker == ()
    assert hand.card_set == frozenset(fours)


def test_trio_kicker_one_hand_per_other_card():
    cards = cards_of(Rank.FOUR, (Suit.SPADES, Suit.HEARTS, Suit.DIAMONDS))
    extras = [Card(Rank.NINE, Suit.CLUBS), Card(Rank.KING, Suit.DIAMONDS)]

    hands = list_possible_hands(cards + extras, HandCategory.TRIO_KICKER)
    assert len(hands) == 2
    assert {hand.chain[0].kicker for hand in hands} == {(extras[0],), (extras[1],)}
    assert len(list_possible_hands(cards + extras, HandCategory.TRIO)) == 1


def test_pair_choices_cover_every_combination():
    sevens = cards_of(Rank.SEVEN)
    hands = list_possible_hands(sevens, HandCategory.PAIR)
    assert len(hands) == 6
    assert len({hand.card_set for hand in hands}) == 6


def test_four_of_a_kind_breakdown():
    sevens = cards_of(Rank.SEVEN)
    counts = Counter(hand.category for hand in list_possible_hands(sevens))
    assert counts == {
        HandCategory.SOLO: 4,
        HandCategory.PAIR: 6,
        HandCategory.TRIO: 4,
        HandCategory.BOMB: 1,
    }


def test_full_house_needs_a_pair_of_another_rank():
    cards = cards_of(Rank.THREE, (Suit.SPADES, Suit.HEARTS, Suit.CLUBS)) + cards_of(Rank.FOUR, (Suit.SPADES, Suit.HEARTS))

    full_houses = list_possible_hands(cards, HandCategory.FULL_HOUSE)
    assert len(full_houses) == 1
    assert full_houses[0].card_count == 5
    assert len(list_possible_hands(cards[:4], HandCategory.FULL_HOUSE)) == 0


def test_bomb_with_two_solo_kickers_needs_two_ranks():
    fives = cards_of(Rank.FIVE)
    mixed = fives + [Card(Rank.EIGHT, Suit.SPADES), Card(Rank.NINE, Suit.SPADES)]
    same = fives + [Card(Rank.EIGHT, Suit.SPADES), Card(Rank.EIGHT, Suit.HEARTS)]

    assert len(list_possible_hands(mixed, HandCategory.BOMB_DUAL_SOLO)) == 1
    assert list_possible_hands(same, HandCategory.BOMB_DUAL_SOLO) == []


def test_bomb_with_two_pairs():
    fives = cards_of(Rank.FIVE)
    eights = cards_of(Rank.EIGHT, (Suit.SPADES, Suit.HEARTS))
    nines = cards_of(Rank.NINE, (Suit.SPADES, Suit.HEARTS))
    jacks = cards_of(Rank.JACK, (Suit.SPADES, Suit.HEARTS))

    assert len(list_possible_hands(fives + eights + nines, HandCategory.BOMB_DUAL_PAIR)) == 1
    hands = list_possible_hands(fives + eights + nines + jacks, HandCategory.BOMB_DUAL_PAIR)
    assert len(hands) == 3
    assert all(hand.card_count == 8 for hand in hands)


def test_joker_pair_becomes_rocket():
    hands = list_possible_hands([BLACK_JOKER, RED_JOKER], HandCategory.PAIR)
    assert len(hands) == 1
    assert hands[0].category is HandCategory.ROCKET
    assert hands[0].chain[0].kicker == ()

    counts = Counter(hand.category for hand in list_possible_hands([BLACK_JOKER, RED_JOKER]))
    assert counts == {HandCategory.SOLO: 2, HandCategory.ROCKET: 1}


def test_rocket_can_be_requested_directly():
    cards = [BLACK_JOKER, RED_JOKER, Card(Rank.THREE, Suit.SPADES)]
    hands = list_possible_hands(cards, HandCategory.ROCKET)
    assert [hand.category for hand in hands] == [HandCategory.ROCKET]
    assert list_possible_hands([RED_JOKER], HandCategory.ROCKET) == []


def test_classify_cards_uses_exact_card_set():
    rocket = classify_cards([RED_JOKER, BLACK_JOKER])
    assert [hand.category for hand in rocket] == [HandCategory.ROCKET]

    trio_kicker = classify_cards(cards_of(Rank.SIX, (Suit.SPADES, Suit.HEARTS, Suit.CLUBS)) + [Card(Rank.TWO, Suit.SPADES)])
    assert [hand.category for hand in trio_kicker] == [HandCategory.TRIO_KICKER]

    assert classify_cards([Card(Rank.THREE, Suit.SPADES), Card(Rank.FOUR, Suit.SPADES)]) == []


def test_empty_results_are_normal():
    assert list_possible_hands([]) == []
    assert list_possible_hands([Card(Rank.THREE, Suit.SPADES)], HandCategory.PAIR) == []


@pytest.mark.parametrize("cards", random_hands())
def test_kickerless_hands_use_one_rank(cards):
    available = Counter(card.rank for card in cards)
    plain_categories = [category for category in ENUMERABLE_CATEGORIES if category.kicker is KickerType.NONE]
    for category in plain_categories:
        for hand in list_possible_hands(cards, category):
            for element in hand.chain:
                ranks = {card.rank for card in element.primal}
                assert len(ranks) == 1
                assert len(element.primal) == hand.category.primal_count
                assert available[element.rank] >= hand.category.primal_count


@pytest.mark.parametrize("cards", random_hands())
def test_hands_never_reuse_a_card_or_a_rank_role(cards):
    for hand in list_possible_hands(cards):
        assert len(hand.cards) == len(hand.card_set)
        assert hand.card_set <= set(cards)
        if hand.category.kicker is KickerType.NONE:
            continue
        roles = [element.rank for element in hand.chain]
        for element in hand.chain:
            roles.extend(element.kicker_ranks)
        assert len(roles) == len(set(roles))
