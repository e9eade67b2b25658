import itertools

import pytest

from setgame.cards import Card, build_deck
from setgame.evaluator import complete_set, find_sets, is_valid_set


def test_number_all_different_others_all_same_is_a_set():
    cards = [
        Card(1, "red", "oval", "solid"),
        Card(2, "red", "oval", "solid"),
        Card(3, "red", "oval", "solid"),
    ]
    assert is_valid_set(cards)


def test_color_two_alike_is_not_a_set():
    cards = [
        Card(1, "red", "oval", "solid"),
        Card(2, "green", "oval", "solid"),
        Card(3, "red", "oval", "solid"),
    ]
    assert not is_valid_set(cards)


def test_every_attribute_different_is_a_set():
    cards = [
        Card(1, "red", "oval", "solid"),
        Card(2, "green", "squiggle", "striped"),
        Card(3, "purple", "diamond", "open"),
    ]
    assert is_valid_set(cards)


def test_duplicate_cards_never_form_a_set():
    card = Card(1, "red", "oval", "solid")
    assert not is_valid_set([card, card, card])
    assert not is_valid_set([card, card, Card(2, "red", "oval", "solid")])


@pytest.mark.parametrize("count", [0, 2, 4])
def test_wrong_card_count_is_rejected(count):
    cards = build_deck(1)[:count]
    with pytest.raises(ValueError, match="exactly 3"):
        is_valid_set(cards)


def test_validity_ignores_order_of_the_triple():
    deck = build_deck(21)[:12]
    for triple in itertools.combinations(deck, 3):
        expected = is_valid_set(triple)
        for permutation in itertools.permutations(triple):
            assert is_valid_set(permutation) == expected


def test_valid_sets_have_each_attribute_constant_or_distinct():
    deck = build_deck(4)[:15]
    for triple in find_sets(deck):
        for values in zip(*(card.values for card in triple)):
            assert len(set(values)) in (1, 3)


def test_complete_set_returns_the_unique_third_card():
    deck = build_deck(9)
    for first, second in itertools.combinations(deck[:10], 2):
        third = complete_set(first, second)
        assert third not in (first, second)
        assert is_valid_set([first, second, third])
        others = [card for card in deck if card not in (first, second, third)]
        assert not any(is_valid_set([first, second, card]) for card in others)


def test_complete_set_requires_distinct_cards():
    card = Card(2, "green", "oval", "open")
    with pytest.raises(ValueError, match="distinct"):
        complete_set(card, card)


def test_find_sets_counts_all_sets_in_full_deck():
    # 81 * 80 / 6: every pair completes to exactly one set.
    assert len(find_sets(build_deck(0))) == 1080
