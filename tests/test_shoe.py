from collections import Counter
import random

import pytest

from blackjack_table.cards import (
    Card,
    InvalidCard,
    Shoe,
    ShoeExhausted,
    canonical_deck,
    card_value,
    max_hand_size,
)
from blackjack_table.rules import Rules


def test_card_parse_and_labels():
    assert Card.parse("AS") == Card("A", "S")
    assert Card.parse("10h") == Card("T", "H")
    assert Card.parse("TD").symbol() == "T♦"
    assert Card("K", "C").label() == "KC"


@pytest.mark.parametrize("label", ["", "A", "1S", "AX", "ASS", None])
def test_card_parse_rejects_malformed(label):
    with pytest.raises(InvalidCard):
        Card.parse(label)


def test_card_values():
    assert card_value("A") == 11
    assert [card_value(r) for r in ("K", "Q", "J", "T")] == [10, 10, 10, 10]
    assert card_value("2") == 2
    assert card_value("9") == 9


def test_max_hand_size_is_eleven_for_four_suits():
    assert max_hand_size() == 11
    assert max_hand_size(1) == 6  # A,2,3,4,5,6 = 21


def test_initialize_has_every_card_once_per_deck():
    shoe = Shoe(num_decks=6, seed=1)
    assert shoe.capacity == 312
    counts = Counter(shoe.cards())
    assert len(counts) == 52
    assert counts == Counter({card: 6 for card in canonical_deck()})


def test_shuffle_is_a_permutation():
    shoe = Shoe(num_decks=2, seed=3)
    before = Counter(shoe.cards())
    for _ in range(5):
        shoe.draw()
    shoe.shuffle()
    assert shoe.cursor == 0
    assert Counter(shoe.cards()) == before


def test_same_seed_same_sequence():
    a = Shoe(seed=99)
    b = Shoe(seed=99)
    assert [a.draw() for _ in range(50)] == [b.draw() for _ in range(50)]


def test_injected_rng_is_used():
    a = Shoe(rng=random.Random(5))
    b = Shoe(seed=5)
    assert a.cards() == b.cards()


def test_draw_reshuffles_at_threshold():
    shoe = Shoe(num_decks=1, seed=7, reshuffle_threshold=10)
    assert shoe.shuffle_count == 1
    for _ in range(42):
        shoe.draw()
    assert shoe.cursor == 42
    assert shoe.shuffle_count == 1
    shoe.draw()
    assert shoe.shuffle_count == 2
    assert shoe.cursor == 1


def test_many_draws_never_exhaust():
    shoe = Shoe(num_decks=1, seed=11, reshuffle_threshold=0)
    for _ in range(shoe.capacity * 10):
        shoe.draw()
        assert 0 <= shoe.cursor <= shoe.capacity
    assert shoe.shuffle_count > 1


def test_cursor_past_end_reshuffles_instead_of_failing():
    shoe = Shoe(num_decks=1, seed=2, reshuffle_threshold=0)
    shoe.cursor = shoe.capacity
    shoe.draw()
    assert shoe.cursor == 1


def test_empty_shoe_raises_after_retry():
    shoe = Shoe(num_decks=1, seed=2, reshuffle_threshold=0)
    shoe._cards = []
    with pytest.raises(ShoeExhausted):
        shoe.draw()


@pytest.mark.parametrize("decks, threshold", [(0, 0), (1, 52), (1, -1), (6, 400)])
def test_bad_configuration_rejected(decks, threshold):
    with pytest.raises(ValueError):
        Shoe(num_decks=decks, reshuffle_threshold=threshold)
    with pytest.raises(ValueError):
        Rules(num_decks=decks, reshuffle_threshold=threshold)


def test_rules_defaults():
    rules = Rules()
    assert rules.num_decks == 6
    assert rules.reshuffle_threshold == 75
    assert rules.capacity == 312
