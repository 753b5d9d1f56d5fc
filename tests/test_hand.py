import random

from blackjack_table.cards import Card
from blackjack_table.hand import MAX_HAND_SIZE, Hand
from blackjack_table.types import AddResult

from conftest import cards, hand_of


def test_two_aces_score_twelve():
    assert hand_of("AS", "AH").score() == 12


def test_eleven_card_hand_downgrades_every_ace():
    hand = hand_of("AS", "AH", "AD", "AC", "2S", "2H", "2D", "2C", "3S", "3H", "3D")
    assert hand.num_cards == 11
    assert hand.score() == 21
    assert not hand.is_bust()
    assert not hand.is_soft()


def test_five_aces_downgrade_one_at_a_time():
    hand = hand_of("AS", "AH", "AD", "AC", "AS", owner="Dealer")
    assert hand.score() == 15
    assert hand.is_soft()
    assert not hand.is_bust()


def test_score_ignores_card_order():
    rng = random.Random(4)
    for labels in (["AS", "9H", "AD", "5C"], ["KS", "AH", "AD"], ["7S", "7H", "7D"], ["AS", "AH", "TD", "9C"]):
        expected = hand_of(*labels).score()
        for _ in range(10):
            rng.shuffle(labels)
            assert hand_of(*labels).score() == expected


def test_natural():
    assert hand_of("AS", "KH").is_natural()
    assert hand_of("TS", "AD").is_natural()
    assert not hand_of("7S", "7H", "7D").is_natural()
    assert hand_of("7S", "7H", "7D").score() == 21


def test_bust():
    hand = hand_of("KS", "QH", "5D")
    assert hand.score() == 25
    assert hand.is_bust()


def test_soft_and_hard_totals():
    assert hand_of("AS", "6H").is_soft()
    assert hand_of("AS", "6H").score() == 17
    assert not hand_of("AS", "6H", "KD").is_soft()
    assert hand_of("AS", "6H", "KD").score() == 17


def test_score_is_recomputed_after_each_card():
    hand = Hand("Player 1")
    assert hand.score() == 0
    hand.add_card(Card.parse("AS"))
    assert hand.score() == 11
    hand.add_card(Card.parse("9H"))
    assert hand.score() == 20
    hand.add_card(Card.parse("5C"))
    assert hand.score() == 15


def test_capacity_is_enforced():
    hand = Hand("Player 1")
    for c in cards(*(["AS"] * MAX_HAND_SIZE)):
        assert hand.add_card(c) == AddResult.ACCEPTED
    assert hand.is_full()
    assert hand.add_card(Card.parse("2C")) == AddResult.REJECTED
    assert hand.num_cards == MAX_HAND_SIZE


def test_malformed_cards_are_rejected():
    hand = Hand("Player 1")
    assert hand.add_card(Card("", "H")) == AddResult.REJECTED
    assert hand.add_card(Card("A", "")) == AddResult.REJECTED
    assert hand.add_card(Card("1", "S")) == AddResult.REJECTED
    assert hand.num_cards == 0


def test_clear():
    hand = hand_of("AS", "KH")
    hand.clear()
    assert hand.num_cards == 0
    assert hand.score() == 0


def test_masked_view_hides_hole_card_and_score():
    hand = hand_of("AS", "7H", owner="Dealer")
    view = hand.view(masked=True)
    assert view.cards == ["??", "7H"]
    assert view.score is None
    full = hand.view()
    assert full.cards == ["AS", "7H"]
    assert full.score == 18
    assert full.is_soft
