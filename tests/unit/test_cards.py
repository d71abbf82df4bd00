"""牌定义、洗牌与编码测试"""
import pytest
import numpy as np

from core.cards import (
    Card,
    Suit,
    DECK_SIZE,
    make_deck,
    shuffle,
    new_deck,
    deal_round,
    cut_starter,
    remove_cards,
    cards_to_array,
    array_to_cards,
    cards_to_str,
    str_to_card,
    str_to_cards,
)
from core.rng import GameRng


class TestCard:
    """Card 测试"""

    def test_values(self):
        assert Card(1, Suit.CLUBS).value == 1
        assert Card(9, Suit.HEARTS).value == 9
        assert Card(10, Suit.SPADES).value == 10
        assert Card(11, Suit.SPADES).value == 10
        assert Card(13, Suit.DIAMONDS).value == 10

    def test_invalid_rank(self):
        with pytest.raises(ValueError):
            Card(0, Suit.CLUBS)
        with pytest.raises(ValueError):
            Card(14, Suit.CLUBS)

    def test_index_layout(self):
        assert Card(1, Suit.CLUBS).index == 0
        assert Card(13, Suit.CLUBS).index == 12
        assert Card(1, Suit.DIAMONDS).index == 13
        assert Card(13, Suit.SPADES).index == 51

    def test_from_index(self):
        for i in range(DECK_SIZE):
            assert Card.from_index(i).index == i

    def test_hashable_and_equal(self):
        assert Card(5, Suit.HEARTS) == Card(5, Suit.HEARTS)
        assert len({Card(5, Suit.HEARTS), Card(5, Suit.HEARTS)}) == 1

    def test_str(self):
        assert str(Card(1, Suit.CLUBS)) == "A♣"
        assert str(Card(10, Suit.DIAMONDS)) == "10♦"
        assert str(Card(12, Suit.HEARTS)) == "Q♥"


class TestDeck:
    """牌组测试"""

    def test_deck_size(self):
        deck = make_deck()
        assert len(deck) == DECK_SIZE
        assert len(set(deck)) == DECK_SIZE

    def test_shuffle_is_permutation(self):
        deck = make_deck()
        shuffled = shuffle(deck, GameRng(7))
        assert len(shuffled) == DECK_SIZE
        assert set(shuffled) == set(deck)
        # 原牌组不变
        assert deck == make_deck()

    def test_shuffle_reproducible(self):
        assert new_deck(GameRng(123)) == new_deck(GameRng(123))
        assert new_deck(GameRng(123)) != new_deck(GameRng(124))

    def test_deal_round_from_back(self):
        deck = make_deck()
        player, ai, remaining = deal_round(deck)

        assert len(player) == 6
        assert len(ai) == 6
        assert len(remaining) == DECK_SIZE - 12
        # AI 先拿末尾那张
        assert ai[0] == deck[-1]
        assert player[0] == deck[-2]
        assert ai[1] == deck[-3]
        assert remaining == deck[:DECK_SIZE - 12]

    def test_deal_round_disjoint(self):
        player, ai, remaining = deal_round(new_deck(GameRng(5)))
        assert not set(player) & set(ai)
        assert not (set(player) | set(ai)) & set(remaining)

    def test_deal_round_small_deck(self):
        with pytest.raises(ValueError):
            deal_round(make_deck()[:11])

    def test_cut_starter(self):
        deck = make_deck()
        starter, rest = cut_starter(deck)
        assert starter == deck[-1]
        assert rest == deck[:-1]

    def test_cut_empty_deck(self):
        with pytest.raises(ValueError):
            cut_starter(())

    def test_remove_cards(self):
        deck = make_deck()
        removed = deck[:3]
        rest = remove_cards(deck, removed)
        assert len(rest) == DECK_SIZE - 3
        assert rest[0] == deck[3]


class TestCardsToArray:
    """cards_to_array 测试"""

    def test_empty_cards(self):
        arr = cards_to_array([])
        assert arr.shape == (DECK_SIZE,)
        assert arr.sum() == 0

    def test_cards(self):
        cards = str_to_cards("AC KS 5H")
        arr = cards_to_array(cards)
        assert arr.sum() == 3
        assert arr[0] == 1
        assert arr[51] == 1
        assert arr[Card(5, Suit.HEARTS).index] == 1

    def test_array_to_cards_sorted(self):
        cards = str_to_cards("KS AC 5H")
        assert array_to_cards(cards_to_array(cards)) == str_to_cards("AC 5H KS")

    def test_dtype(self):
        assert cards_to_array(make_deck()).dtype == np.float32


class TestCardStrings:
    """字符串转换测试"""

    def test_parse_symbols(self):
        assert str_to_card("A♣") == Card(1, Suit.CLUBS)
        assert str_to_card("10♦") == Card(10, Suit.DIAMONDS)

    def test_parse_ascii(self):
        assert str_to_card("5H") == Card(5, Suit.HEARTS)
        assert str_to_card("TS") == Card(10, Suit.SPADES)
        assert str_to_card("jd") == Card(11, Suit.DIAMONDS)

    @pytest.mark.parametrize("text", ["", "X", "1C", "5X", "11H"])
    def test_parse_invalid(self, text):
        with pytest.raises(ValueError):
            str_to_card(text)

    def test_cards_to_str(self):
        assert cards_to_str(str_to_cards("5C 5D JS")) == "5♣ 5♦ J♠"
        assert cards_to_str([]) == ""
