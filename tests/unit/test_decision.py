"""蒙特卡洛决策测试"""
from itertools import combinations

import pytest

from core.cards import DECK_SIZE, str_to_card, str_to_cards
from core.pegging import Seat, PeggingState
from core.rng import GameRng
from decision import (
    SearchConfig,
    unseen_cards,
    evaluate_discards,
    choose_discard,
    greedy_play,
    rollout,
    evaluate_plays,
    choose_pegging_move,
)


def c(text):
    return str_to_card(text)


class TestSearchConfig:
    """SearchConfig 测试"""

    def test_defaults(self):
        config = SearchConfig()
        assert config.discard_simulations == 400
        assert config.pegging_simulations == 180
        assert config.crib_discount == 0.9

    def test_from_dict_ignores_unknown(self):
        config = SearchConfig.from_dict({"pegging_simulations": 60, "unknown": 1})
        assert config.pegging_simulations == 60
        assert config.discard_simulations == 400

    def test_rejects_zero(self):
        with pytest.raises(ValueError):
            SearchConfig(discard_simulations=0)


class TestUnseenCards:
    """未见牌池测试"""

    def test_excludes_known(self):
        known = str_to_cards("AC 5H KS")
        pool = unseen_cards(known)
        assert len(pool) == DECK_SIZE - 3
        assert not set(pool) & set(known)

    def test_sorted_by_index(self):
        pool = unseen_cards(())
        assert [card.index for card in pool] == list(range(DECK_SIZE))


class TestDiscard:
    """弃牌选择测试"""

    HAND = str_to_cards("5C 5D 5H 5S AC 2D")

    def test_evaluates_all_fifteen(self):
        results = evaluate_discards(self.HAND, (), False, 5, GameRng(0))
        assert len(results) == 15
        assert [toss for toss, _ in results] == list(combinations(self.HAND, 2))

    def test_keeps_four_fives(self):
        keep, toss = choose_discard(self.HAND, (), False, 200, GameRng(1))
        assert set(keep) == set(str_to_cards("5C 5D 5H 5S"))
        assert set(toss) == set(str_to_cards("AC 2D"))

    def test_deterministic(self):
        hand = str_to_cards("3C 7D 9H JS QC KD")
        first = choose_discard(hand, (), True, 50, GameRng(42))
        second = choose_discard(hand, (), True, 50, GameRng(42))
        assert first == second

    def test_default_discount_from_config(self):
        default = evaluate_discards(self.HAND, (), False, 20, GameRng(3))
        explicit = evaluate_discards(
            self.HAND, (), False, 20, GameRng(3), crib_discount=SearchConfig().crib_discount,
        )
        assert default == explicit

    def test_wrong_hand_size(self):
        with pytest.raises(ValueError):
            evaluate_discards(self.HAND[:5], (), False, 5, GameRng(0))

    def test_zero_simulations(self):
        with pytest.raises(ValueError):
            evaluate_discards(self.HAND, (), False, 0, GameRng(0))

    def test_never_samples_seen(self):
        # 已知牌只剩 3 张未见也能抽样
        seen = [card for card in unseen_cards(self.HAND)][:43]
        results = evaluate_discards(self.HAND, seen, True, 3, GameRng(0))
        assert len(results) == 15


class TestGreedyPlay:
    """贪心出牌测试"""

    def test_prefers_points(self):
        card, points = greedy_play(str_to_cards("KC"), 10, str_to_cards("9D 5H"))
        assert card == c("5H")
        assert points == 2

    def test_tie_prefers_higher_total(self):
        card, points = greedy_play((), 0, str_to_cards("2C 3D"))
        assert card == c("3D")
        assert points == 0


def late_count_state():
    """轮到玩家，点数 21，手中 Q 可以打到 31"""
    stack = tuple(str_to_cards("KC 9D 2S"))
    return PeggingState(
        player_hand=tuple(str_to_cards("QH 3C")),
        ai_hand=tuple(str_to_cards("4H 5H")),
        turn=Seat.PLAYER,
        stack=stack,
        total=21,
        last_mover=Seat.AI,
        player_seen=tuple(str_to_cards("6C 7C AS")),
        ai_seen=tuple(str_to_cards("6D 7D AS")),
        played=stack,
    )


class TestRollout:
    """推演测试"""

    def test_thirty_one_ends_rollout(self):
        assert rollout(late_count_state(), c("QH"), str_to_cards("8S 8H")) == 3

    def test_opponent_fifteen_and_last_card(self):
        state = PeggingState.initial(str_to_cards("5C"), str_to_cards("KD"), dealer=Seat.AI)
        assert rollout(state, c("5C"), str_to_cards("KD")) == -3

    def test_last_card_to_me(self):
        state = PeggingState(
            player_hand=(c("AC"),),
            ai_hand=(),
            turn=Seat.PLAYER,
            stack=tuple(str_to_cards("KC QC")),
            total=20,
            last_mover=Seat.AI,
        )
        assert rollout(state, c("AC"), ()) == 1


class TestPeggingChoice:
    """出牌选择测试"""

    def test_takes_thirty_one(self):
        card, expected = choose_pegging_move(late_count_state(), 30, GameRng(0))
        assert card == c("QH")
        assert expected == 3.0

    def test_no_legal_play(self):
        state = PeggingState(
            player_hand=(c("KC"),),
            ai_hand=(c("QD"),),
            turn=Seat.PLAYER,
            stack=tuple(str_to_cards("9S JH 5S")),
            total=24,
        )
        assert choose_pegging_move(state, 30, GameRng(0)) == (None, 0.0)

    def test_deterministic(self):
        state = PeggingState.initial(
            str_to_cards("2C 5D 9H JS"), str_to_cards("3C 4D 8H QS"), dealer=Seat.AI,
        )
        first = evaluate_plays(state, 40, GameRng(9))
        second = evaluate_plays(state, 40, GameRng(9))
        assert first == second
        assert [card for card, _ in first] == str_to_cards("2C 5D 9H JS")

    def test_zero_simulations(self):
        with pytest.raises(ValueError):
            evaluate_plays(late_count_state(), 0, GameRng(0))
