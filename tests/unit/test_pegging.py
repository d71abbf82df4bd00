"""出牌状态机测试"""
from dataclasses import replace

import pytest

from core.cards import new_deck, str_to_card, str_to_cards
from core.errors import CribbageError, IllegalPlay, InvalidGo
from core.pegging import Seat, PeggingState, legal_plays, apply_play, declare_go
from core.rng import GameRng


def c(text):
    return str_to_card(text)


class TestLegalPlays:
    """legal_plays 测试"""

    def test_filters_over_31(self):
        hand = str_to_cards("KC 5D AH")
        assert legal_plays(hand, 25) == (c("5D"), c("AH"))
        assert legal_plays(hand, 21) == tuple(hand)
        assert legal_plays(hand, 31) == ()

    def test_empty_hand(self):
        assert legal_plays((), 0) == ()


class TestSeat:
    """Seat 测试"""

    def test_other(self):
        assert Seat.PLAYER.other is Seat.AI
        assert Seat.AI.other is Seat.PLAYER


class TestApplyPlay:
    """apply_play 测试"""

    def test_pone_leads(self):
        state = PeggingState.initial(str_to_cards("KC"), str_to_cards("QD"), dealer=Seat.AI)
        assert state.turn is Seat.PLAYER

    def test_play_updates_state(self):
        state = PeggingState.initial(str_to_cards("7C 2C"), str_to_cards("8D 3D"), dealer=Seat.AI)
        state, points = apply_play(state, c("7C"), Seat.PLAYER)
        assert points == 0
        assert state.total == 7
        assert state.stack == (c("7C"),)
        assert state.player_hand == (c("2C"),)
        assert state.turn is Seat.AI
        assert state.last_mover is Seat.PLAYER

        state, points = apply_play(state, c("8D"), Seat.AI)
        assert points == 2
        assert state.total == 15
        assert state.played == (c("7C"), c("8D"))

    def test_thirty_one_resets_count(self):
        state = PeggingState.initial(
            str_to_cards("5C 6C 2H"), str_to_cards("10D KD 3S"), dealer=Seat.AI,
        )
        state, _ = apply_play(state, c("5C"), Seat.PLAYER)
        state, points = apply_play(state, c("10D"), Seat.AI)
        assert points == 2
        state, _ = apply_play(state, c("6C"), Seat.PLAYER)
        state, points = apply_play(state, c("KD"), Seat.AI)

        assert points == 2
        assert state.total == 0
        assert state.stack == ()
        assert state.turn is Seat.PLAYER
        assert not state.player_passed and not state.ai_passed

        state, _ = apply_play(state, c("2H"), Seat.PLAYER)
        state, points = apply_play(state, c("3S"), Seat.AI)
        # 最后一张牌 1 分
        assert points == 1
        assert state.is_complete

    def test_last_card_at_31_scores_only_31(self):
        state = PeggingState(
            player_hand=(),
            ai_hand=(c("AD"),),
            turn=Seat.AI,
            stack=str_to_cards("KC QD JH"),
            total=30,
            last_mover=Seat.PLAYER,
        )
        state, points = apply_play(state, c("AD"), Seat.AI)
        assert points == 2
        assert state.is_complete

    def test_sequences_stored_as_tuples(self):
        state = PeggingState(
            player_hand=str_to_cards("KC"),
            ai_hand=str_to_cards("AD 2D"),
            turn=Seat.AI,
            stack=str_to_cards("9C 8H"),
            total=17,
            player_seen=str_to_cards("3H"),
            ai_seen=str_to_cards("4H"),
            played=str_to_cards("9C 8H"),
        )
        for cards in (state.player_hand, state.ai_hand, state.stack,
                      state.player_seen, state.ai_seen, state.played):
            assert isinstance(cards, tuple)

        state, points = apply_play(state, c("AD"), Seat.AI)
        assert state.stack == (c("9C"), c("8H"), c("AD"))
        assert state.played == (c("9C"), c("8H"), c("AD"))
        assert hash(state) == hash(replace(state))

    def test_over_31(self):
        state = PeggingState(
            player_hand=(c("KC"),),
            ai_hand=(c("2S"),),
            turn=Seat.PLAYER,
            stack=str_to_cards("QD JH 5S"),
            total=25,
        )
        with pytest.raises(IllegalPlay):
            apply_play(state, c("KC"), Seat.PLAYER)

    def test_card_not_in_hand(self):
        state = PeggingState.initial(str_to_cards("KC"), str_to_cards("QD"), dealer=Seat.AI)
        with pytest.raises(IllegalPlay):
            apply_play(state, c("QD"), Seat.PLAYER)

    def test_not_your_turn(self):
        state = PeggingState.initial(str_to_cards("KC"), str_to_cards("QD"), dealer=Seat.AI)
        with pytest.raises(IllegalPlay):
            apply_play(state, c("QD"), Seat.AI)

    def test_rejection_leaves_state(self):
        state = PeggingState.initial(str_to_cards("KC"), str_to_cards("QD"), dealer=Seat.AI)
        snapshot = replace(state)
        with pytest.raises(CribbageError):
            apply_play(state, c("QD"), Seat.AI)
        assert state == snapshot

    def test_illegal_play_is_value_error(self):
        assert issubclass(IllegalPlay, ValueError)


class TestDeclareGo:
    """declare_go 测试"""

    def test_go_with_legal_play(self):
        state = PeggingState.initial(str_to_cards("KC"), str_to_cards("QD"), dealer=Seat.AI)
        with pytest.raises(InvalidGo):
            declare_go(state, Seat.PLAYER)

    def test_go_not_your_turn(self):
        state = PeggingState(
            player_hand=(c("KC"),),
            ai_hand=(c("QD"),),
            turn=Seat.AI,
            stack=str_to_cards("QS JH 5S"),
            total=25,
        )
        with pytest.raises(InvalidGo):
            declare_go(state, Seat.PLAYER)

    def test_go_and_last_card(self):
        """对手出完后宣告 Go，最后出牌方得 1 分，然后剩余手牌打完得最后一张 1 分"""
        state = PeggingState.initial(str_to_cards("KC 9D"), str_to_cards("JH 3S"), dealer=Seat.AI)

        state, _ = apply_play(state, c("KC"), Seat.PLAYER)
        state, _ = apply_play(state, c("JH"), Seat.AI)
        state, points = apply_play(state, c("9D"), Seat.PLAYER)
        assert points == 0
        assert state.total == 29
        assert state.turn is Seat.AI

        state, scorer = declare_go(state, Seat.AI)
        assert scorer is Seat.PLAYER
        assert state.total == 0
        assert state.stack == ()
        assert state.turn is Seat.AI

        state, points = apply_play(state, c("3S"), Seat.AI)
        assert points == 1
        assert state.is_complete

    def test_single_go_passes_turn(self):
        state = PeggingState(
            player_hand=(c("KC"),),
            ai_hand=(c("2S"), c("AH")),
            turn=Seat.PLAYER,
            stack=str_to_cards("QD JH 5S"),
            total=25,
            last_mover=Seat.AI,
        )
        state, scorer = declare_go(state, Seat.PLAYER)
        assert scorer is None
        assert state.player_passed
        assert state.turn is Seat.AI
        assert state.total == 25

        # 对手已 Go，AI 继续出
        state, points = apply_play(state, c("2S"), Seat.AI)
        assert points == 0
        assert state.total == 27
        assert state.turn is Seat.AI

        state, scorer = declare_go(state, Seat.AI)
        assert scorer is Seat.AI
        assert state.total == 0
        assert state.turn is Seat.PLAYER

    def test_go_settled_when_mover_empties_hand(self):
        """对手已 Go 时出完最后一张牌立即得 Go 分，不需要再宣告 Go"""
        state = PeggingState(
            player_hand=(c("KC"),),
            ai_hand=(c("2S"),),
            turn=Seat.AI,
            stack=str_to_cards("QD JH 5S"),
            total=25,
            player_passed=True,
            last_mover=Seat.AI,
        )
        state, points = apply_play(state, c("2S"), Seat.AI)
        assert points == 1
        assert state.total == 0
        assert state.stack == ()
        assert state.turn is Seat.PLAYER
        assert not state.player_passed and not state.ai_passed
        assert state.legal_plays() == (c("KC"),)

        state, points = apply_play(state, c("KC"), Seat.PLAYER)
        assert points == 1
        assert state.is_complete

    def test_go_settled_keeps_pair_points(self):
        state = PeggingState(
            player_hand=(c("KC"),),
            ai_hand=(c("3S"),),
            turn=Seat.AI,
            stack=str_to_cards("QD 10H 3H"),
            total=23,
            player_passed=True,
            last_mover=Seat.AI,
        )
        state, points = apply_play(state, c("3S"), Seat.AI)
        # 对子 2 分 + Go 1 分
        assert points == 3
        assert state.turn is Seat.PLAYER

    def test_complete_state_rejects(self):
        state = PeggingState(player_hand=(), ai_hand=(), turn=Seat.PLAYER)
        with pytest.raises(InvalidGo):
            declare_go(state, Seat.PLAYER)
        with pytest.raises(IllegalPlay):
            apply_play(state, c("KC"), Seat.PLAYER)


class TestPeggingInvariants:
    """出牌不变量"""

    @pytest.mark.parametrize("seed", range(10))
    def test_count_never_exceeds_31(self, seed):
        rng = GameRng(seed)
        deck = new_deck(rng)
        state = PeggingState.initial(deck[:4], deck[4:8], dealer=Seat.PLAYER)
        steps = 0

        while not state.is_complete:
            seat = state.turn
            plays = state.legal_plays()
            if plays:
                card = plays[int(rng() * len(plays))]
                state, points = apply_play(state, card, seat)
                assert points >= 0
            else:
                state, _ = declare_go(state, seat)
            assert 0 <= state.total <= 31
            assert state.total == sum(card.value for card in state.stack)
            steps += 1
            assert steps < 50

        assert len(state.played) == 8

    def test_seen_includes_played(self):
        state = PeggingState.initial(
            str_to_cards("KC 2C"), str_to_cards("QD 3D"), dealer=Seat.AI,
            player_seen=str_to_cards("4H 5H 6S"),
        )
        state, _ = apply_play(state, c("KC"), Seat.PLAYER)
        assert set(state.seen(Seat.PLAYER)) == set(str_to_cards("4H 5H 6S KC"))
        assert state.seen(Seat.AI) == (c("KC"),)
