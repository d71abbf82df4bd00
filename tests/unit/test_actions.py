"""动作与动作生成器测试"""
import pytest

from core.actions import Action, ActionType, ActionGenerator
from core.cards import str_to_card, str_to_cards


class TestAction:
    """Action 测试"""

    def test_discard(self):
        action = Action.discard(str_to_card("5C"), str_to_card("KD"))
        assert action.action_type == ActionType.DISCARD
        assert len(action) == 2
        assert str(action) == "Discard 5♣ K♦"

    def test_play(self):
        action = Action.play(str_to_card("7H"))
        assert action.card == str_to_card("7H")
        assert not action.is_go
        assert str(action) == "Play 7♥"

    def test_go(self):
        action = Action.go()
        assert action.is_go
        assert len(action) == 0
        assert str(action) == "Go"

    def test_card_on_non_play(self):
        with pytest.raises(ValueError):
            Action.go().card

    def test_hashable(self):
        assert Action.go() == Action.go()
        assert len({Action.play(str_to_card("7H")), Action.play(str_to_card("7H"))}) == 1


class TestActionGenerator:
    """ActionGenerator 测试"""

    def test_fifteen_discards(self):
        hand = str_to_cards("AC 2D 3H 4S 5C 6D")
        discards = ActionGenerator(hand).gen_discards()
        assert len(discards) == 15
        assert len(set(discards)) == 15
        assert discards[0].cards == (hand[0], hand[1])
        assert discards[-1].cards == (hand[4], hand[5])

    def test_plays(self):
        hand = str_to_cards("KC 5D AH")
        plays = ActionGenerator(hand).gen_plays(25)
        assert [a.card for a in plays] == str_to_cards("5D AH")

    def test_go_when_stuck(self):
        plays = ActionGenerator(str_to_cards("KC QD")).gen_plays(25)
        assert plays == [Action.go()]

    def test_go_with_empty_hand(self):
        assert ActionGenerator(()).gen_plays(0) == [Action.go()]
