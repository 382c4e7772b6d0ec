"""
下注轮状态机单元测试.
"""

import pytest

from holdem_sim.core import (
    ActionType, BettingRound, IllegalActionError, Phase, RoundState, SeatStatus
)
from holdem_sim.tests.conftest import make_state


def _flop_state(chips, dealer_position=0):
    return make_state(chips, phase=Phase.FLOP, dealer_position=dealer_position)


class TestTurnOrder:
    """测试行动顺序"""

    def test_first_actor_is_left_of_dealer(self):
        state = _flop_state([1000] * 4, dealer_position=1)
        status = BettingRound().start(state, state.dealer_position)
        assert status == RoundState.AWAITING_ACTION
        assert state.current_player == 2

    def test_clockwise_with_wraparound(self):
        state = _flop_state([1000] * 4, dealer_position=1)
        betting_round = BettingRound()
        betting_round.start(state, 1)

        order = []
        while state.round_state == RoundState.AWAITING_ACTION:
            order.append(state.current_player)
            betting_round.apply(state, state.current_player, ActionType.CHECK)

        assert order == [2, 3, 0, 1]
        assert state.round_state == RoundState.ROUND_CLOSED
        assert state.current_player is None

    def test_skips_folded_and_all_in_seats(self):
        state = _flop_state([1000] * 4)
        state.players[1].status = SeatStatus.FOLDED
        state.players[2].status = SeatStatus.ALL_IN
        betting_round = BettingRound()
        betting_round.start(state, 0)
        assert state.current_player == 3

    def test_out_of_turn_rejected(self):
        state = _flop_state([1000] * 3)
        betting_round = BettingRound()
        betting_round.start(state, 0)
        with pytest.raises(IllegalActionError, match="Not player 2's turn, current player: 1"):
            betting_round.apply(state, 2, ActionType.CHECK)
        assert state.current_player == 1

    def test_legal_actions_empty_when_not_your_turn(self):
        state = _flop_state([1000] * 3)
        betting_round = BettingRound()
        betting_round.start(state, 0)
        assert betting_round.legal_actions(state, 2) == set()
        assert ActionType.CHECK in betting_round.legal_actions(state, 1)


class TestRoundClosure:
    """测试下注轮关闭条件"""

    def test_raise_reopens_action(self):
        state = _flop_state([1000] * 3)
        betting_round = BettingRound()
        betting_round.start(state, 0)

        betting_round.apply(state, 1, ActionType.CHECK)
        betting_round.apply(state, 2, ActionType.RAISE, 40)
        assert state.players[1].has_acted is False
        assert state.current_player == 0

        betting_round.apply(state, 0, ActionType.CALL)
        assert state.current_player == 1
        status = betting_round.apply(state, 1, ActionType.CALL)

        assert status == RoundState.ROUND_CLOSED
        assert state.pot == 120
        assert all(p.current_bet == 40 for p in state.players)

    def test_hand_over_when_one_player_remains(self):
        state = _flop_state([1000] * 3)
        betting_round = BettingRound()
        betting_round.start(state, 0)

        betting_round.apply(state, 1, ActionType.RAISE, 20)
        betting_round.apply(state, 2, ActionType.FOLD)
        status = betting_round.apply(state, 0, ActionType.FOLD)

        assert status == RoundState.HAND_OVER
        assert state.current_player is None

    def test_actions_rejected_after_close(self):
        state = _flop_state([1000, 1000])
        betting_round = BettingRound()
        betting_round.start(state, 0)
        betting_round.apply(state, 1, ActionType.CHECK)
        betting_round.apply(state, 0, ActionType.CHECK)
        with pytest.raises(IllegalActionError):
            betting_round.apply(state, 1, ActionType.CHECK)

    def test_close_resets_round_fields(self):
        state = _flop_state([1000] * 3)
        betting_round = BettingRound()
        betting_round.start(state, 0)
        betting_round.apply(state, 1, ActionType.RAISE, 40)

        betting_round.close(state)

        assert state.current_bet == 0
        assert state.last_raiser is None
        assert all(p.current_bet == 0 and not p.has_acted for p in state.players)
        assert state.pot == 40
        assert state.players[1].total_bet_this_hand == 40

    def test_lone_stack_against_all_ins_does_not_act(self):
        """其他玩家都已全押且无需跟注时，本轮直接结束"""
        state = _flop_state([1000, 1000, 1000])
        state.players[1].status = SeatStatus.ALL_IN
        state.players[2].status = SeatStatus.ALL_IN

        status = BettingRound().start(state, 0)

        assert status == RoundState.ROUND_CLOSED
        assert BettingRound.betting_complete_for_hand(state)

    def test_preflop_keeps_blind_commitments(self):
        state = make_state([1000] * 3, phase=Phase.PRE_FLOP, dealer_position=2)
        state.transfer_to_pot(state.players[0], 10)
        state.transfer_to_pot(state.players[1], 20)
        state.current_bet = 20

        BettingRound().start(state, 1, keep_commitments=True)

        assert state.current_player == 2
        assert state.current_bet == 20
        assert state.players[1].current_bet == 20
