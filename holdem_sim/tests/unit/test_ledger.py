"""
下注账本单元测试.

覆盖合法行动查询、最小加注、全押跟注截断以及拒绝行动时状态不变。
"""

import pytest

from holdem_sim.core import ActionType, BettingLedger, IllegalActionError, SeatStatus
from holdem_sim.tests.conftest import make_state


def _facing_bet(chips, current_bet=20):
    """座位1已下注 current_bet，座位0面对该下注."""
    state = make_state(chips)
    state.transfer_to_pot(state.players[1], current_bet)
    state.current_bet = current_bet
    return state


class TestLegalActions:
    """测试合法行动查询"""

    def test_nothing_to_call(self):
        state = make_state([1000, 1000])
        legal = BettingLedger().legal_actions(state.players[0], state)
        assert legal == {ActionType.FOLD, ActionType.CHECK, ActionType.RAISE}

    def test_facing_a_bet(self):
        state = _facing_bet([1000, 1000])
        legal = BettingLedger().legal_actions(state.players[0], state)
        assert legal == {ActionType.FOLD, ActionType.CALL, ActionType.RAISE}

    def test_short_stack_cannot_raise(self):
        state = _facing_bet([15, 1000])
        legal = BettingLedger().legal_actions(state.players[0], state)
        assert legal == {ActionType.FOLD, ActionType.CALL}

    @pytest.mark.parametrize("status", [SeatStatus.FOLDED, SeatStatus.ALL_IN, SeatStatus.OUT])
    def test_players_who_cannot_act(self, status):
        state = make_state([1000, 1000])
        state.players[0].status = status
        assert BettingLedger().legal_actions(state.players[0], state) == set()

    def test_raise_bounds(self):
        state = _facing_bet([300, 1000])
        player = state.players[0]
        assert BettingLedger.call_amount(player, state) == 20
        assert BettingLedger.min_raise_to(state) == 40
        assert BettingLedger.max_raise_to(player) == 300


class TestValidate:
    """测试行动校验"""

    def test_check_facing_bet_rejected(self):
        state = _facing_bet([1000, 1000])
        with pytest.raises(IllegalActionError, match="Cannot check when there is a bet of 20"):
            BettingLedger().validate(state.players[0], ActionType.CHECK, 0, state)

    def test_call_without_bet_rejected(self):
        state = make_state([1000, 1000])
        with pytest.raises(IllegalActionError):
            BettingLedger().validate(state.players[0], ActionType.CALL, 0, state)

    def test_min_raise_enforced(self):
        state = _facing_bet([1000, 1000])
        ledger = BettingLedger()
        with pytest.raises(IllegalActionError, match="less than minimum raise 40"):
            ledger.validate(state.players[0], ActionType.RAISE, 25, state)
        ledger.validate(state.players[0], ActionType.RAISE, 40, state)

    def test_raise_must_exceed_current_bet(self):
        state = _facing_bet([1000, 1000])
        with pytest.raises(IllegalActionError, match="does not exceed"):
            BettingLedger().validate(state.players[0], ActionType.RAISE, 20, state)

    def test_raise_above_stack_rejected(self):
        state = _facing_bet([100, 1000])
        with pytest.raises(IllegalActionError, match="exceeds"):
            BettingLedger().validate(state.players[0], ActionType.RAISE, 101, state)

    def test_short_all_in_raise_allowed(self):
        """全押加注即使不足最小加注额也合法"""
        state = _facing_bet([30, 1000])
        BettingLedger().validate(state.players[0], ActionType.RAISE, 30, state)


class TestApply:
    """测试行动执行"""

    def test_call_moves_chips(self):
        state = _facing_bet([1000, 1000])
        moved = BettingLedger().apply(state.players[0], ActionType.CALL, 0, state)
        assert moved == 20
        assert state.players[0].chips == 980
        assert state.pot == 40

    def test_all_in_call_is_clamped(self):
        state = _facing_bet([15, 1000])
        player = state.players[0]
        moved = BettingLedger().apply(player, ActionType.CALL, 0, state)
        assert moved == 15
        assert player.chips == 0
        assert player.status == SeatStatus.ALL_IN
        assert state.current_bet == 20

    def test_raise_sets_current_bet_and_raiser(self):
        state = _facing_bet([1000, 1000])
        moved = BettingLedger().apply(state.players[0], ActionType.RAISE, 60, state)
        assert moved == 60
        assert state.current_bet == 60
        assert state.last_raiser == 0
        assert state.players[0].last_action_type == ActionType.RAISE

    def test_fold(self):
        state = _facing_bet([1000, 1000])
        BettingLedger().apply(state.players[0], ActionType.FOLD, 0, state)
        assert state.players[0].status == SeatStatus.FOLDED
        assert state.players[0].chips == 1000

    def test_rejected_action_leaves_state_untouched(self):
        state = _facing_bet([1000, 1000])
        before = state.to_dict()
        with pytest.raises(IllegalActionError):
            BettingLedger().apply(state.players[0], ActionType.RAISE, 25, state)
        assert state.to_dict() == before
