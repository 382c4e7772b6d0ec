"""
手牌编排器集成测试.

使用真实的状态、下注轮和事件总线驱动完整手牌，
覆盖弃牌获胜、全押跟注、最小加注、边池、中止和事务回滚。
"""

import pytest

from holdem_sim.controller import HandOrchestrator
from holdem_sim.core import (
    ActionType, EventBus, EventType, GameConfiguration, GameStateError,
    IllegalActionError, Phase, RoundState, SeatStatus, SidePot
)
from holdem_sim.tests.conftest import make_orchestrator

pytestmark = pytest.mark.integration


class SeatRankEvaluator:
    """按座位指定牌力的评估器，用于控制摊牌结果."""

    def __init__(self, ranks):
        self.ranks = ranks
        self.orchestrator = None

    def evaluate(self, hole_cards, community_cards):
        for player in self.orchestrator.game_state.players:
            if player.hole_cards == list(hole_cards):
                return self.ranks[player.seat_id]
        raise AssertionError("unknown hole cards")


class FailingEvaluator:
    def evaluate(self, hole_cards, community_cards):
        raise RuntimeError("evaluator unavailable")


def _rigged(chips, ranks, **kwargs):
    evaluator = SeatRankEvaluator(ranks)
    orchestrator = make_orchestrator(chips, evaluator=evaluator, **kwargs)
    evaluator.orchestrator = orchestrator
    return orchestrator


def _passive_action(orchestrator):
    seat = orchestrator.current_player_id
    legal = orchestrator.legal_actions(seat)
    action = ActionType.CHECK if ActionType.CHECK in legal else ActionType.CALL
    return orchestrator.apply(seat, action)


def _play_passively(orchestrator):
    while not orchestrator.is_hand_over:
        _passive_action(orchestrator)


class TestHandStart:
    """测试手牌开始"""

    def test_first_hand_positions(self, three_player_table):
        assert three_player_table.start_hand() is True
        state = three_player_table.game_state

        assert state.hand_number == 1
        assert state.dealer_position == 2
        assert state.players[0].is_small_blind
        assert state.players[1].is_big_blind
        assert state.pot == 30
        assert state.current_bet == 20
        assert state.phase == Phase.PRE_FLOP
        assert three_player_table.current_player_id == 2
        assert all(len(p.hole_cards) == 2 for p in state.players)
        assert state.deck.cards_remaining == 46

    def test_heads_up_button_posts_small_blind_and_acts_first(self, heads_up_table):
        heads_up_table.start_hand()
        state = heads_up_table.game_state

        assert state.dealer_position == 0
        assert state.players[0].is_small_blind
        assert state.players[1].is_big_blind
        assert heads_up_table.current_player_id == 0

    def test_button_advances(self, three_player_table):
        three_player_table.start_hand()
        three_player_table.apply(2, "fold")
        three_player_table.apply(0, "fold")

        three_player_table.start_hand()
        state = three_player_table.game_state

        assert state.hand_number == 2
        assert state.dealer_position == 0
        assert state.players[1].is_small_blind
        assert state.players[2].is_big_blind
        assert three_player_table.current_player_id == 0

    def test_blinds_clamped_to_stack(self):
        orchestrator = make_orchestrator([1000, 5, 1000])
        orchestrator.start_hand()
        state = orchestrator.game_state

        assert state.players[1].status == SeatStatus.ALL_IN
        assert state.pot == 15
        assert state.current_bet == 10

    def test_cannot_start_twice(self, three_player_table):
        three_player_table.start_hand()
        with pytest.raises(GameStateError):
            three_player_table.start_hand()

    def test_from_configuration(self):
        config = GameConfiguration.create(human_players=1, bot_players=2, starting_chips=300, seed=4)
        orchestrator = HandOrchestrator(config=config)
        assert [p.chips for p in orchestrator.game_state.players] == [300, 300, 300]
        assert orchestrator.game_state.players[0].is_human


class TestScenarios:
    """测试典型牌局场景"""

    def test_basic_fold_out(self, three_player_table, event_bus):
        three_player_table.start_hand()

        assert three_player_table.apply(2, "fold") == RoundState.AWAITING_ACTION
        assert three_player_table.apply(0, ActionType.FOLD) == RoundState.HAND_OVER

        state = three_player_table.game_state
        result = three_player_table.last_result
        assert three_player_table.is_hand_over
        assert result.winner_ids == [1]
        assert result.pot_amount == 30
        assert result.showdown is False
        assert [p.chips for p in state.players] == [990, 1010, 1000]
        assert state.pot == 0
        assert state.phase == Phase.PAYOUT
        assert len(event_bus.get_event_history(EventType.HAND_OVER)) == 1

    def test_all_in_call(self):
        orchestrator = make_orchestrator([1000, 1000, 15])
        orchestrator.start_hand()
        state = orchestrator.game_state

        assert orchestrator.legal_actions(2) == {ActionType.FOLD, ActionType.CALL}
        orchestrator.apply(2, "call")

        short = state.players[2]
        assert short.chips == 0
        assert short.current_bet == 15
        assert short.status == SeatStatus.ALL_IN
        assert state.current_bet == 20

        orchestrator.apply(0, "call")
        orchestrator.apply(1, "check")

        assert state.phase == Phase.FLOP
        assert orchestrator.current_player_id == 0
        assert orchestrator.legal_actions(2) == set()
        with pytest.raises(IllegalActionError):
            orchestrator.apply(2, "check")

    def test_min_raise_enforcement(self, three_player_table):
        three_player_table.start_hand()
        state = three_player_table.game_state
        three_player_table.apply(2, "call")
        three_player_table.apply(0, "call")

        before = state.to_dict()
        with pytest.raises(IllegalActionError):
            three_player_table.apply(1, "raise", 25)
        assert state.to_dict() == before

        three_player_table.apply(1, "raise", 40)
        assert state.current_bet == 40
        assert state.last_raiser == 1
        assert three_player_table.current_player_id == 2
        assert not state.players[2].has_acted
        assert not state.players[0].has_acted

        three_player_table.apply(2, "call")
        assert three_player_table.apply(0, "call") == RoundState.ROUND_CLOSED
        assert state.phase == Phase.FLOP
        assert len(state.community_cards) == 3
        assert state.pot == 120

    def test_side_pots_at_showdown(self):
        orchestrator = _rigged([1000, 1000, 15], {0: 1, 1: 1, 2: 5})
        orchestrator.start_hand()
        orchestrator.apply(2, "call")
        orchestrator.apply(0, "call")
        orchestrator.apply(1, "check")
        _play_passively(orchestrator)

        result = orchestrator.last_result
        state = orchestrator.game_state
        assert result.showdown
        assert result.side_pots == [SidePot(45, [0, 1, 2]), SidePot(10, [0, 1])]
        assert result.winner_ids == [2]
        assert result.awards == {2: 45, 0: 5, 1: 5}
        assert [p.chips for p in state.players] == [985, 985, 45]
        assert len(state.community_cards) == 5

    def test_tie_splits_pot(self):
        orchestrator = _rigged([500, 500], {0: 3, 1: 3})
        orchestrator.start_hand()
        _play_passively(orchestrator)

        assert orchestrator.last_result.winner_ids == [0, 1]
        assert [p.chips for p in orchestrator.game_state.players] == [500, 500]

    def test_board_runs_out_when_everyone_is_all_in(self):
        orchestrator = _rigged([100, 300], {0: 2, 1: 1})
        orchestrator.start_hand()
        orchestrator.apply(0, "raise", 100)
        orchestrator.apply(1, "call")

        state = orchestrator.game_state
        assert orchestrator.is_hand_over
        assert len(state.community_cards) == 5
        assert [p.chips for p in state.players] == [200, 200]

    def test_elimination_and_game_over(self, event_bus):
        orchestrator = _rigged([20, 1000], {0: 1, 1: 2}, event_bus=event_bus)
        orchestrator.start_hand()
        orchestrator.apply(0, "call")

        state = orchestrator.game_state
        assert orchestrator.is_hand_over
        assert state.players[0].status == SeatStatus.OUT
        assert orchestrator.is_game_over
        assert len(event_bus.get_event_history(EventType.PLAYER_ELIMINATED)) == 1
        assert len(event_bus.get_event_history(EventType.GAME_OVER)) == 1
        assert orchestrator.start_hand() is False


class TestAbortHand:
    """测试中止手牌"""

    def test_void_refunds_contributions(self, three_player_table, event_bus):
        three_player_table.start_hand()
        three_player_table.apply(2, "call")

        result = three_player_table.abort_hand()

        assert result.aborted
        assert result.winner_ids == []
        assert result.awards == {0: 10, 1: 20, 2: 20}
        assert [p.chips for p in three_player_table.game_state.players] == [1000, 1000, 1000]
        assert three_player_table.is_hand_over
        assert len(event_bus.get_event_history(EventType.HAND_ABORTED)) == 1

    def test_forfeit_to_remaining_seat(self, three_player_table):
        three_player_table.start_hand()
        result = three_player_table.abort_hand(remaining_seat=1)

        assert result.winner_ids == [1]
        assert [p.chips for p in three_player_table.game_state.players] == [990, 1010, 1000]

    def test_remaining_seat_must_be_in_hand(self, three_player_table):
        three_player_table.start_hand()
        three_player_table.apply(2, "fold")
        with pytest.raises(GameStateError):
            three_player_table.abort_hand(remaining_seat=2)
        assert not three_player_table.is_hand_over

    def test_no_hand_in_progress(self, three_player_table):
        with pytest.raises(GameStateError):
            three_player_table.abort_hand()


class TestActionHandling:
    """测试行动提交和回滚"""

    def test_rejects_when_no_hand(self, three_player_table):
        with pytest.raises(GameStateError):
            three_player_table.apply(0, "check")

    def test_rejects_unknown_action(self, three_player_table):
        three_player_table.start_hand()
        with pytest.raises(IllegalActionError):
            three_player_table.apply(2, "bet", 40)

    def test_rejects_out_of_turn(self, three_player_table):
        three_player_table.start_hand()
        with pytest.raises(IllegalActionError):
            three_player_table.apply(0, "fold")
        assert three_player_table.game_state.players[0].status == SeatStatus.ACTIVE
        assert three_player_table.legal_actions(0) == set()

    def test_rejected_action_changes_nothing(self, three_player_table):
        three_player_table.start_hand()
        state = three_player_table.game_state
        players = list(state.players)
        events_before = list(state.events)
        before = state.to_dict()

        with pytest.raises(IllegalActionError, match="Cannot check"):
            three_player_table.apply(2, "check")

        assert state.events == events_before
        assert state.to_dict() == before
        assert all(live is held for live, held in zip(state.players, players))

        three_player_table.apply(2, "call")
        three_player_table.apply(0, "fold")
        assert players[0].status == SeatStatus.FOLDED

    def test_failure_mid_transition_rolls_back(self):
        orchestrator = make_orchestrator([500, 500], evaluator=FailingEvaluator())
        orchestrator.start_hand()
        state = orchestrator.game_state

        while state.phase != Phase.RIVER or orchestrator.current_player_id != 0:
            _passive_action(orchestrator)

        deck_before = state.deck.remaining_cards()
        seat_zero = state.players[0]
        with pytest.raises(RuntimeError):
            orchestrator.apply(0, "check")

        state = orchestrator.game_state
        assert state.players[0] is seat_zero
        assert state.phase == Phase.RIVER
        assert orchestrator.current_player_id == 0
        assert not orchestrator.is_hand_over
        assert state.pot == 40
        assert [p.chips for p in state.players] == [480, 480]
        assert state.deck.remaining_cards() == deck_before

    def test_viewer_snapshot(self, three_player_table):
        three_player_table.start_hand()
        snapshot = three_player_table.get_snapshot(viewer_seat=0)
        assert len(snapshot.get_player_by_seat(0).hole_cards) == 2
        assert snapshot.get_player_by_seat(1).hole_cards == []


class TestBotPlay:
    """测试机器人驱动"""

    def test_play_hand_conserves_chips(self, three_player_table):
        result = three_player_table.play_hand()
        state = three_player_table.game_state

        assert result is not None
        assert three_player_table.is_hand_over
        assert state.total_chips() == 3000
        assert state.pot == 0
        assert sum(result.awards.values()) == result.pot_amount

    def test_process_bot_action_skips_humans(self):
        config = GameConfiguration.create(human_players=1, bot_players=1, seed=2)
        orchestrator = HandOrchestrator(config=config)
        orchestrator.start_hand()

        assert orchestrator.current_player_id == 0
        assert orchestrator.process_bot_action() is False
        with pytest.raises(GameStateError):
            orchestrator.play_hand()

    def test_events_narrate_the_hand(self, three_player_table, event_bus):
        three_player_table.play_hand()
        types = [e.event_type for e in event_bus.get_event_history()]

        assert types[0] == EventType.HAND_STARTED
        assert EventType.BLINDS_POSTED in types
        assert EventType.PLAYER_ACTION in types
        assert EventType.HAND_OVER in types
        assert types.index(EventType.BLINDS_POSTED) < types.index(EventType.PLAYER_ACTION)

    def test_orchestrators_do_not_share_buses(self):
        first = make_orchestrator([100, 100], event_bus=EventBus())
        second = make_orchestrator([100, 100], event_bus=EventBus())
        first.start_hand()
        assert second.event_bus.get_event_history() == []
