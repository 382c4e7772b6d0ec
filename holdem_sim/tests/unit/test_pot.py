"""
边池计算与分配单元测试.
"""

import pytest

from holdem_sim.core import SidePot, calculate_side_pots, distribute_pots, split_pot


class TestCalculateSidePots:
    """测试边池计算"""

    def test_equal_contributions_single_pot(self):
        pots = calculate_side_pots({0: 100, 1: 100, 2: 100}, [0, 1, 2])
        assert len(pots) == 1
        assert pots[0].amount == 300
        assert pots[0].eligible_players == [0, 1, 2]

    def test_layered_all_ins(self):
        pots = calculate_side_pots({0: 25, 1: 50, 2: 100}, [0, 1, 2])
        assert [(p.amount, p.eligible_players) for p in pots] == [
            (75, [0, 1, 2]),
            (50, [1, 2]),
            (50, [2]),
        ]

    def test_folded_chips_count_but_not_eligible(self):
        pots = calculate_side_pots({0: 40, 1: 20, 2: 40}, [0, 2])
        assert len(pots) == 1
        assert pots[0].amount == 100
        assert pots[0].eligible_players == [0, 2]

    def test_folded_excess_merged_into_last_pot(self):
        pots = calculate_side_pots({0: 15, 1: 20, 2: 20}, [0])
        assert sum(p.amount for p in pots) == 55
        assert pots[-1].eligible_players == [0]

    def test_side_pot_validation(self):
        with pytest.raises(ValueError):
            SidePot(-1, [0])
        with pytest.raises(ValueError):
            SidePot(10, [])
        with pytest.raises(ValueError):
            SidePot(10, [1, 1])


class TestSplitPot:
    """测试平分底池和余数分配"""

    def test_even_split(self):
        assert split_pot(100, [0, 2], dealer_position=0, num_seats=3) == {0: 50, 2: 50}

    def test_remainder_goes_left_of_button_first(self):
        shares = split_pot(101, [0, 2], dealer_position=0, num_seats=3)
        assert shares == {2: 51, 0: 50}

    def test_remainder_wraps_clockwise(self):
        shares = split_pot(32, [0, 1, 3], dealer_position=1, num_seats=4)
        # 顺时针从庄家左侧: 3, 0, 1
        assert shares == {3: 11, 0: 11, 1: 10}
        assert sum(shares.values()) == 32

    def test_no_winners(self):
        with pytest.raises(ValueError):
            split_pot(10, [], dealer_position=0, num_seats=2)


class TestDistributePots:
    """测试按牌力分配"""

    def test_best_rank_takes_each_pot(self):
        pots = [SidePot(75, [0, 1, 2]), SidePot(50, [1, 2])]
        awards = distribute_pots(pots, {0: 9, 1: 5, 2: 7}, dealer_position=0, num_seats=3)
        assert awards == {0: 75, 2: 50}

    def test_tie_splits(self):
        pots = [SidePot(41, [0, 1])]
        awards = distribute_pots(pots, {0: 3, 1: 3}, dealer_position=1, num_seats=2)
        assert awards == {0: 21, 1: 20}

    def test_uncontested_pot_needs_no_rank(self):
        pots = [SidePot(40, [0, 1]), SidePot(30, [1])]
        awards = distribute_pots(pots, {0: 2, 1: 1}, dealer_position=0, num_seats=2)
        assert awards == {0: 40, 1: 30}
