"""Tests for three-pool block reward allocation."""

import pytest
from fractions import Fraction

from minapay.payout.reward_engine.services.payout_calculation_service import (
    PayoutCalculationService,
    to_rate,
    pool_weighting,
    floor_term,
)
from minapay.payout.reward_engine.models import ShareClass
from minapay.payout.reward_engine.exceptions import (
    WinnerResolutionError,
    PoolInvarianceError,
    UnknownShareClassError,
)


@pytest.fixture
def calculator():
    return PayoutCalculationService()


def amounts(transactions):
    return {t.public_key: t.amount for t in transactions}


class TestRateHelpers:
    """Test commission rate conversion and pool arithmetic helpers."""

    def test_float_rate_is_exact(self):
        """0.05 should mean exactly 5/100, not its binary approximation."""
        assert to_rate(0.05) == Fraction(1, 20)
        assert to_rate("0.25") == Fraction(1, 4)
        assert to_rate(1) == 1

    def test_rejects_rate_outside_unit_interval(self):
        with pytest.raises(ValueError):
            to_rate(1.5)
        with pytest.raises(ValueError):
            to_rate(-0.01)

    def test_empty_pool_has_zero_weighting(self):
        assert pool_weighting(0, 0) == 0
        assert pool_weighting(1, 4) == Fraction(1, 4)

    def test_floor_term_rounds_down(self):
        assert floor_term(Fraction(0), Fraction(10), Fraction(1, 3)) == 3
        assert floor_term(Fraction(0), Fraction(-5), Fraction(1, 2)) == -3


class TestLockedWinner:
    """The winner's stake is still time-locked: the whole coinbase goes to the NPS pool."""

    def test_two_equal_common_stakers_split_evenly(self, calculator, make_block, make_staker):
        """Coinbase and fee transfer are shared equally between equal delegations."""
        stakers = [make_staker("B62qwinner", 1000), make_staker("B62qother", 1000)]
        block = make_block(coinbase=720000000000, feetransfertoreceiver=10000000)

        transactions, details, blocks_included, total = calculator.get_payouts(
            [block], stakers, 2000, 0
        )

        assert amounts(transactions) == {
            "B62qwinner": 360005000000,
            "B62qother": 360005000000,
        }
        assert total == 720010000000
        assert blocks_included == [block.blockheight]
        assert len(details) == 2
        assert details[0].total_rewards_supercharged_pool == 0
        assert details[0].total_rewards_common_pool == 10000000

    def test_commission_is_withheld(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qwinner", 1000)]
        block = make_block(coinbase=1000, feetransfertoreceiver=0)

        transactions, _, _, _ = calculator.get_payouts([block], stakers, 1000, "0.05")

        assert amounts(transactions) == {"B62qwinner": 950}

    def test_each_term_is_floored(self, calculator, make_block, make_staker):
        """Remainders from flooring stay with the pool operator."""
        stakers = [make_staker("B62qwinner", 1), make_staker("B62qb", 1), make_staker("B62qc", 1)]
        block = make_block(coinbase=10, feetransfertoreceiver=0)

        transactions, _, _, total = calculator.get_payouts([block], stakers, 3, 0)

        assert set(amounts(transactions).values()) == {3}
        assert total == 9

    def test_floored_terms_never_exceed_each_pool_reward(self, calculator, make_block, make_staker):
        """Per pool, the floored shares of all stakers sum to at most the pool's reward."""
        balances = [7, 13, 1, 999, 250, 3]
        stakers = [make_staker("B62qwinner", balances[0], untimed_after_slot=0)] + [
            make_staker(f"B62q{i}", balance, untimed_after_slot=(i % 2) * 10 ** 9)
            for i, balance in enumerate(balances[1:])
        ]
        block = make_block(coinbase=720000000001, feetransfertoreceiver=12345677)

        _, details, _, _ = calculator.get_payouts([block], stakers, sum(balances), 0)

        pools = [
            ("total_rewards_nps_pool", "effective_nps_pool_weighting"),
            ("total_rewards_common_pool", "effective_common_pool_weighting"),
            ("total_rewards_supercharged_pool", "effective_supercharged_pool_weighting"),
        ]
        paid_by_pool = []
        for reward_field, weighting_field in pools:
            pool_reward = getattr(details[0], reward_field)
            paid = sum(floor_term(Fraction(0), pool_reward, getattr(d, weighting_field)) for d in details)
            assert paid <= pool_reward
            assert pool_reward - paid < len(stakers)
            paid_by_pool.append(paid)

        assert sum(d.payout for d in details) == sum(paid_by_pool)
        assert details[0].total_rewards_supercharged_pool > 0

    def test_negative_common_pool_floors_toward_negative_infinity(self, calculator, make_block, make_staker):
        """Fees paid out of the coinbase can make the common pool negative."""
        stakers = [make_staker("B62qwinner", 1), make_staker("B62qb", 1)]
        block = make_block(coinbase=10, feetransfertoreceiver=0, feetransferfromcoinbase=5)

        transactions, details, _, _ = calculator.get_payouts([block], stakers, 2, 0)

        # 5 from the NPS pool, floor(-2.5) from the common pool
        assert amounts(transactions) == {"B62qwinner": 2, "B62qb": 2}
        assert details[0].total_rewards_common_pool == -5


class TestUnlockedWinner:
    """The winner's stake is unlocked: half the coinbase goes to the supercharged pool."""

    def test_supercharged_pool_goes_to_unlocked_common_stakers(self, calculator, make_block, make_staker):
        stakers = [
            make_staker("B62qwinner", 1000, untimed_after_slot=0),
            make_staker("B62qlocked", 1000),
        ]
        block = make_block(coinbase=720000000000, feetransfertoreceiver=10000000)

        transactions, details, _, total = calculator.get_payouts([block], stakers, 2000, 0)

        assert amounts(transactions) == {
            "B62qwinner": 540005000000,
            "B62qlocked": 180005000000,
        }
        assert total == 720010000000

        winner_detail = details[0]
        assert winner_detail.total_rewards_nps_pool == 360000000000
        assert winner_detail.total_rewards_supercharged_pool == 360000000000
        assert winner_detail.effective_supercharged_pool_weighting == 1
        assert details[1].effective_supercharged_pool_stakes == 0

    def test_untimed_at_current_slot_counts_as_unlocked(self, calculator, make_block, make_staker):
        block = make_block(coinbase=100, feetransfertoreceiver=0)
        stakers = [make_staker("B62qwinner", 1, untimed_after_slot=block.globalslotsincegenesis)]

        _, details, _, _ = calculator.get_payouts([block], stakers, 1, 0)

        assert details[0].total_rewards_supercharged_pool == 50

    def test_no_unlocked_stake_leaves_supercharged_pool_unpaid(self, calculator, make_block, make_staker):
        """An unlocked NPS winner opens the supercharged pool but nobody can claim it."""
        stakers = [
            make_staker("B62qwinner", 1000, share_class=ShareClass.NPS, untimed_after_slot=0),
            make_staker("B62qcommon", 1000),
        ]
        block = make_block(coinbase=1000, feetransfertoreceiver=0)

        transactions, details, _, _ = calculator.get_payouts([block], stakers, 2000, 0)

        assert details[0].sum_effective_supercharged_pool_stakes == 0
        # NPS gets 95% of its half of the NPS pool; common gets the other half
        assert amounts(transactions) == {"B62qwinner": 237, "B62qcommon": 250}


class TestNpsStakers:
    """NPS delegators are paid from the NPS pool only, at the fixed NPS rate."""

    def test_nps_uses_fixed_commission(self, calculator, make_block, make_staker):
        stakers = [
            make_staker("B62qwinner", 1000),
            make_staker("B62qnps", 1000, share_class=ShareClass.NPS, share_owner="MF"),
        ]
        block = make_block(coinbase=720000000000, feetransfertoreceiver=10000000)

        transactions, details, _, _ = calculator.get_payouts([block], stakers, 2000, "0.1")

        assert amounts(transactions) == {
            "B62qwinner": 324009000000,
            "B62qnps": 342000000000,
        }
        nps_detail = details[1]
        assert nps_detail.effective_common_pool_stakes == 0
        assert nps_detail.effective_supercharged_pool_stakes == 0
        assert nps_detail.sum_effective_common_pool_stakes == 1000

    def test_custom_nps_rate(self, make_block, make_staker):
        calculator = PayoutCalculationService(nps_commission_rate="0.5")
        stakers = [make_staker("B62qwinner", 1, share_class=ShareClass.NPS)]
        block = make_block(coinbase=100, feetransfertoreceiver=0)

        transactions, _, _, _ = calculator.get_payouts([block], stakers, 1, 0)

        assert amounts(transactions) == {"B62qwinner": 50}


class TestBlockFolding:
    """Test accumulation across blocks and run bookkeeping."""

    def test_blocks_without_coinbase_are_recorded_but_not_paid(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qwinner", 1000)]
        blocks = [
            make_block(height=100, coinbase=0),
            make_block(height=101, coinbase=None),
            make_block(height=102, coinbase=1000, feetransfertoreceiver=0),
        ]

        transactions, details, blocks_included, total = calculator.get_payouts(blocks, stakers, 1000, 0)

        assert blocks_included == [100, 101, 102]
        assert [d.block_height for d in details] == [102]
        assert total == 1000

    def test_totals_accumulate_from_starting_total(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qwinner", 1000, total=7)]
        blocks = [
            make_block(height=100, coinbase=1000, feetransfertoreceiver=0),
            make_block(height=101, coinbase=1000, feetransfertoreceiver=0),
        ]

        transactions, details, _, total = calculator.get_payouts(blocks, stakers, 1000, 0)

        assert amounts(transactions) == {"B62qwinner": 2007}
        assert total == 2007
        assert [d.payout for d in details] == [1000, 1000]

    def test_stakers_are_not_mutated(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qwinner", 1000, total=5)]
        block = make_block(coinbase=1000, feetransfertoreceiver=0)

        calculator.get_payouts([block], stakers, 1000, 0)
        calculator.get_payouts([block], stakers, 1000, 0)

        assert stakers[0].total == 5

    def test_zero_totals_are_not_paid(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qwinner", 1000), make_staker("B62qempty", 0)]
        block = make_block(coinbase=1000, feetransfertoreceiver=0)

        transactions, details, _, _ = calculator.get_payouts([block], stakers, 1000, 0)

        assert amounts(transactions) == {"B62qwinner": 1000}
        assert len(details) == 2

    def test_transactions_follow_staker_order(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qz", 1), make_staker("B62qwinner", 1), make_staker("B62qa", 1)]
        block = make_block(coinbase=300, feetransfertoreceiver=0)

        transactions, _, _, _ = calculator.get_payouts([block], stakers, 3, 0)

        assert [t.public_key for t in transactions] == ["B62qz", "B62qwinner", "B62qa"]
        assert all(t.fee == 0 for t in transactions)

    def test_no_blocks(self, calculator, make_staker):
        transactions, details, blocks_included, total = calculator.get_payouts(
            [], [make_staker("B62qwinner")], 1000, 0
        )

        assert transactions == []
        assert details == []
        assert blocks_included == []
        assert total == 0

    def test_custom_lock_predicate(self, make_block, make_staker):
        """Everyone unlocked: coinbase splits between NPS and supercharged pools."""
        calculator = PayoutCalculationService(lock_predicate=lambda staker, block: False)
        stakers = [make_staker("B62qwinner", 1)]
        block = make_block(coinbase=100, feetransfertoreceiver=0)

        _, details, _, _ = calculator.get_payouts([block], stakers, 1, 0)

        assert details[0].total_rewards_nps_pool == 50
        assert details[0].total_rewards_supercharged_pool == 50


class TestAllocationErrors:
    """Data-integrity failures abort the whole run."""

    def test_missing_winner(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qsomeone", 1000)]

        with pytest.raises(WinnerResolutionError) as exc_info:
            calculator.get_payouts([make_block()], stakers, 1000, 0)

        assert exc_info.value.matches == 0
        assert "Should have exactly 1 winner" in str(exc_info.value)

    def test_duplicate_winner(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qwinner", 500), make_staker("B62qwinner", 500)]

        with pytest.raises(WinnerResolutionError) as exc_info:
            calculator.get_payouts([make_block()], stakers, 1000, 0)

        assert exc_info.value.matches == 2

    def test_winner_not_checked_for_blocks_without_coinbase(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qsomeone", 1000)]

        transactions, _, blocks_included, _ = calculator.get_payouts(
            [make_block(coinbase=0)], stakers, 1000, 0
        )

        assert transactions == []
        assert blocks_included == [100]

    def test_total_stake_mismatch(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qwinner", 1000)]

        with pytest.raises(PoolInvarianceError) as exc_info:
            calculator.get_payouts([make_block()], stakers, 999, 0)

        assert exc_info.value.pool == "NPS"
        assert exc_info.value.actual == 1000
        assert exc_info.value.expected == 999

    def test_unknown_share_class(self, calculator, make_block, make_staker):
        stakers = [make_staker("B62qwinner", 1000), make_staker("B62qodd", 1000, share_class="Preferred")]

        with pytest.raises(UnknownShareClassError) as exc_info:
            calculator.get_payouts([make_block()], stakers, 2000, 0)

        assert exc_info.value.share_class == "Preferred"
        assert "Staker share class is unknown" in str(exc_info.value)

    def test_invalid_commission_rate(self, calculator, make_block, make_staker):
        with pytest.raises(ValueError):
            calculator.get_payouts([make_block()], [make_staker("B62qwinner")], 1000, 2)
