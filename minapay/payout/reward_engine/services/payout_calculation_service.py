"""Allocates block rewards to delegators across the NPS, Common and Supercharged pools.

Per block:
    total_rewards      = coinbase + fee_transfer_to_receiver - fee_transfer_from_coinbase
    nps_pool           = coinbase       (winner locked)   | coinbase / 2 (winner unlocked)
    supercharged_pool  = 0              (winner locked)   | coinbase / 2 (winner unlocked)
    common_pool        = total_rewards - nps_pool - supercharged_pool

Every delegator's full balance counts in the NPS pool. Only Common-class
balances count in the Common pool, and only unlocked Common balances count in
the Supercharged pool. Each pool term is floored separately; remainders are
never paid out.
"""

from fractions import Fraction
from math import floor
from typing import Callable, Dict, List, Tuple
import bittensor as bt

from ..interfaces.payout_calculator import PayoutCalculator
from ..models.block import Block
from ..models.staker import Staker, ShareClass
from ..models.pool_accumulator import PoolAccumulator, EffectiveStake
from ..models.payout import PayoutDetail, PayoutTransaction
from ..exceptions import WinnerResolutionError, PoolInvarianceError, UnknownShareClassError
from .lock_policy import is_locked
from ...utils.config import NPS_COMMISSION_RATE
from ...utils.rates import Rate, to_rate

LockPredicate = Callable[[Staker, Block], bool]


def pool_weighting(effective_stake: int, pool_sum: int) -> Fraction:
    """Share of a pool held by one staker; an empty pool pays nobody."""
    if pool_sum > 0:
        return Fraction(effective_stake, pool_sum)
    return Fraction(0)


def floor_term(commission_rate: Fraction, pool_reward: Fraction, weighting: Fraction) -> int:
    """One pool's payout to one staker after commission, floored."""
    return floor((1 - commission_rate) * pool_reward * weighting)


class PayoutCalculationService(PayoutCalculator):
    """Three-pool reward allocation with supercharged coinbase isolation."""

    def __init__(
        self,
        lock_predicate: LockPredicate = is_locked,
        nps_commission_rate: Rate = NPS_COMMISSION_RATE
    ):
        self.is_locked = lock_predicate
        self.nps_commission_rate = to_rate(nps_commission_rate)

    def get_payouts(
        self,
        blocks: List[Block],
        stakers: List[Staker],
        total_stake: int,
        commission_rate: Rate
    ) -> Tuple[List[PayoutTransaction], List[PayoutDetail], List[int], int]:
        """
        Fold every block into per-staker totals.

        Running totals start from each staker's ``total`` and are threaded
        through the fold in a separate map; the stakers themselves are left
        untouched.

        Raises:
            WinnerResolutionError: A block's winner is not exactly one staker
            PoolInvarianceError: Effective stake sums do not add up
            UnknownShareClassError: A staker is neither Common nor NPS
            ValueError: commission_rate is outside [0, 1]
        """
        rate = to_rate(commission_rate)
        totals: Dict[str, int] = {staker.public_key: staker.total for staker in stakers}
        store_payout: List[PayoutDetail] = []
        blocks_included: List[int] = []

        for block in blocks:
            blocks_included.append(block.blockheight)

            if not block.has_coinbase:
                bt.logging.debug(f"Block {block.blockheight} has no coinbase - nothing to allocate")
                continue

            store_payout.extend(
                self._allocate_block(block, stakers, total_stake, rate, totals)
            )

        transactions = [
            PayoutTransaction(public_key=public_key, amount=amount, fee=0)
            for public_key, amount in totals.items()
            if amount > 0
        ]
        total_payout = sum(t.amount for t in transactions)

        bt.logging.info(
            f"Allocated {total_payout} nanomina to {len(transactions)} stakers "
            f"over {len(blocks_included)} blocks"
        )
        return transactions, store_payout, blocks_included, total_payout

    def _allocate_block(
        self,
        block: Block,
        stakers: List[Staker],
        total_stake: int,
        commission_rate: Fraction,
        totals: Dict[str, int]
    ) -> List[PayoutDetail]:
        """Split one reward-bearing block between the pools and the stakers."""
        winner = self._get_winner(stakers, block)

        total_rewards = block.coinbase + block.feetransfertoreceiver - block.feetransferfromcoinbase
        if self.is_locked(winner, block):
            nps_pool_rewards = Fraction(block.coinbase)
            supercharged_pool_rewards = Fraction(0)
        else:
            nps_pool_rewards = Fraction(block.coinbase, 2)
            supercharged_pool_rewards = Fraction(block.coinbase, 2)
        common_pool_rewards = total_rewards - nps_pool_rewards - supercharged_pool_rewards

        pools = self._accumulate_pool_stakes(block, stakers)
        self._validate_pools(block, stakers, pools, total_stake)

        bt.logging.debug(
            f"Block {block.blockheight}: rewards={total_rewards}, nps={nps_pool_rewards}, "
            f"common={common_pool_rewards}, supercharged={supercharged_pool_rewards}, {pools}"
        )

        details = []
        for staker in stakers:
            stake = pools.get(staker.public_key)
            nps_weighting = pool_weighting(stake.nps, pools.sum_nps)
            common_weighting = pool_weighting(stake.common, pools.sum_common)
            supercharged_weighting = pool_weighting(stake.supercharged, pools.sum_supercharged)

            if staker.is_common:
                block_total = (
                    floor_term(commission_rate, nps_pool_rewards, nps_weighting)
                    + floor_term(commission_rate, common_pool_rewards, common_weighting)
                    + floor_term(commission_rate, supercharged_pool_rewards, supercharged_weighting)
                )
            elif staker.share_class == ShareClass.NPS:
                block_total = floor_term(self.nps_commission_rate, nps_pool_rewards, nps_weighting)
            else:
                bt.logging.error(
                    f"Unknown share class {staker.share_class!r} for {staker.public_key} "
                    f"at block {block.blockheight}"
                )
                raise UnknownShareClassError(staker.public_key, staker.share_class)

            totals[staker.public_key] += block_total

            details.append(PayoutDetail(
                public_key=staker.public_key,
                block_height=block.blockheight,
                global_slot=block.globalslotsincegenesis,
                public_key_untimed_after=staker.untimed_after_slot,
                share_class=staker.share_class,
                state_hash=block.statehash,
                staking_balance=staker.staking_balance,
                effective_nps_pool_weighting=nps_weighting,
                effective_nps_pool_stakes=stake.nps,
                effective_common_pool_weighting=common_weighting,
                effective_common_pool_stakes=stake.common,
                effective_supercharged_pool_weighting=supercharged_weighting,
                effective_supercharged_pool_stakes=stake.supercharged,
                sum_effective_nps_pool_stakes=pools.sum_nps,
                sum_effective_common_pool_stakes=pools.sum_common,
                sum_effective_supercharged_pool_stakes=pools.sum_supercharged,
                date_time=block.blockdatetime,
                coinbase=block.coinbase,
                total_rewards=total_rewards,
                total_rewards_nps_pool=nps_pool_rewards,
                total_rewards_common_pool=common_pool_rewards,
                total_rewards_supercharged_pool=supercharged_pool_rewards,
                payout=block_total,
            ))

        return details

    def _accumulate_pool_stakes(self, block: Block, stakers: List[Staker]) -> PoolAccumulator:
        """Effective stake of every staker in every pool for this block."""
        pools = PoolAccumulator()

        for staker in stakers:
            common_stake = 0
            supercharged_stake = 0
            # NPS shares stay out of the common and supercharged pools
            if staker.is_common:
                common_stake = staker.staking_balance
                if not self.is_locked(staker, block):
                    supercharged_stake = staker.staking_balance

            pools.add(
                staker.public_key,
                EffectiveStake(
                    nps=staker.staking_balance,
                    common=common_stake,
                    supercharged=supercharged_stake,
                ),
            )

        return pools

    def _validate_pools(
        self,
        block: Block,
        stakers: List[Staker],
        pools: PoolAccumulator,
        total_stake: int
    ):
        """Effective stake sums must match the ledger totals exactly."""
        expected_common = sum(
            s.staking_balance for s in stakers if s.is_common
        )
        if pools.sum_nps != total_stake:
            bt.logging.error(
                f"NPS share must be equal to total staked amount at block {block.blockheight}: "
                f"{pools.sum_nps} != {total_stake}"
            )
            raise PoolInvarianceError("NPS", block.blockheight, pools.sum_nps, total_stake)

        if pools.sum_common != expected_common:
            bt.logging.error(
                f"Common share must equal total common stake at block {block.blockheight}: "
                f"{pools.sum_common} != {expected_common}"
            )
            raise PoolInvarianceError(
                "Common", block.blockheight, pools.sum_common, expected_common
            )

    def _get_winner(self, stakers: List[Staker], block: Block) -> Staker:
        winners = [s for s in stakers if s.public_key == block.winnerpublickey]
        if len(winners) != 1:
            bt.logging.error(
                f"Should have exactly 1 winner for block {block.blockheight}, "
                f"found {len(winners)} for {block.winnerpublickey}"
            )
            raise WinnerResolutionError(block.blockheight, block.winnerpublickey, len(winners))
        return winners[0]
