"""Summarizes a payout run's income and outgoings."""

from typing import List
import numpy as np
import bittensor as bt

from ..models.block import Block
from ..models.payout import PayoutTransaction
from ..models.payment import PaymentTotals
from ...utils.config import NANOMINA_PER_MINA


class PaymentSummarizer:
    """Computes run totals from the blocks paid for and the final transfers."""

    def calculate_totals(
        self,
        blocks: List[Block],
        payouts: List[PayoutTransaction]
    ) -> PaymentTotals:
        """Sum block income and payout outgoings, all in nanomina."""
        block_matrix = self._block_matrix(blocks)
        coinbase, fee_to_receiver, fee_from_coinbase, user_fees = block_matrix.T

        rewarded = coinbase > 0
        net_coinbase_received = int(np.sum(
            coinbase[rewarded] + fee_to_receiver[rewarded] - fee_from_coinbase[rewarded]
        ))

        amounts = np.array([p.amount for p in payouts], dtype=np.int64)
        fees = np.array([p.fee for p in payouts], dtype=np.int64)
        payout_amounts_sum = int(np.sum(amounts))
        payout_fees_sum = int(np.sum(fees))

        totals = PaymentTotals(
            coinbase_sum=int(np.sum(coinbase)),
            fee_transfer_from_coinbase_sum=int(np.sum(fee_from_coinbase)),
            user_command_transaction_fee_sum=int(np.sum(user_fees)),
            net_coinbase_received=net_coinbase_received,
            payout_amounts_sum=payout_amounts_sum,
            payout_fees_sum=payout_fees_sum,
            net_to_pool_operator=net_coinbase_received - payout_amounts_sum - payout_fees_sum,
        )
        self._log_summary(totals, len(blocks), len(payouts))
        return totals

    def _block_matrix(self, blocks: List[Block]) -> np.ndarray:
        """One row per block: coinbase, fee to receiver, fee from coinbase, user command fees."""
        if not blocks:
            return np.zeros((0, 4), dtype=np.int64)

        return np.array(
            [
                [
                    block.coinbase or 0,
                    block.feetransfertoreceiver,
                    block.feetransferfromcoinbase,
                    block.usercommandtransactionfees,
                ]
                for block in blocks
            ],
            dtype=np.int64,
        )

    def _log_summary(self, totals: PaymentTotals, num_blocks: int, num_payouts: int):
        def mina(value: int) -> str:
            return f"{value / NANOMINA_PER_MINA:.9f}"

        bt.logging.info(
            f"💰 Run summary: {num_blocks} blocks, {num_payouts} payouts, "
            f"coinbase={mina(totals.coinbase_sum)}, "
            f"net received={mina(totals.net_coinbase_received)}, "
            f"paid out={mina(totals.payout_amounts_sum)} + fees {mina(totals.payout_fees_sum)}, "
            f"to operator={mina(totals.net_to_pool_operator)} MINA"
        )
