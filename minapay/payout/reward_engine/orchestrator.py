"""Payment orchestrator - builds, persists and (when confirmed) sends a payout run."""

from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple
import bittensor as bt

from .interfaces.data_provider import BlockDataProvider, StakeDataProvider
from .interfaces.payout_calculator import PayoutCalculator
from .interfaces.address_substituter import AddressSubstituter
from .interfaces.transaction_sender import TransactionSender
from .models.block import Block
from .models.payment import PaymentConfiguration, PaymentProcess
from .models.payout import PayoutDetail, PayoutTransaction
from .services.payout_calculation_service import PayoutCalculationService
from .services.substitution_service import SubstitutionService
from .services.block_height_service import determine_last_block_height
from .services.payment_summarizer import PaymentSummarizer
from .utils.substitution_file import load_substitutions
from .utils.payout_writer import calculate_payout_hash, save_payout_files
from .utils.paid_blocks import record_paid_blocks, load_paid_blocks
from ..utils.config import SUBSTITUTE_PAY_TO_FILE, PAID_BLOCKS_FILE


class PaymentOrchestrator:
    """Coordinates the complete payout workflow."""

    def __init__(
        self,
        block_provider: BlockDataProvider,
        stake_provider: StakeDataProvider,
        calculator: PayoutCalculator = None,
        substituter: AddressSubstituter = None,
        summarizer: PaymentSummarizer = None,
        substitutions_file: str = SUBSTITUTE_PAY_TO_FILE,
        paid_blocks_file: str = PAID_BLOCKS_FILE
    ):
        self.block_provider = block_provider
        self.stake_provider = stake_provider
        self.calculator = calculator or PayoutCalculationService()
        self.substituter = substituter or SubstitutionService()
        self.summarizer = summarizer or PaymentSummarizer()
        self.substitutions_file = substitutions_file
        self.paid_blocks_file = paid_blocks_file

    def build(
        self,
        config: PaymentConfiguration,
        substitutions: Optional[Sequence[Tuple[str, str]]] = None
    ) -> PaymentProcess:
        """
        Main entry point: compute the payout run for the configured height range.

        Allocation errors propagate; no partial process is returned.
        """
        # 1. Work out the height range
        latest_height = self.block_provider.get_latest_height()
        maximum_height = determine_last_block_height(
            latest_height, config.confirmations, config.maximum_height
        )
        bt.logging.info(
            f"Processing blocks {config.minimum_height}..{maximum_height} "
            f"(chain height {latest_height})"
        )

        # 2. Fetch blocks
        blocks = self.block_provider.get_blocks(
            config.pool_public_key, config.minimum_height, maximum_height
        )
        if not blocks:
            bt.logging.warning("No blocks in range - nothing to pay")
            return PaymentProcess(maximum_height=maximum_height)

        paid = load_paid_blocks(self.paid_blocks_file)
        already_paid = [b.blockheight for b in blocks if (b.blockheight, b.statehash) in paid]
        if already_paid:
            bt.logging.warning(f"Blocks already in the paid ledger: {already_paid}")

        # 3-4. Allocate each staking epoch's blocks against its own ledger
        payouts, store_payout, total_payout = self._allocate_by_ledger(blocks, config)
        blocks_included = [block.blockheight for block in blocks]
        bt.logging.debug(f"Calculated {len(payouts)} payouts totalling {total_payout}")

        # 5. Assign fees and finalize the transfer list
        payouts_with_fees = [replace(p, fee=config.transaction_fee) for p in payouts]
        if substitutions is None:
            substitutions = load_substitutions(self.substitutions_file)
        final_payouts = self.substituter.substitute_and_exclude(
            payouts_with_fees, substitutions, config.payout_threshold
        )

        # 6. Totals
        totals = self.summarizer.calculate_totals(blocks, final_payouts)
        total_payout_funds_needed = sum(p.amount + p.fee for p in final_payouts)

        bt.logging.info(
            f"✅ Payout built: {len(final_payouts)}/{len(payouts)} transfers, "
            f"{total_payout_funds_needed} nanomina needed"
        )

        return PaymentProcess(
            blocks=blocks,
            maximum_height=maximum_height,
            payouts=final_payouts,
            payouts_before_exclusions=payouts_with_fees,
            store_payout=store_payout,
            blocks_included=blocks_included,
            total_payout_funds_needed=total_payout_funds_needed,
            totals=totals,
        )

    def write(self, process: PaymentProcess, config: PaymentConfiguration) -> str:
        """Persist the run's transfer list and audit records; return the payout hash."""
        save_payout_files(
            process.payouts,
            process.store_payout,
            config.minimum_height,
            process.maximum_height,
            config.data_dir,
        )
        payout_hash = calculate_payout_hash(process.store_payout)
        bt.logging.info(f"PAYOUT HASH: {payout_hash}")
        return payout_hash

    def send(
        self,
        process: PaymentProcess,
        config: PaymentConfiguration,
        sender: TransactionSender
    ) -> bool:
        """
        Send the run only when the operator confirmed its hash.

        Returns:
            True if the transfers were handed to the sender
        """
        if not config.payout_hash:
            bt.logging.info("No payout hash configured - review the run and re-run with its hash to send")
            return False

        calculated_hash = calculate_payout_hash(process.store_payout)
        if config.payout_hash != calculated_hash:
            bt.logging.error(
                f"HASHES DON'T MATCH: configured {config.payout_hash}, calculated {calculated_hash}"
            )
            return False

        bt.logging.info(f"### Processing signed payout for hash {calculated_hash}...")
        sender.send(process.payouts, config.payout_memo)
        record_paid_blocks(process.blocks, self.paid_blocks_file)
        return True

    def _allocate_by_ledger(
        self,
        blocks: List[Block],
        config: PaymentConfiguration
    ) -> Tuple[List[PayoutTransaction], List[PayoutDetail], int]:
        """
        Run the calculator once per staking ledger and merge the results.

        Blocks won in different epochs were won against different delegations,
        so each group is paid from the ledger its blocks name. Transfers to the
        same key are summed, keeping first-seen order.
        """
        blocks_by_ledger: Dict[str, List[Block]] = {}
        for block in blocks:
            blocks_by_ledger.setdefault(block.stakingledgerhash, []).append(block)

        amounts: Dict[str, int] = {}
        store_payout: List[PayoutDetail] = []
        for ledger_hash, ledger_blocks in blocks_by_ledger.items():
            stakers, total_stake = self.stake_provider.get_stakes(config.pool_public_key, ledger_hash)
            bt.logging.info(
                f"📊 {len(ledger_blocks)} blocks, {len(stakers)} stakers, "
                f"total stake {total_stake} in ledger {ledger_hash}"
            )

            payouts, details, _, _ = self.calculator.get_payouts(
                ledger_blocks, stakers, total_stake, config.commission_rate
            )
            for payout in payouts:
                amounts[payout.public_key] = amounts.get(payout.public_key, 0) + payout.amount
            store_payout.extend(details)

        merged = [PayoutTransaction(public_key=key, amount=amount) for key, amount in amounts.items()]
        return merged, store_payout, sum(amounts.values())
