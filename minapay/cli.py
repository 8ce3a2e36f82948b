"""
Command line entry point for building a payout run.

Usage:
    minapay-payout --min-height 1000 --max-height 2000
    minapay-payout --epoch 42
    minapay-payout --payout-hash <hash printed by the previous run>
"""

import argparse
import os
import sys
from typing import List, Optional
import bittensor as bt

from minapay.payout.utils import config as config_module
from minapay.payout.utils.error_handling import log_and_raise_config_error
from minapay.payout.clients import (
    ArchiveBlockDataProvider,
    ArchiveStakeDataProvider,
    load_nps_addresses,
)
from minapay.payout.reward_engine import PaymentOrchestrator
from minapay.payout.reward_engine.models import PaymentConfiguration
from minapay.payout.reward_engine.services import determine_epoch_height_range
from minapay.payout.reward_engine.utils import calculate_payout_hash
from minapay.utils.logging import setup_events_logger


def run_payout(orchestrator: PaymentOrchestrator, payment_config: PaymentConfiguration, events_logger) -> str:
    """
    Build one payout run and persist it unless the operator already confirmed it.

    A configured payout hash that matches the rebuilt run means the files from
    the earlier run are the ones to send, so nothing is rewritten.

    Returns:
        The payout hash the operator must confirm before sending
    """
    process = orchestrator.build(payment_config)
    if not process.store_payout:
        bt.logging.warning(
            f"No payouts for heights {payment_config.minimum_height}..{process.maximum_height}"
        )
        return ""

    heights = f"{payment_config.minimum_height}..{process.maximum_height}"
    payout_hash = calculate_payout_hash(process.store_payout)
    if payment_config.payout_hash == payout_hash:
        bt.logging.info(f"Payout hash {payout_hash} confirmed for heights {heights}; payout files left as written")
        events_logger.event(f"pool={payment_config.pool_public_key} heights={heights} confirmed hash={payout_hash}")
        return payout_hash

    if payment_config.payout_hash:
        bt.logging.error(f"Configured payout hash {payment_config.payout_hash} does not match {payout_hash}")

    orchestrator.write(process, payment_config)
    events_logger.event(
        f"pool={payment_config.pool_public_key} heights={heights} "
        f"blocks={len(process.blocks_included)} transfers={len(process.payouts)} "
        f"funds_needed={process.total_payout_funds_needed} "
        f"to_operator={process.totals.net_to_pool_operator} hash={payout_hash}"
    )
    bt.logging.info(f"Run totals (nanomina): {process.totals.to_dict()}")
    bt.logging.info(
        f"Total payout funds needed: "
        f"{process.total_payout_funds_needed / config_module.NANOMINA_PER_MINA:.9f} MINA"
    )
    return payout_hash


def resolve_height_range(block_provider, epoch: Optional[int], fork: int,
                         min_height: Optional[int], max_height: Optional[int]):
    """Explicit heights, or the heights of ``epoch`` when one is given."""
    if epoch is None:
        return min_height, max_height
    if min_height is not None or max_height is not None:
        log_and_raise_config_error("--epoch cannot be combined with --min-height/--max-height", "epoch", str(epoch))
    return determine_epoch_height_range(block_provider, epoch, fork)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calculate staking pool payouts for a block height range"
    )
    bt.logging.add_args(parser)

    parser.add_argument(
        "--min-height",
        type=int,
        default=None,
        help="First block height to pay for (default: MIN_HEIGHT)"
    )
    parser.add_argument(
        "--max-height",
        type=int,
        default=None,
        help="Last block height to pay for (default: MAX_HEIGHT or chain tip minus confirmations)"
    )
    parser.add_argument(
        "--epoch",
        type=int,
        default=None,
        help="Pay for the blocks of this staking epoch (replaces --min-height/--max-height)"
    )
    parser.add_argument(
        "--fork",
        type=int,
        default=0,
        help="Fork the epoch is counted on (default: 0)"
    )
    parser.add_argument(
        "--commission-rate",
        type=str,
        default=None,
        help="Pool commission rate in [0, 1] (default: COMMISSION_RATE)"
    )
    parser.add_argument(
        "--payout-hash",
        type=str,
        default=None,
        help="Payout hash confirmed by the operator"
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory for payout files (default: DATA_DIR)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    try:
        parser = build_parser()
        config = bt.config(parser, args=argv if argv is not None else sys.argv[1:])
        bt.logging.set_config(config=config.logging)

        block_provider = ArchiveBlockDataProvider()
        min_height, max_height = resolve_height_range(
            block_provider, config.epoch, config.fork, config.min_height, config.max_height
        )

        payment_config = PaymentConfiguration.from_env(
            minimum_height=min_height,
            maximum_height=max_height,
            commission_rate=config.commission_rate,
            payout_hash=config.payout_hash,
            data_dir=config.data_dir,
        )
        if not payment_config.pool_public_key:
            log_and_raise_config_error("Pool public key is required", "POOL_PUBLIC_KEY")

        events_logger = setup_events_logger(
            config_module.EVENTS_LOG_DIR,
            config_module.EVENTS_RETENTION_SIZE,
            payment_config.pool_public_key,
        )
        orchestrator = PaymentOrchestrator(
            block_provider,
            ArchiveStakeDataProvider(load_nps_addresses(config_module.NPS_ADDRESSES_FILE)),
            substitutions_file=os.path.join(payment_config.data_dir, ".substitutePayTo"),
            paid_blocks_file=os.path.join(payment_config.data_dir, ".paidblocks"),
        )

        run_payout(orchestrator, payment_config, events_logger)
        return 0

    except KeyboardInterrupt:
        bt.logging.info("Payout run cancelled by user")
        return 1
    except Exception as e:
        bt.logging.error(f"Payout run failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
