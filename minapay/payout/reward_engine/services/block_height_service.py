"""Determines how far up the chain a payout run may reach."""

from typing import Optional, Tuple
import bittensor as bt


def determine_last_block_height(
    latest_height: int,
    confirmations: int,
    maximum_height: Optional[int] = None
) -> int:
    """
    Highest block height that is safe to pay for.

    Blocks within ``confirmations`` of the tip may still be reorganised away,
    so the run stops ``confirmations`` below ``latest_height``. A configured
    ``maximum_height`` caps the result.
    """
    if confirmations < 0:
        raise ValueError(f"Confirmations must be non-negative, got {confirmations}")

    last_height = max(latest_height - confirmations, 0)
    if maximum_height is not None and maximum_height < last_height:
        bt.logging.debug(f"Capping height {last_height} at configured maximum {maximum_height}")
        last_height = maximum_height

    return last_height


def determine_epoch_height_range(block_provider, epoch: int, fork: int = 0) -> Tuple[int, int]:
    """
    Height range covering one staking epoch, as ``(minimum_height, maximum_height)``.

    Raises:
        ValueError: If the epoch or fork is negative, or the provider returns an inverted range
    """
    if epoch < 0 or fork < 0:
        raise ValueError(f"Epoch and fork must be non-negative, got epoch={epoch} fork={fork}")

    minimum_height, maximum_height = block_provider.get_min_max_blocks_by_epoch(epoch, fork)
    if maximum_height < minimum_height:
        raise ValueError(
            f"Epoch {epoch} (fork {fork}) has inverted height range {minimum_height}..{maximum_height}"
        )

    bt.logging.info(f"Epoch {epoch} (fork {fork}) spans heights {minimum_height}..{maximum_height}")
    return minimum_height, maximum_height
