"""Time-lock predicate for delegated stake."""

from ..models.block import Block
from ..models.staker import Staker


def is_locked(staker: Staker, block: Block) -> bool:
    """
    Return True while the staker's vesting schedule has not ended at the block.

    A timed account becomes untimed at ``untimed_after_slot``; at or past that
    global slot the stake is no longer locked.
    """
    return staker.untimed_after_slot > block.globalslotsincegenesis
