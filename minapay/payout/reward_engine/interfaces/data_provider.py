"""Data provider interfaces for block and staking-ledger sources."""

from abc import ABC, abstractmethod
from typing import List, Tuple


class BlockDataProvider(ABC):
    """Source of blocks produced by a pool."""

    @abstractmethod
    def get_latest_height(self) -> int:
        """Return the current chain height."""
        pass

    @abstractmethod
    def get_min_max_blocks_by_epoch(self, epoch: int, fork: int = 0) -> Tuple[int, int]:
        """Return the lowest and highest block heights of a staking epoch on a fork."""
        pass

    @abstractmethod
    def get_blocks(self, key: str, min_height: int, max_height: int) -> List["Block"]:
        """Return blocks won by ``key`` with heights in [min_height, max_height]."""
        pass


class StakeDataProvider(ABC):
    """Source of staking-ledger delegations."""

    @abstractmethod
    def get_stakes(self, key: str, ledger_hash: str) -> Tuple[List["Staker"], int]:
        """
        Return the stakers delegating to ``key`` in a staking ledger.

        Returns:
            (stakers, total stake in nanomina)
        """
        pass
