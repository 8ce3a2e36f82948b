"""Per-block effective stake bookkeeping for the three reward pools."""

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class EffectiveStake:
    """A staker's effective stake in each pool for one block."""
    nps: int
    common: int
    supercharged: int


@dataclass
class PoolAccumulator:
    """Pool-wide effective stake sums and per-staker breakdown for one block."""
    sum_nps: int = 0
    sum_common: int = 0
    sum_supercharged: int = 0
    stakes: Dict[str, EffectiveStake] = field(default_factory=dict)

    def add(self, public_key: str, stake: EffectiveStake):
        """Record one staker's effective stakes and fold them into the sums."""
        self.stakes[public_key] = stake
        self.sum_nps += stake.nps
        self.sum_common += stake.common
        self.sum_supercharged += stake.supercharged

    def get(self, public_key: str) -> EffectiveStake:
        return self.stakes[public_key]

    def __repr__(self) -> str:
        return (
            f"PoolAccumulator(nps={self.sum_nps}, common={self.sum_common}, "
            f"supercharged={self.sum_supercharged}, stakers={len(self.stakes)})"
        )
