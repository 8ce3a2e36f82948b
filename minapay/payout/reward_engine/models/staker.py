"""Staker model for delegations in a staking ledger."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from ...utils.config import NANOMINA_PER_MINA


class ShareClass(str, Enum):
    """Share classes recognised by the payout model."""
    COMMON = "Common"
    NPS = "NPS"


def mina_to_nanomina(value: Any) -> int:
    """Convert a MINA amount (number or string) to integer nanomina without float drift."""
    return int(Decimal(str(value)) * NANOMINA_PER_MINA)


@dataclass
class Staker:
    """
    A delegator to the pool for one staking epoch.

    ``share_class`` is kept as a plain string so that unexpected values coming
    from a ledger can be reported by the calculator instead of failing here.
    ``total`` is the caller-supplied starting total for a run.
    """
    public_key: str
    share_class: str
    staking_balance: int
    untimed_after_slot: int = 0
    total: int = 0
    share_owner: Optional[str] = None

    def __post_init__(self):
        """Validation after initialization."""
        if isinstance(self.share_class, ShareClass):
            self.share_class = self.share_class.value

        if not self.public_key:
            raise ValueError("Staker public key cannot be empty")

        if self.staking_balance < 0:
            raise ValueError(
                f"Staking balance must be non-negative, got {self.staking_balance}"
            )

    @property
    def is_common(self) -> bool:
        return self.share_class == ShareClass.COMMON

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Staker':
        """
        Create Staker from a staking-ledger entry.

        ``balance`` is denominated in MINA; ``stakingBalance`` (if present)
        is already in nanomina and takes precedence.
        """
        if 'stakingBalance' in data:
            staking_balance = int(data['stakingBalance'])
        else:
            staking_balance = mina_to_nanomina(data.get('balance', 0))

        return cls(
            public_key=data['publicKey'],
            share_class=data.get('shareClass', ShareClass.COMMON.value),
            staking_balance=staking_balance,
            untimed_after_slot=int(data.get('untimedAfterSlot') or 0),
            total=int(data.get('total', 0)),
            share_owner=data.get('shareOwner'),
        )
