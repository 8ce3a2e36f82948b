"""Data models for payout results."""

from dataclasses import dataclass
from fractions import Fraction
from typing import Any, Dict, Optional, Union

Number = Union[int, Fraction]


def _json_number(value: Number) -> Union[int, float]:
    """Integral values stay ints, rationals become floats for the audit dump."""
    if isinstance(value, Fraction):
        return int(value) if value.denominator == 1 else float(value)
    return value


@dataclass(frozen=True)
class PayoutDetail:
    """
    Audit snapshot for one staker on one reward-bearing block.

    Weightings and pool rewards are exact rationals; ``to_dict`` renders them
    for the JSON payout details dump.
    """
    public_key: str
    block_height: int
    global_slot: int
    public_key_untimed_after: int
    share_class: str
    state_hash: str
    staking_balance: int
    effective_nps_pool_weighting: Fraction
    effective_nps_pool_stakes: int
    effective_common_pool_weighting: Fraction
    effective_common_pool_stakes: int
    effective_supercharged_pool_weighting: Fraction
    effective_supercharged_pool_stakes: int
    sum_effective_nps_pool_stakes: int
    sum_effective_common_pool_stakes: int
    sum_effective_supercharged_pool_stakes: int
    date_time: Optional[int]
    coinbase: int
    total_rewards: int
    total_rewards_nps_pool: Number
    total_rewards_common_pool: Number
    total_rewards_supercharged_pool: Number
    payout: int
    supercharged_weighting_discount: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the payout details dump format."""
        return {
            "publicKey": self.public_key,
            "blockHeight": self.block_height,
            "globalSlot": self.global_slot,
            "publicKeyUntimedAfter": self.public_key_untimed_after,
            "shareClass": str(self.share_class),
            "stateHash": self.state_hash,
            "stakingBalance": self.staking_balance,
            "effectiveNPSPoolWeighting": _json_number(self.effective_nps_pool_weighting),
            "effectiveNPSPoolStakes": self.effective_nps_pool_stakes,
            "effectiveCommonPoolWeighting": _json_number(self.effective_common_pool_weighting),
            "effectiveCommonPoolStakes": self.effective_common_pool_stakes,
            "effectiveSuperchargedPoolWeighting": _json_number(self.effective_supercharged_pool_weighting),
            "effectiveSuperchargedPoolStakes": self.effective_supercharged_pool_stakes,
            "sumEffectiveNPSPoolStakes": self.sum_effective_nps_pool_stakes,
            "sumEffectiveCommonPoolStakes": self.sum_effective_common_pool_stakes,
            "sumEffectiveSuperchargedPoolStakes": self.sum_effective_supercharged_pool_stakes,
            "superchargedWeightingDiscount": self.supercharged_weighting_discount,
            "dateTime": self.date_time,
            "coinbase": self.coinbase,
            "totalRewards": self.total_rewards,
            "totalRewardsNPSPool": _json_number(self.total_rewards_nps_pool),
            "totalRewardsCommonPool": _json_number(self.total_rewards_common_pool),
            "totalRewardsSuperchargedPool": _json_number(self.total_rewards_supercharged_pool),
            "payout": self.payout,
        }


@dataclass
class PayoutTransaction:
    """A transfer instruction to one delegator. Fee is assigned downstream."""
    public_key: str
    amount: int
    fee: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "publicKey": self.public_key,
            "amount": self.amount,
            "fee": self.fee,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PayoutTransaction':
        return cls(
            public_key=data["publicKey"],
            amount=int(data["amount"]),
            fee=int(data.get("fee", 0)),
        )
