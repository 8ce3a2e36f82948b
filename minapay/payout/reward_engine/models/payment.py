"""Payment run configuration and results."""

from dataclasses import dataclass, field
from fractions import Fraction
from typing import Dict, List, Optional

from .block import Block
from .payout import PayoutDetail, PayoutTransaction
from ...utils.rates import to_rate


@dataclass
class PaymentConfiguration:
    """Policy and identity inputs for one payout run."""
    pool_public_key: str
    commission_rate: Fraction
    minimum_height: int = 0
    maximum_height: Optional[int] = None
    confirmations: int = 10
    payout_threshold: int = 0
    transaction_fee: int = 0
    sender_public_key: str = ""
    payout_hash: Optional[str] = None
    payout_memo: str = ""
    data_dir: str = "data"

    def __post_init__(self):
        """Validation after initialization."""
        self.commission_rate = to_rate(self.commission_rate)

        if self.maximum_height is not None and self.maximum_height < self.minimum_height:
            raise ValueError(
                f"Maximum height ({self.maximum_height}) must not be below minimum height ({self.minimum_height})"
            )

    @classmethod
    def from_env(cls, **overrides) -> 'PaymentConfiguration':
        """Build configuration from the environment-backed config module."""
        from ...utils import config

        values = dict(
            pool_public_key=config.POOL_PUBLIC_KEY,
            commission_rate=config.COMMISSION_RATE,
            minimum_height=config.MIN_HEIGHT,
            maximum_height=config.MAX_HEIGHT,
            confirmations=config.CONFIRMATIONS,
            payout_threshold=config.PAYOUT_THRESHOLD,
            transaction_fee=config.SEND_TRANSACTION_FEE,
            sender_public_key=config.SENDER_PUBLIC_KEY,
            payout_hash=config.PAYOUT_HASH,
            payout_memo=config.PAYOUT_MEMO,
            data_dir=config.DATA_DIR,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class PaymentTotals:
    """Run-level sums, all in nanomina."""
    coinbase_sum: int = 0
    fee_transfer_from_coinbase_sum: int = 0
    user_command_transaction_fee_sum: int = 0
    net_coinbase_received: int = 0
    payout_amounts_sum: int = 0
    payout_fees_sum: int = 0
    net_to_pool_operator: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "coinBaseSum": self.coinbase_sum,
            "feeTransferFromCoinBaseSum": self.fee_transfer_from_coinbase_sum,
            "userCommandTransactionFeeSum": self.user_command_transaction_fee_sum,
            "netCoinBaseReceived": self.net_coinbase_received,
            "payoutAmountsSum": self.payout_amounts_sum,
            "payoutFeesSum": self.payout_fees_sum,
            "netMinaToPoolOperator": self.net_to_pool_operator,
        }


@dataclass
class PaymentProcess:
    """Everything a payout run produced, ready to persist or send."""
    blocks: List[Block] = field(default_factory=list)
    maximum_height: int = 0
    payouts: List[PayoutTransaction] = field(default_factory=list)
    payouts_before_exclusions: List[PayoutTransaction] = field(default_factory=list)
    store_payout: List[PayoutDetail] = field(default_factory=list)
    blocks_included: List[int] = field(default_factory=list)
    total_payout_funds_needed: int = 0
    totals: PaymentTotals = field(default_factory=PaymentTotals)
