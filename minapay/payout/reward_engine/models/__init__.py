"""Data models for the payout calculation system."""

from .block import Block
from .staker import Staker, ShareClass, mina_to_nanomina
from .pool_accumulator import PoolAccumulator, EffectiveStake
from .payout import PayoutDetail, PayoutTransaction
from .payment import PaymentConfiguration, PaymentProcess, PaymentTotals

__all__ = [
    "Block",
    "Staker",
    "ShareClass",
    "mina_to_nanomina",
    "PoolAccumulator",
    "EffectiveStake",
    "PayoutDetail",
    "PayoutTransaction",
    "PaymentConfiguration",
    "PaymentProcess",
    "PaymentTotals",
]
