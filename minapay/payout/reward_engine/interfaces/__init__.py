"""Core interfaces for the payout calculation system."""

from .payout_calculator import PayoutCalculator
from .data_provider import BlockDataProvider, StakeDataProvider
from .address_substituter import AddressSubstituter
from .transaction_sender import TransactionSender

__all__ = [
    "PayoutCalculator",
    "BlockDataProvider",
    "StakeDataProvider",
    "AddressSubstituter",
    "TransactionSender",
]
