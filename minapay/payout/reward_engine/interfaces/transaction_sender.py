"""Abstract interface for signing and broadcasting payouts."""

from abc import ABC, abstractmethod
from typing import List


class TransactionSender(ABC):
    """
    Signs and submits transfers to the network.

    No implementation ships with the payout engine; operators plug in their
    own signer.
    """

    @abstractmethod
    def send(self, transactions: List["PayoutTransaction"], memo: str) -> None:
        """Sign and submit every transaction, raising on failure."""
        pass
