"""Abstract interface for final transfer-list rewriting."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple


class AddressSubstituter(ABC):
    """Applies exclusions, destination substitutions and a minimum payout."""

    @abstractmethod
    def substitute_and_exclude(
        self,
        transactions: List["PayoutTransaction"],
        substitutions: Optional[Sequence[Tuple[str, str]]],
        payout_threshold: int
    ) -> List["PayoutTransaction"]:
        """Return the final transfer list."""
        pass
