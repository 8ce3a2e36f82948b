"""Abstract interface for payout calculation strategies."""

from abc import ABC, abstractmethod
from typing import List, Tuple, Union
from decimal import Decimal
from fractions import Fraction


class PayoutCalculator(ABC):
    """Abstract interface for payout calculation strategies."""

    @abstractmethod
    def get_payouts(
        self,
        blocks: List["Block"],
        stakers: List["Staker"],
        total_stake: int,
        commission_rate: Union[float, str, Decimal, Fraction]
    ) -> Tuple[List["PayoutTransaction"], List["PayoutDetail"], List[int], int]:
        """
        Allocate block rewards to stakers.

        Returns:
            (transactions, payout details, processed block heights, total payout)
        """
        pass
