"""Final transfer-list rewriting: minimum payout, exclusions and address substitutions."""

from dataclasses import replace
from typing import List, Optional, Sequence, Tuple
import bittensor as bt

from ..interfaces.address_substituter import AddressSubstituter
from ..models.payout import PayoutTransaction

EXCLUDE_MARKER = "EXCLUDE"


class SubstitutionService(AddressSubstituter):
    """
    Applies the operator's substitution table to the transfer list.

    The threshold is applied once to the whole list, then each table row is
    applied in order: ``(key, EXCLUDE)`` drops transfers to ``key`` and
    ``(key, other)`` redirects them to ``other``. Rows are applied one after
    another, so a redirected key can be matched again by a later row.
    """

    def substitute_and_exclude(
        self,
        transactions: List[PayoutTransaction],
        substitutions: Optional[Sequence[Tuple[str, str]]],
        payout_threshold: int
    ) -> List[PayoutTransaction]:
        """Return the final list; the input list and its entries are left untouched."""
        if not substitutions:
            bt.logging.debug("No substitution table - transfer list unchanged")
            return list(transactions)

        result = [t for t in transactions if t.amount > payout_threshold]
        below_threshold = len(transactions) - len(result)
        if below_threshold:
            bt.logging.info(f"Dropped {below_threshold} payouts at or below threshold {payout_threshold}")

        for from_key, to_key in substitutions:
            if to_key == EXCLUDE_MARKER:
                before = len(result)
                result = [t for t in result if t.public_key != from_key]
                if len(result) != before:
                    bt.logging.info(f"Excluded payout to {from_key}")
            else:
                result = [
                    replace(t, public_key=to_key) if t.public_key == from_key else t
                    for t in result
                ]

        return result
