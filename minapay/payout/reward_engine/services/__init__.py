"""Core services for the payout calculation system."""

from .lock_policy import is_locked
from .payout_calculation_service import PayoutCalculationService
from .substitution_service import SubstitutionService, EXCLUDE_MARKER
from .block_height_service import determine_last_block_height, determine_epoch_height_range
from .payment_summarizer import PaymentSummarizer

__all__ = [
    "is_locked",
    "PayoutCalculationService",
    "SubstitutionService",
    "EXCLUDE_MARKER",
    "determine_last_block_height",
    "determine_epoch_height_range",
    "PaymentSummarizer",
]
