"""Utility functions for the payout engine."""

from .substitution_file import load_substitutions
from .paid_blocks import record_paid_blocks, load_paid_blocks
from .payout_writer import calculate_payout_hash, save_payout_files

__all__ = [
    "load_substitutions",
    "record_paid_blocks",
    "load_paid_blocks",
    "calculate_payout_hash",
    "save_payout_files",
]
