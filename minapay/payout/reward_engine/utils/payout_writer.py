"""
Persistence of payout runs.

Each run writes two JSON dumps named after the run time and the height range:
the transfer list and the full per-block audit of how it was computed. The
payout hash identifies a computed run so that sending can be gated on the
operator confirming exactly that run.
"""

import hashlib
import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple, Union
import bittensor as bt

from ..models.payout import PayoutDetail, PayoutTransaction
from ...utils.date_utils import format_run_timestamp


def calculate_payout_hash(details: List[PayoutDetail]) -> str:
    """sha1 over the canonical JSON of the audit records."""
    canonical = json.dumps([d.to_dict() for d in details], sort_keys=True, separators=(',', ':'))
    return hashlib.sha1(canonical.encode('utf-8')).hexdigest()


def generate_output_file_name(
    identifier: str,
    run_datetime: datetime,
    minimum_height: int,
    maximum_height: int
) -> str:
    return f"{identifier}_{format_run_timestamp(run_datetime)}_{minimum_height}_{maximum_height}.json"


def save_payout_files(
    transactions: List[PayoutTransaction],
    details: List[PayoutDetail],
    minimum_height: int,
    maximum_height: int,
    output_dir: Union[str, Path],
    run_datetime: Optional[datetime] = None
) -> Tuple[str, str]:
    """
    Write the transfer list and the audit records.

    Returns:
        (transactions file path, details file path)
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    run_datetime = run_datetime or datetime.now()

    transactions_file = output_dir / generate_output_file_name(
        "payout_transactions", run_datetime, minimum_height, maximum_height
    )
    with open(transactions_file, 'w') as f:
        json.dump([t.to_dict() for t in transactions], f, indent=2)

    details_file = output_dir / generate_output_file_name(
        "payout_details", run_datetime, minimum_height, maximum_height
    )
    with open(details_file, 'w') as f:
        json.dump([d.to_dict() for d in details], f, indent=2)

    bt.logging.debug(f"Saved payout files {transactions_file} and {details_file}")
    return str(transactions_file), str(details_file)
