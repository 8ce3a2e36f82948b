"""Date parsing utilities for block timestamps."""

from datetime import datetime, timezone
from typing import Optional, Union
import bittensor as bt


def parse_block_datetime(value: Optional[Union[int, float, str]]) -> Optional[int]:
    """
    Normalise a block timestamp to epoch milliseconds.

    The archive reports block times either as epoch milliseconds (numbers or
    numeric strings) or as ISO-8601 timestamps.

    Args:
        value: Epoch milliseconds, or an ISO timestamp string

    Returns:
        Epoch milliseconds in UTC, or None if value is None/empty/unparseable

    Examples:
        >>> parse_block_datetime(1615939560000)
        1615939560000

        >>> parse_block_datetime('2021-03-17T00:06:00Z')
        1615939560000
    """
    if value is None or value == '':
        return None

    if isinstance(value, (int, float)):
        return int(value)

    try:
        if value.strip().isdigit():
            return int(value.strip())

        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return int(dt.timestamp() * 1000)

    except (ValueError, AttributeError) as e:
        bt.logging.warning(f"Failed to parse block datetime '{value}': {e}")
        return None


def format_run_timestamp(moment: datetime) -> str:
    """Compact digits-only timestamp used in payout file names."""
    return moment.strftime("%Y%m%d%H%M%S")
