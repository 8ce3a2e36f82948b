"""
Reader for the operator's substitution table.

Expected format, one rule per line:

    B62qFROM... | B62qTO...
    B62qFROM... | EXCLUDE
"""

import csv
from pathlib import Path
from typing import List, Tuple, Union
import bittensor as bt

from ...utils.error_handling import log_and_raise_validation_error


def load_substitutions(path: Union[str, Path]) -> List[Tuple[str, str]]:
    """
    Load ``(from_key, to_key_or_EXCLUDE)`` rules in file order.

    Blank lines and lines starting with ``#`` are ignored.

    Returns:
        Ordered list of rules; empty if the file does not exist

    Raises:
        ValueError: If a line does not have exactly two fields
    """
    path = Path(path)
    if not path.exists():
        bt.logging.debug(f"No substitution file at {path}")
        return []

    rules = []
    with open(path, newline='') as f:
        for line_number, row in enumerate(csv.reader(f, delimiter='|'), start=1):
            fields = [field.strip() for field in row]
            if not any(fields) or fields[0].startswith('#'):
                continue
            if len(fields) != 2 or not all(fields):
                log_and_raise_validation_error(
                    f"Malformed substitution rule on line {line_number} of {path}",
                    data=row
                )
            rules.append((fields[0], fields[1]))

    bt.logging.info(f"Loaded {len(rules)} substitution rules from {path}")
    return rules
