"""Append-only ledger of blocks whose rewards have been paid out."""

from pathlib import Path
from typing import Iterable, Set, Tuple, Union
import bittensor as bt

from ..models.block import Block


def record_paid_blocks(blocks: Iterable[Block], path: Union[str, Path]) -> int:
    """
    Append ``height|statehash`` for every block to the ledger.

    Returns:
        Number of lines written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    written = 0
    with open(path, 'a') as f:
        for block in blocks:
            f.write(f"{block.blockheight}|{block.statehash}\n")
            written += 1

    bt.logging.info(f"Recorded {written} paid blocks in {path}")
    return written


def load_paid_blocks(path: Union[str, Path]) -> Set[Tuple[int, str]]:
    """Read the ledger back as ``(height, statehash)`` pairs; empty if absent."""
    path = Path(path)
    if not path.exists():
        return set()

    paid = set()
    with open(path, 'r') as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            height, state_hash = line.split('|', 1)
            paid.add((int(height), state_hash))
    return paid
