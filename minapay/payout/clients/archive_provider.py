"""
Archive proxy clients for block and staking-ledger data.

The archive proxy exposes four read-only endpoints:

    GET /consensus                              -> {"blockheight": int}
    GET /blocks?creator=&minHeight=&maxHeight=  -> {"blocks": [archive rows]}
    GET /staking-ledgers/<hash>?delegate=       -> {"stakes": [ledger entries]}
    GET /epochs/<epoch>?fork=                   -> {"min": int, "max": int}

Staking ledgers never change once an epoch starts, so they are cached on disk.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union
import requests
import bittensor as bt
from diskcache import Cache
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from ..reward_engine.interfaces.data_provider import BlockDataProvider, StakeDataProvider
from ..reward_engine.models.block import Block
from ..reward_engine.models.staker import Staker, ShareClass
from ..utils.config import (
    ARCHIVE_BLOCKS_ENDPOINT,
    ARCHIVE_CONSENSUS_ENDPOINT,
    ARCHIVE_EPOCH_ENDPOINT,
    ARCHIVE_STAKING_LEDGER_ENDPOINT,
    ARCHIVE_REQUEST_TIMEOUT,
    CACHE_DIRS,
)
from ..utils.error_handling import log_and_raise_api_error


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(requests.exceptions.RequestException),
    reraise=True
)
def fetch_json(url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    GET a JSON document from the archive proxy.

    Raises:
        requests.exceptions.RequestException: If the request still fails after all retries
    """
    response = requests.get(url, params=params, timeout=ARCHIVE_REQUEST_TIMEOUT)
    response.raise_for_status()
    return response.json()


def load_nps_addresses(path: Union[str, Path]) -> Dict[str, str]:
    """
    Load the delegators holding NPS shares, as ``public_key -> share owner``.

    File format is one ``B62q... | OWNER`` per line; missing file means no NPS stakers.
    """
    path = Path(path)
    if not path.exists():
        bt.logging.debug(f"No NPS address file at {path}")
        return {}

    addresses = {}
    with open(path, 'r') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            public_key, _, owner = (part.strip() for part in line.partition('|'))
            addresses[public_key] = owner or None
    return addresses


class ArchiveBlockDataProvider(BlockDataProvider):
    """Blocks produced by a pool, from the archive proxy."""

    def __init__(
        self,
        blocks_endpoint: str = ARCHIVE_BLOCKS_ENDPOINT,
        consensus_endpoint: str = ARCHIVE_CONSENSUS_ENDPOINT,
        epoch_endpoint: str = ARCHIVE_EPOCH_ENDPOINT
    ):
        self.blocks_endpoint = blocks_endpoint
        self.consensus_endpoint = consensus_endpoint
        self.epoch_endpoint = epoch_endpoint

    def get_latest_height(self) -> int:
        try:
            data = fetch_json(self.consensus_endpoint)
        except requests.exceptions.RequestException as e:
            log_and_raise_api_error(e, endpoint=self.consensus_endpoint, context="Chain height fetch")
        return int(data['blockheight'])

    def get_min_max_blocks_by_epoch(self, epoch: int, fork: int = 0) -> Tuple[int, int]:
        url = f"{self.epoch_endpoint}/{epoch}"
        params = {"fork": fork}
        try:
            data = fetch_json(url, params=params)
        except requests.exceptions.RequestException as e:
            log_and_raise_api_error(e, endpoint=url, params=params, context="Epoch range fetch")
        return int(data["min"]), int(data["max"])

    def get_blocks(self, key: str, min_height: int, max_height: int) -> List[Block]:
        params = {"creator": key, "minHeight": min_height, "maxHeight": max_height}
        try:
            data = fetch_json(self.blocks_endpoint, params=params)
        except requests.exceptions.RequestException as e:
            log_and_raise_api_error(e, endpoint=self.blocks_endpoint, params=params, context="Blocks fetch")

        blocks = [Block.from_dict(row) for row in data.get("blocks") or []]
        bt.logging.info(f"Fetched {len(blocks)} blocks between {min_height} and {max_height}")
        return blocks


class ArchiveStakeDataProvider(StakeDataProvider):
    """Delegations to a pool from a staking ledger, cached per ledger hash."""

    def __init__(
        self,
        nps_addresses: Optional[Dict[str, str]] = None,
        ledger_endpoint: str = ARCHIVE_STAKING_LEDGER_ENDPOINT,
        cache: Optional[Cache] = None
    ):
        self.nps_addresses = nps_addresses or {}
        self.ledger_endpoint = ledger_endpoint
        self._cache = cache

    @property
    def cache(self) -> Cache:
        if self._cache is None:
            os.makedirs(CACHE_DIRS["staking_ledgers"], exist_ok=True)
            self._cache = Cache(directory=CACHE_DIRS["staking_ledgers"])
        return self._cache

    def get_stakes(self, key: str, ledger_hash: str) -> Tuple[List[Staker], int]:
        entries = self._get_ledger_entries(key, ledger_hash)

        stakers = []
        for entry in entries:
            public_key = entry['publicKey']
            if public_key in self.nps_addresses:
                share_class, share_owner = ShareClass.NPS, self.nps_addresses[public_key]
            else:
                share_class, share_owner = ShareClass.COMMON, None
            staker = Staker.from_dict({**entry, 'shareClass': share_class.value, 'shareOwner': share_owner})
            stakers.append(staker)

        total_stake = sum(s.staking_balance for s in stakers)
        nps_count = sum(1 for s in stakers if s.share_class == ShareClass.NPS)
        bt.logging.info(f"Loaded {len(stakers)} stakers ({nps_count} NPS) from ledger {ledger_hash}")
        return stakers, total_stake

    def _get_ledger_entries(self, key: str, ledger_hash: str) -> List[Dict[str, Any]]:
        cache_key = f"{ledger_hash}:{key}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            bt.logging.debug(f"Using cached staking ledger {ledger_hash}")
            return cached

        url = f"{self.ledger_endpoint}/{ledger_hash}"
        params = {"delegate": key}
        try:
            data = fetch_json(url, params=params)
        except requests.exceptions.RequestException as e:
            log_and_raise_api_error(e, endpoint=url, params=params, context="Staking ledger fetch")

        entries = data.get("stakes") or []
        # Ledgers still being indexed come back empty and must be fetched again
        if entries:
            self.cache.set(cache_key, entries)
        else:
            bt.logging.warning(f"Staking ledger {ledger_hash} has no delegations for {key}")
        return entries
