"""Clients for the archive proxy."""

from .archive_provider import (
    ArchiveBlockDataProvider,
    ArchiveStakeDataProvider,
    load_nps_addresses,
)

__all__ = [
    "ArchiveBlockDataProvider",
    "ArchiveStakeDataProvider",
    "load_nps_addresses",
]
