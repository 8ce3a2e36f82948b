"""
Global pytest configuration and fixtures for fast test execution.

This file mocks the archive proxy so no test makes a real network request,
and provides the block/staker fixtures shared by the payout tests.
"""

import pytest
from unittest.mock import patch, Mock

from minapay.payout.reward_engine.models import Block, Staker, ShareClass


@pytest.fixture(autouse=True)
def mock_external_apis():
    """
    Auto-use fixture that mocks all external API calls to speed up tests.
    This prevents real network requests during testing.
    """
    with patch('requests.get') as mock_requests_get:

        # Mock generic requests
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = {}
        mock_response.raise_for_status.return_value = None
        mock_requests_get.return_value = mock_response

        yield {
            'requests': mock_requests_get
        }


@pytest.fixture(autouse=True)
def disable_delays():
    """
    Auto-use fixture that disables sleep calls and retry delays during testing.
    tenacity sleeps through time.sleep, so retries become immediate.
    """
    with patch('time.sleep') as mock_sleep:
        mock_sleep.return_value = None
        yield


@pytest.fixture
def pool_key():
    return "B62qpoolOperatorKey"


@pytest.fixture
def make_block(pool_key):
    """Factory for archive blocks won by the pool."""
    def _make_block(height=100, coinbase=720000000000, winner="B62qwinner", **kwargs):
        values = dict(
            blockheight=height,
            statehash=f"3NK{height}",
            stakingledgerhash="jxLedger1",
            blockdatetime=1700000000000 + height,
            globalslotsincegenesis=1000 + height,
            slot=height,
            coinbase=coinbase,
            feetransfertoreceiver=10000000,
            feetransferfromcoinbase=0,
            usercommandtransactionfees=10000000,
            creatorpublickey=pool_key,
            winnerpublickey=winner,
            receiverpublickey=pool_key,
        )
        values.update(kwargs)
        return Block(**values)
    return _make_block


@pytest.fixture
def make_staker():
    """Factory for delegators; default is a locked Common staker."""
    def _make_staker(public_key, balance=1000, share_class=ShareClass.COMMON, untimed_after_slot=10 ** 9, **kwargs):
        return Staker(
            public_key=public_key,
            share_class=share_class,
            staking_balance=balance,
            untimed_after_slot=untimed_after_slot,
            **kwargs
        )
    return _make_staker


# Performance optimization: disable logging during tests unless explicitly enabled
@pytest.fixture(autouse=True)
def fast_logging():
    """
    Reduce logging verbosity during tests for better performance.
    """
    import logging
    import bittensor as bt

    # Set higher log level to reduce output during tests
    logging.getLogger().setLevel(logging.WARNING)
    bt.logging.set_debug(False)

    yield

    # Restore normal logging after tests
    logging.getLogger().setLevel(logging.INFO)
