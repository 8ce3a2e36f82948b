"""
Payout calculation system for the Mina staking pool.

This module provides the three-pool reward allocation engine, the final
transfer-list rewriting, and the orchestrator that ties them to block and
staking-ledger sources.
"""

from .orchestrator import PaymentOrchestrator

__all__ = [
    "PaymentOrchestrator",
]

__version__ = "1.0.0"
