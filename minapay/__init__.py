"""Staking pool payout calculator for Mina block producers."""

__version__ = "1.0.0"
