"""Fatal errors raised while allocating block rewards.

Any of these aborts the whole run: no transactions derived from a failed
allocation may be sent.
"""


class PayoutCalculationError(RuntimeError):
    """Base class for data-integrity failures during payout calculation."""


class WinnerResolutionError(PayoutCalculationError):
    """Zero or several stakers match a block's winner public key."""

    def __init__(self, block_height: int, winner_public_key: str, matches: int):
        self.block_height = block_height
        self.winner_public_key = winner_public_key
        self.matches = matches
        super().__init__(
            f"Should have exactly 1 winner for block {block_height} "
            f"({winner_public_key}), found {matches}"
        )


class PoolInvarianceError(PayoutCalculationError):
    """A pool's effective stake sum does not match its expected total."""

    def __init__(self, pool: str, block_height: int, actual: int, expected: int):
        self.pool = pool
        self.block_height = block_height
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"{pool} pool effective stake {actual} does not equal expected {expected} "
            f"at block {block_height}"
        )


class UnknownShareClassError(PayoutCalculationError):
    """A staker's share class is neither Common nor NPS."""

    def __init__(self, public_key: str, share_class):
        self.public_key = public_key
        self.share_class = share_class
        super().__init__(f"Staker share class is unknown: {share_class!r} for {public_key}")
