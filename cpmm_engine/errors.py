"""Pool error classes.

Every failure of a pool operation is one of these four kinds. They are all
recoverable by the caller and no operation mutates pool state before
raising one.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    default_message = "Pool error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        message = self.default_message
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SlippageExceeded(PoolError):
    """Computed trade outcome violates the caller's bound."""

    default_message = "Slippage too high"


class InsufficientPoolFunds(PoolError):
    """Trade would remove more of a reserve than the pool holds."""

    default_message = "Invalid funds in the pool"


class InvalidAmount(PoolError):
    """Zero (or negative) amount where a positive one is required."""

    default_message = "Invalid amount"


class Overflow(PoolError):
    """Checked arithmetic step overflowed its width or divided by zero."""

    default_message = "Overflow"
