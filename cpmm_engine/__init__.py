"""Constant-product AMM pool engine."""

from cpmm_engine.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpmm_engine.errors import (
    InsufficientPoolFunds,
    InvalidAmount,
    Overflow,
    PoolError,
    SlippageExceeded,
)
from cpmm_engine.models import PoolSnapshot
from cpmm_engine.pool import LiquidityPool
from cpmm_engine.search import additional_tokens_for_desired_native

__version__ = "0.1.0"
__all__ = [
    "LiquidityPool",
    "PoolConfig",
    "DEFAULT_POOL_CONFIG",
    "PoolSnapshot",
    "PoolError",
    "InvalidAmount",
    "InsufficientPoolFunds",
    "Overflow",
    "SlippageExceeded",
    "additional_tokens_for_desired_native",
    "__version__",
]
