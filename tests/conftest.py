"""Pytest configuration and fixtures."""

import pytest

from cpmm_engine import LiquidityPool, PoolConfig
from tests.helpers import DEFAULT_NATIVE_RESERVE, DEFAULT_TOKEN_RESERVE


@pytest.fixture
def pool() -> LiquidityPool:
    """Default pool: 1 native against 1 billion tokens."""
    return LiquidityPool(DEFAULT_NATIVE_RESERVE, DEFAULT_TOKEN_RESERVE)


@pytest.fixture
def small_pool() -> LiquidityPool:
    """Pool with 1000 native, 1000 tokens (k = 1,000,000)."""
    return LiquidityPool(1000, 1000)


@pytest.fixture
def narrow_config() -> PoolConfig:
    """8-bit reserves, so width overflows are easy to reach."""
    return PoolConfig(reserve_bits=8)
