"""Tests for PoolConfig."""

import dataclasses

import pytest

from cpmm_engine import DEFAULT_POOL_CONFIG, LiquidityPool, PoolConfig
from cpmm_engine.constants import U64_MAX, U128_MAX


class TestPoolConfig:
    """Tests for PoolConfig defaults and validation."""

    def test_defaults(self):
        assert DEFAULT_POOL_CONFIG.reserve_bits == 64
        assert DEFAULT_POOL_CONFIG.product_bits == 128
        assert DEFAULT_POOL_CONFIG.reserve_max == U64_MAX
        assert DEFAULT_POOL_CONFIG.product_max == U128_MAX
        assert DEFAULT_POOL_CONFIG.strict_price_impact is False

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_POOL_CONFIG.reserve_bits = 32  # type: ignore[misc]

    def test_narrow_width(self):
        config = PoolConfig(reserve_bits=32)
        assert config.reserve_max == 2**32 - 1
        assert config.product_bits == 64

    @pytest.mark.parametrize("bits", [0, -8, 65])
    def test_invalid_width_rejected(self, bits):
        with pytest.raises(ValueError, match="reserve_bits"):
            PoolConfig(reserve_bits=bits)

    def test_pool_uses_default(self):
        assert LiquidityPool(10, 10).config is DEFAULT_POOL_CONFIG


class TestFromEnv:
    """Tests for PoolConfig.from_env()."""

    def test_defaults_without_env(self, monkeypatch):
        monkeypatch.delenv("CPMM_RESERVE_BITS", raising=False)
        monkeypatch.delenv("CPMM_STRICT_PRICE_IMPACT", raising=False)
        assert PoolConfig.from_env() == PoolConfig()

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("CPMM_RESERVE_BITS", "32")
        monkeypatch.setenv("CPMM_STRICT_PRICE_IMPACT", "yes")
        config = PoolConfig.from_env()
        assert config.reserve_bits == 32
        assert config.strict_price_impact is True

    def test_strict_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("CPMM_STRICT_PRICE_IMPACT", " TRUE ")
        assert PoolConfig.from_env().strict_price_impact is True

    def test_bad_bits(self, monkeypatch):
        monkeypatch.setenv("CPMM_RESERVE_BITS", "wide")
        with pytest.raises(ValueError, match="CPMM_RESERVE_BITS"):
            PoolConfig.from_env()

    def test_bad_strict(self, monkeypatch):
        monkeypatch.setenv("CPMM_RESERVE_BITS", "64")
        monkeypatch.setenv("CPMM_STRICT_PRICE_IMPACT", "maybe")
        with pytest.raises(ValueError, match="CPMM_STRICT_PRICE_IMPACT"):
            PoolConfig.from_env()
