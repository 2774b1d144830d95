"""Tests for the PoolSnapshot read model."""

import pytest
from pydantic import ValidationError

from cpmm_engine import LiquidityPool, PoolSnapshot
from cpmm_engine.constants import U64_MAX
from cpmm_engine.models import _uint_validator


class TestPoolSnapshot:
    """Tests for LiquidityPool.snapshot()."""

    def test_snapshot_fields(self, small_pool):
        small_pool.buy(100)
        snapshot = small_pool.snapshot()

        assert snapshot.native_reserve == 1111
        assert snapshot.token_reserve == 900
        assert snapshot.initial_token_reserve == 1000
        assert snapshot.constant_product == 1_000_000
        assert snapshot.market_price == pytest.approx(1.111)
        assert snapshot.integrity_drift == pytest.approx((1111 * 900 - 1_000_000) / 1_000_000)

    def test_snapshot_is_frozen(self, small_pool):
        snapshot = small_pool.snapshot()
        with pytest.raises(ValidationError):
            snapshot.native_reserve = 1  # type: ignore[misc]

    def test_snapshot_detached_from_pool(self, small_pool):
        snapshot = small_pool.snapshot()
        small_pool.sell(100)
        assert snapshot.native_reserve == 1000

    def test_snapshot_of_max_pool(self):
        """k of two maximal reserves still fits the product field."""
        snapshot = LiquidityPool(U64_MAX, U64_MAX).snapshot()
        assert snapshot.constant_product == U64_MAX * U64_MAX

    def test_dump(self, small_pool):
        data = small_pool.snapshot().model_dump()
        assert data["token_reserve"] == 1000
        assert set(data) == {
            "native_reserve",
            "token_reserve",
            "initial_token_reserve",
            "constant_product",
            "market_price",
            "integrity_drift",
        }


class TestUintFields:
    """Tests for the fixed-width integer validators."""

    def _build(self, **overrides):
        fields = {
            "native_reserve": 1,
            "token_reserve": 1,
            "initial_token_reserve": 1,
            "constant_product": 1,
            "market_price": 1.0,
            "integrity_drift": 0.0,
        }
        fields.update(overrides)
        return PoolSnapshot(**fields)

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            self._build(native_reserve=-1)

    def test_u64_overflow_rejected(self):
        with pytest.raises(ValidationError, match="overflow"):
            self._build(token_reserve=U64_MAX + 1)

    def test_u128_accepts_wide_product(self):
        assert self._build(constant_product=U64_MAX + 1).constant_product == U64_MAX + 1

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an int"):
            self._build(native_reserve=True)

    def test_string_rejected(self):
        with pytest.raises(ValidationError, match="must be an int"):
            self._build(native_reserve="1000")

    def test_validator_callable(self):
        """The validator factory returns a plain int -> int callable."""
        validate = _uint_validator(255, "Uint8")
        assert validate(255) == 255
        with pytest.raises(ValueError, match="Uint8 overflow"):
            validate(256)
