"""Pydantic read models for pool state.

These describe a pool to an embedding system (logs, dashboards, API
responses). They are views only: a pool cannot be rebuilt from a snapshot.
"""

from collections.abc import Callable
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from cpmm_engine.constants import U64_MAX, U128_MAX


def _uint_validator(max_value: int, name: str) -> Callable[[Any], int]:
    def validate(value: Any) -> int:
        # bool is an int subclass but never a valid amount
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{name} must be an int, got {type(value).__name__}")
        if value < 0:
            raise ValueError(f"{name} cannot be negative: {value}")
        if value > max_value:
            raise ValueError(f"{name} overflow: {value} > {max_value}")
        return value

    return validate


# 64-bit unsigned reserve or trade amount
Uint64 = Annotated[
    int,
    BeforeValidator(_uint_validator(U64_MAX, "Uint64")),
    Field(description="64-bit unsigned integer"),
]

# 128-bit unsigned product
Uint128 = Annotated[
    int,
    BeforeValidator(_uint_validator(U128_MAX, "Uint128")),
    Field(description="128-bit unsigned integer"),
]


class PoolSnapshot(BaseModel):
    """Point-in-time view of a LiquidityPool."""

    native_reserve: Uint64 = Field(description="Current native reserve")
    token_reserve: Uint64 = Field(description="Current token reserve")
    initial_token_reserve: Uint64 = Field(
        description="Token reserve at creation, denominator of market_price",
    )
    constant_product: Uint128 = Field(description="Invariant k fixed at creation")
    market_price: float = Field(description="native_reserve / initial_token_reserve")
    integrity_drift: float = Field(
        description="(native_reserve * token_reserve - k) / k, never positive",
    )

    model_config = {"frozen": True}
