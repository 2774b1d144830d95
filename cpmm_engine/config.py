"""Pool engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from cpmm_engine.constants import RESERVE_BITS
from cpmm_engine.safe_int import uint_max

_TRUTHY = ("true", "1", "yes")
_FALSY = ("false", "0", "no", "")


@dataclass(frozen=True)
class PoolConfig:
    """Configuration shared by a pool and every copy of it.

    Attributes:
        reserve_bits: Width of reserves and trade amounts, at most 64 (default: 64).
            The constant product is held at twice this width.
        strict_price_impact: If True, price_impact() rejects amounts that
            would empty the token reserve (and zero amounts) with a pool
            error. If False, it performs the raw computation and lets the
            arithmetic error surface.
    """

    reserve_bits: int = RESERVE_BITS
    strict_price_impact: bool = False

    def __post_init__(self) -> None:
        # Snapshots validate against the 64-bit reserve width
        if not 0 < self.reserve_bits <= RESERVE_BITS:
            raise ValueError(
                f"reserve_bits must be between 1 and {RESERVE_BITS}, got {self.reserve_bits}"
            )

    @property
    def product_bits(self) -> int:
        return 2 * self.reserve_bits

    @property
    def reserve_max(self) -> int:
        return uint_max(self.reserve_bits)

    @property
    def product_max(self) -> int:
        return uint_max(self.product_bits)

    @classmethod
    def from_env(cls) -> PoolConfig:
        """Build a config from environment variables.

        - CPMM_RESERVE_BITS: reserve width in bits (default: 64)
        - CPMM_STRICT_PRICE_IMPACT: guard price_impact inputs (default: false)

        Raises:
            ValueError: If a variable holds an unparseable value
        """
        raw_bits = os.environ.get("CPMM_RESERVE_BITS", str(RESERVE_BITS))
        try:
            reserve_bits = int(raw_bits)
        except ValueError as err:
            raise ValueError(f"CPMM_RESERVE_BITS must be an integer: '{raw_bits}'") from err

        raw_strict = os.environ.get("CPMM_STRICT_PRICE_IMPACT", "false").strip().lower()
        if raw_strict in _TRUTHY:
            strict = True
        elif raw_strict in _FALSY:
            strict = False
        else:
            raise ValueError(f"CPMM_STRICT_PRICE_IMPACT must be a boolean: '{raw_strict}'")

        return cls(reserve_bits=reserve_bits, strict_price_impact=strict)


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
