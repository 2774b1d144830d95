"""Constant-product liquidity pool.

The pool holds a native reserve and a token reserve priced against each
other by x * y = k. Unlike a live Uniswap-style pool, k is fixed when the
pool is created and never recomputed, so every trade is priced against the
original invariant and floor rounding only ever leaves value in the pool.

Quote functions (simulate_buy, simulate_sell, tokens_for_native) never touch
pool state. Execution functions (buy, sell, buy_with_native) share the same
math and commit the new reserves only after every check has passed.
"""

from __future__ import annotations

import structlog

from cpmm_engine.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpmm_engine.errors import InsufficientPoolFunds, InvalidAmount, Overflow, SlippageExceeded
from cpmm_engine.models import PoolSnapshot
from cpmm_engine.safe_int import S
from cpmm_engine.search import additional_tokens_for_desired_native

logger = structlog.get_logger()


def _check_type(value: object, name: str) -> None:
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


def _require_amount(value: int, name: str, reserve_max: int) -> int:
    """Validate a strictly positive amount that fits the reserve width."""
    _check_type(value, name)
    if value <= 0:
        raise InvalidAmount(f"{name} must be positive, got {value}")
    if value > reserve_max:
        raise Overflow(f"{name} exceeds {reserve_max}")
    return value


def _require_bound(value: int | None, name: str, reserve_max: int) -> int | None:
    """Validate an optional slippage bound. Zero is a valid bound."""
    if value is None:
        return None
    _check_type(value, name)
    if value < 0:
        raise InvalidAmount(f"{name} cannot be negative: {value}")
    if value > reserve_max:
        raise Overflow(f"{name} exceeds {reserve_max}")
    return value


class LiquidityPool:
    """Two-asset constant-product pool with a fixed invariant.

    Args:
        native_reserve: Initial native reserve, must be positive
        token_reserve: Initial token reserve, must be positive
        config: Width and guard settings (default: DEFAULT_POOL_CONFIG)

    Raises:
        InvalidAmount: If either reserve is zero
        Overflow: If a reserve does not fit the configured width
    """

    __slots__ = ("_config", "_initial_token_reserve", "_native_reserve", "_token_reserve", "_k")

    def __init__(
        self,
        native_reserve: int,
        token_reserve: int,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> None:
        _require_amount(native_reserve, "native_reserve", config.reserve_max)
        _require_amount(token_reserve, "token_reserve", config.reserve_max)

        self._config = config
        self._initial_token_reserve = token_reserve
        self._native_reserve = native_reserve
        self._token_reserve = token_reserve
        # Two reserve-width values always fit the doubled product width
        self._k = (S(native_reserve) * S(token_reserve)).to_uint(config.product_bits)

    # --- Readers ---

    @property
    def config(self) -> PoolConfig:
        return self._config

    @property
    def native_reserve(self) -> int:
        return self._native_reserve

    @property
    def token_reserve(self) -> int:
        return self._token_reserve

    @property
    def initial_token_reserve(self) -> int:
        return self._initial_token_reserve

    @property
    def constant_product(self) -> int:
        return self._k

    # --- Value semantics ---

    def copy(self) -> LiquidityPool:
        """Return an independent copy of the pool.

        All fields are plain ints, so the copy shares no mutable state with
        the original. The (frozen) config object is shared.
        """
        clone = LiquidityPool.__new__(LiquidityPool)
        clone._config = self._config
        clone._initial_token_reserve = self._initial_token_reserve
        clone._native_reserve = self._native_reserve
        clone._token_reserve = self._token_reserve
        clone._k = self._k
        return clone

    __copy__ = copy

    def __deepcopy__(self, memo: dict[int, object]) -> LiquidityPool:
        return self.copy()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LiquidityPool):
            return NotImplemented
        return (
            self._native_reserve == other._native_reserve
            and self._token_reserve == other._token_reserve
            and self._initial_token_reserve == other._initial_token_reserve
            and self._k == other._k
            and self._config == other._config
        )

    # Mutable, so not hashable
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"LiquidityPool(native_reserve={self._native_reserve}, "
            f"token_reserve={self._token_reserve}, "
            f"constant_product={self._k})"
        )

    # --- Prices ---

    def market_price(self) -> float:
        """Reference price of one token in native units.

        Anchored to the token reserve at creation, not the live one:
        native_reserve / initial_token_reserve.
        """
        return self._native_reserve / self._initial_token_reserve

    def price_impact(self, token_amount: int) -> float:
        """Fractional price change caused by buying token_amount tokens.

        Compares market_price() to the post-trade spot price
        new_native_reserve / new_token_reserve.

        Without strict_price_impact the amount is not checked against the
        reserve: a token_amount above the reserve raises Underflow and one
        equal to it raises DivisionByZero.

        Raises:
            InvalidAmount: Strict mode only, if token_amount is zero
            InsufficientPoolFunds: Strict mode only, if token_amount would
                empty the token reserve
        """
        _check_type(token_amount, "token_amount")
        if self._config.strict_price_impact:
            _require_amount(token_amount, "token_amount", self._config.reserve_max)
            if token_amount >= self._token_reserve:
                raise InsufficientPoolFunds(
                    f"token_amount {token_amount} >= token_reserve {self._token_reserve}"
                )

        initial_price = self.market_price()
        new_token_reserve = S(self._token_reserve) - S(token_amount)
        new_native_reserve = S(self._k) // new_token_reserve
        new_price = new_native_reserve.value / new_token_reserve.value
        return (new_price - initial_price) / initial_price

    def integrity_drift(self) -> float:
        """Relative gap between the live product and k.

        (native_reserve * token_reserve - k) / k. Never positive: floor
        division loses value to the pool, never to the trader.
        """
        live = self._native_reserve * self._token_reserve
        return (live - self._k) / self._k

    # --- Shared formulas ---

    def _quote_buy(self, token_amount: int) -> tuple[int, int, int]:
        """Price removing token_amount tokens.

        Returns:
            Tuple of (native_cost, new_native_reserve, new_token_reserve)
        """
        reserve_max = self._config.reserve_max
        _require_amount(token_amount, "token_amount", reserve_max)

        new_token_reserve = S(self._token_reserve).checked_sub(token_amount)
        if new_token_reserve is None or not new_token_reserve:
            raise InsufficientPoolFunds(
                f"token_amount {token_amount} >= token_reserve {self._token_reserve}"
            )

        new_native_reserve = S(self._k).checked_div(new_token_reserve)
        if new_native_reserve is None:
            raise Overflow("division by zero token reserve")
        if not new_native_reserve.fits(self._config.reserve_bits):
            raise Overflow(f"native reserve {new_native_reserve} exceeds {reserve_max}")

        native_cost = new_native_reserve.checked_sub(self._native_reserve)
        if native_cost is None:
            raise Overflow(f"native reserve {new_native_reserve} below {self._native_reserve}")

        return native_cost.value, new_native_reserve.value, new_token_reserve.value

    def _quote_sell(self, token_amount: int) -> tuple[int, int, int]:
        """Price adding token_amount tokens.

        Returns:
            Tuple of (native_payout, new_native_reserve, new_token_reserve)
        """
        reserve_max = self._config.reserve_max
        _require_amount(token_amount, "token_amount", reserve_max)
        if token_amount > self._token_reserve:
            raise InsufficientPoolFunds(
                f"token_amount {token_amount} > token_reserve {self._token_reserve}"
            )

        new_token_reserve = S(self._token_reserve).checked_add(
            token_amount, self._config.reserve_bits
        )
        if new_token_reserve is None:
            raise Overflow(f"token reserve + {token_amount} exceeds {reserve_max}")

        new_native_reserve = S(self._k).checked_div(new_token_reserve)
        if new_native_reserve is None:
            raise Overflow("division by zero token reserve")
        if not new_native_reserve:
            raise InsufficientPoolFunds("sale would empty the native reserve")

        native_payout = S(self._native_reserve).checked_sub(new_native_reserve)
        if native_payout is None:
            raise Overflow(f"native reserve {new_native_reserve} above {self._native_reserve}")

        return native_payout.value, new_native_reserve.value, new_token_reserve.value

    # --- Quote functions ---

    def simulate_buy(self, token_amount: int, min_native: int | None = None) -> int:
        """Native cost of buying token_amount tokens, without trading.

        Raises:
            InvalidAmount: If token_amount is zero
            InsufficientPoolFunds: If token_amount would empty the token reserve
            Overflow: If the post-trade native reserve leaves the reserve width
            SlippageExceeded: If the cost is below min_native
        """
        native_cost, _, _ = self._quote_buy(token_amount)
        min_native = _require_bound(min_native, "min_native", self._config.reserve_max)
        if min_native is not None and native_cost < min_native:
            raise SlippageExceeded(f"cost {native_cost} < min_native {min_native}")
        return native_cost

    def simulate_sell(self, token_amount: int, max_native: int | None = None) -> int:
        """Native payout for selling token_amount tokens, without trading.

        Raises:
            InvalidAmount: If token_amount is zero
            InsufficientPoolFunds: If token_amount exceeds the token reserve
            Overflow: If the new token reserve leaves the reserve width
            SlippageExceeded: If the payout is above max_native
        """
        native_payout, _, _ = self._quote_sell(token_amount)
        max_native = _require_bound(max_native, "max_native", self._config.reserve_max)
        if max_native is not None and native_payout > max_native:
            raise SlippageExceeded(f"payout {native_payout} > max_native {max_native}")
        return native_payout

    def tokens_for_native(self, native_amount: int) -> int:
        """Tokens that native_amount of native buys at the current reserves.

        new_native_reserve = native_reserve + native_amount
        new_token_reserve = k // new_native_reserve
        result = token_reserve - new_token_reserve

        Raises:
            InvalidAmount: If native_amount is zero
            Overflow: If the new native reserve leaves the reserve width
        """
        reserve_max = self._config.reserve_max
        _require_amount(native_amount, "native_amount", reserve_max)

        new_native_reserve = S(self._native_reserve).checked_add(
            native_amount, self._config.reserve_bits
        )
        if new_native_reserve is None:
            raise Overflow(f"native reserve + {native_amount} exceeds {reserve_max}")

        new_token_reserve = S(self._k).checked_div(new_native_reserve)
        if new_token_reserve is None:
            raise Overflow("division by zero native reserve")

        tokens = S(self._token_reserve).checked_sub(new_token_reserve)
        if tokens is None:
            raise Overflow(f"token reserve {new_token_reserve} above {self._token_reserve}")
        return tokens.value

    # --- Execution functions ---

    def buy(self, token_amount: int, max_native: int | None = None) -> int:
        """Buy token_amount tokens from the pool.

        Args:
            token_amount: Tokens to take out of the pool
            max_native: Optional cap on the native spent

        Returns:
            Native spent (added to the native reserve)

        Raises:
            InvalidAmount: If token_amount is zero
            InsufficientPoolFunds: If token_amount would empty the token reserve
            Overflow: If the post-trade native reserve leaves the reserve width
            SlippageExceeded: If the cost exceeds max_native
        """
        native_spent, new_native_reserve, new_token_reserve = self._quote_buy(token_amount)
        max_native = _require_bound(max_native, "max_native", self._config.reserve_max)
        if max_native is not None and native_spent > max_native:
            logger.warning(
                "pool_slippage_exceeded",
                side="buy",
                token_amount=token_amount,
                native=native_spent,
                max_native=max_native,
            )
            raise SlippageExceeded(f"cost {native_spent} > max_native {max_native}")

        self._native_reserve = new_native_reserve
        self._token_reserve = new_token_reserve
        logger.debug(
            "pool_buy",
            token_amount=token_amount,
            native_spent=native_spent,
            native_reserve=new_native_reserve,
            token_reserve=new_token_reserve,
        )
        return native_spent

    def sell(self, token_amount: int, min_native: int | None = None) -> int:
        """Sell token_amount tokens into the pool.

        Args:
            token_amount: Tokens to put into the pool
            min_native: Optional floor on the native received

        Returns:
            Native received (removed from the native reserve)

        Raises:
            InvalidAmount: If token_amount is zero
            InsufficientPoolFunds: If token_amount exceeds the token reserve
            Overflow: If the new token reserve leaves the reserve width
            SlippageExceeded: If the payout is below min_native
        """
        native_received, new_native_reserve, new_token_reserve = self._quote_sell(token_amount)
        min_native = _require_bound(min_native, "min_native", self._config.reserve_max)
        if min_native is not None and native_received < min_native:
            logger.warning(
                "pool_slippage_exceeded",
                side="sell",
                token_amount=token_amount,
                native=native_received,
                min_native=min_native,
            )
            raise SlippageExceeded(f"payout {native_received} < min_native {min_native}")

        self._native_reserve = new_native_reserve
        self._token_reserve = new_token_reserve
        logger.debug(
            "pool_sell",
            token_amount=token_amount,
            native_received=native_received,
            native_reserve=new_native_reserve,
            token_reserve=new_token_reserve,
        )
        return native_received

    def buy_with_native(self, native_amount: int) -> int:
        """Spend native_amount of native on tokens.

        Composes tokens_for_native() and an unbounded buy(); errors from
        either propagate.

        Returns:
            Tokens bought
        """
        token_amount = self.tokens_for_native(native_amount)
        native_spent = self.buy(token_amount)
        logger.debug(
            "pool_buy_with_native",
            native_amount=native_amount,
            token_amount=token_amount,
            native_spent=native_spent,
        )
        return token_amount

    # --- Inverse solver ---

    def additional_tokens_for_desired_native(self, sell_tokens: int, desired_native: int) -> int:
        """Tokens to buy first so that selling sell_tokens yields desired_native.

        See cpmm_engine.search.additional_tokens_for_desired_native.
        """
        return additional_tokens_for_desired_native(self, sell_tokens, desired_native)

    def snapshot(self) -> PoolSnapshot:
        """Immutable read-only view of the pool."""
        return PoolSnapshot(
            native_reserve=self._native_reserve,
            token_reserve=self._token_reserve,
            initial_token_reserve=self._initial_token_reserve,
            constant_product=self._k,
            market_price=self.market_price(),
            integrity_drift=self.integrity_drift(),
        )
