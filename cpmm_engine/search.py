"""Inverse solver: how many tokens to buy before a sale.

Buying tokens first removes tokens from the pool and raises the native price
per token, so the proceeds of a later fixed-size sale never decrease as the
preceding buy grows. That monotonicity lets a binary search over the buy
size find the smallest probe that reaches a desired payout.

Each probe runs on a disposable copy of the pool; the live pool is never
touched.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from cpmm_engine.errors import InvalidAmount, Overflow
from cpmm_engine.safe_int import S

if TYPE_CHECKING:
    from cpmm_engine.pool import LiquidityPool

logger = structlog.get_logger()


def sale_after_buy(pool: LiquidityPool, buy_tokens: int, sell_tokens: int) -> int:
    """Native received for selling sell_tokens after first buying buy_tokens.

    The buy goes through the regular execution path on a copy, so a buy of
    zero raises InvalidAmount like any other zero trade.
    """
    trial = pool.copy()
    trial.buy(buy_tokens)
    return trial.simulate_sell(sell_tokens)


def additional_tokens_for_desired_native(
    pool: LiquidityPool,
    sell_tokens: int,
    desired_native: int,
) -> int:
    """Smallest probed buy size after which selling sell_tokens pays desired_native.

    Binary search over [0, token_reserve]:
    - exact match returns immediately
    - too little native raises the lower bound
    - too much native records the probe as the best guess and lowers the
      upper bound

    The loop stops once the bracket is one unit wide or the bounds cross, so
    without an exact match the result is the last overshooting probe, not a
    re-verified minimum. If no probe overshoots, token_reserve is returned.

    Args:
        pool: Pool to price against (not modified)
        sell_tokens: Tokens to be sold after the buy
        desired_native: Native the sale should yield

    Returns:
        Tokens to buy first

    Raises:
        InvalidAmount: If sell_tokens or desired_native is zero, or the search
            narrows to a probe of zero tokens
        InsufficientPoolFunds: If a probe would empty a reserve
        Overflow: If narrowing a bound leaves the reserve width
    """
    if sell_tokens <= 0 or desired_native <= 0:
        raise InvalidAmount("sell_tokens and desired_native must be positive")

    reserve_bits = pool.config.reserve_bits
    low = 0
    high = pool.token_reserve
    best_guess = high

    while low <= high:
        mid = low + (high - low) // 2
        native_received = sale_after_buy(pool, mid, sell_tokens)
        logger.debug(
            "solver_probe",
            low=low,
            high=high,
            mid=mid,
            native_received=native_received,
            desired_native=desired_native,
        )

        if native_received == desired_native:
            logger.debug("solver_exact_match", tokens=mid)
            return mid

        if native_received < desired_native:
            next_low = S(mid).checked_add(1, reserve_bits)
            if next_low is None:
                raise Overflow(f"lower bound {mid} + 1 exceeds reserve width")
            low = next_low.value
        else:
            best_guess = mid
            next_high = S(mid).checked_sub(1)
            if next_high is None:
                raise Overflow("upper bound below zero")
            high = next_high.value

        if high - low <= 1:
            break

    logger.debug("solver_best_guess", tokens=best_guess)
    return best_guess
