"""Numeric constants for the pool engine.

Reserves and trade amounts are 64-bit unsigned integers; the constant
product is carried at double that width so the invariant and the division
steps stay exact.
"""

# Width of reserves and trade amounts
RESERVE_BITS = 64
U64_MAX = 2**RESERVE_BITS - 1

# Width of the constant product (2 * RESERVE_BITS)
PRODUCT_BITS = 2 * RESERVE_BITS
U128_MAX = 2**PRODUCT_BITS - 1
