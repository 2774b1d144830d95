"""Test helpers module for shared test utilities."""

from tests.helpers.constants import (
    DEFAULT_NATIVE_RESERVE,
    DEFAULT_TOKEN_RESERVE,
    INTEGRITY_TOLERANCE,
    NATIVE_UNIT,
    TOKEN_UNIT,
)

__all__ = [
    "NATIVE_UNIT",
    "TOKEN_UNIT",
    "DEFAULT_NATIVE_RESERVE",
    "DEFAULT_TOKEN_RESERVE",
    "INTEGRITY_TOLERANCE",
]
