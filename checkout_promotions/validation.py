"""Configuration guards for campaign, selector and discount constructors.

Each guard raises ``ConfigurationError`` with the given message, so a bad
campaign table fails when it is built rather than part-way through a cart.
"""

from collections.abc import Collection, Sized
from typing import Any

from .errors import ConfigurationError


def require_present(value: Any, error_msg: str) -> None:
    """Require that a collaborator (selector, discount) was supplied."""
    if value is None:
        raise ConfigurationError(error_msg)


def require_positive(quantity: int, error_msg: str) -> None:
    """Require a quantity of at least one (bundle sizes, buy/get counts)."""
    if quantity < 1:
        raise ConfigurationError(error_msg)


def require_non_negative(amount: Any, error_msg: str) -> None:
    """Require an amount, percentage or cap that is not below zero."""
    if amount < 0:
        raise ConfigurationError(error_msg)


def require_not_empty(entries: Sized, error_msg: str) -> None:
    """Require at least one bundle component or spend tier."""
    if len(entries) == 0:
        raise ConfigurationError(error_msg)


def require_one_of(value: Any, allowed: Collection[Any], error_msg: str) -> None:
    """Require one of the allowed option names; the message names the bad value."""
    if value not in allowed:
        raise ConfigurationError(f"{error_msg}: {value!r}")
