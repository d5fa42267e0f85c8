"""Errors raised for out-of-contract arguments."""


class InvalidArgumentError(ValueError):
    """An argument is outside the accepted range (a caller bug, not bad data)."""
