"""Exceptions raised by the EDFL cavity solver."""


class InvalidConfiguration(ValueError):
    """Raised when a cavity configuration is rejected before integration."""
