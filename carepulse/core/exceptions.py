# carepulse/core/exceptions.py

from typing import Dict, Optional


class CarePulseError(Exception):
    """Base class for errors raised by the registries."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CarePulseError):
    """Malformed input, caught before any store call."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class NotFoundError(CarePulseError):
    """A referenced doctor, appointment, user or file does not exist."""


class StoreError(CarePulseError):
    """The document store or the object store rejected an operation."""


class ConfigurationError(CarePulseError):
    """Required environment values are missing."""
