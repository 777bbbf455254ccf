from __future__ import annotations
from typing import Optional


class JsonShapeError(Exception):
    """Base class for jsonshape errors."""


class ShapeError(JsonShapeError, TypeError):
    """Raised when a type descriptor has no supported shape."""


class DecodeError(JsonShapeError, ValueError):
    """Raised when JSON does not match the requested target shape."""

    def __init__(
        self,
        message: str,
        path: str = "$",
        expected: Optional[str] = None,
        actual: Optional[str] = None,
    ):
        super().__init__(f"{path}: {message}")
        self.message = message
        self.path = path
        self.expected = expected
        self.actual = actual


class LeafConversionError(ValueError):
    """A scalar text could not be converted; re-raised by callers as DecodeError."""
