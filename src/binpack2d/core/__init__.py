"""Data model and error types for the packing engine."""

from .errors import (
    CapacityViolationError,
    ConfigurationError,
    InfeasibleItemError,
    InvalidInputError,
    MemberNotFoundError,
    PackingError,
)
from .models import Container, Rectangle, SizeBounds, Solution

__all__ = [
    # Models
    "SizeBounds",
    "Rectangle",
    "Container",
    "Solution",
    # Errors
    "PackingError",
    "ConfigurationError",
    "InvalidInputError",
    "MemberNotFoundError",
    "InfeasibleItemError",
    "CapacityViolationError",
]
