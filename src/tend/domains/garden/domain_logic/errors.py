"""Exceptions raised by the garden engine."""

from __future__ import annotations


class GardenError(Exception):
    """Base class for relationship garden errors."""


class InvalidArgumentError(GardenError, ValueError):
    """Raised when a caller passes a parameter outside its valid range."""


class ContactParseError(GardenError, ValueError):
    """Raised when a host contact record cannot be parsed."""
