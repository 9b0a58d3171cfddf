"""
Error types raised by the selections app.

- StoreUnavailable: the record store failed (network, database). Carries the
  original message; callers surface it and never retry.
- SelectionValidationError: a save was rejected before the store was touched.

Deleting rows that no longer exist is not an error and has no type here.
"""

from django.core.exceptions import ValidationError # pyright: ignore[reportMissingModuleSource]


class StoreUnavailable(Exception):
    """The record store could not complete an operation."""


class SelectionValidationError(ValidationError):
    """A save request violates the selection rules."""
