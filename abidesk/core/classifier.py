"""Read-only versus mutating classification of ABI functions."""

from __future__ import annotations

from .models import Classification, FunctionDescriptor

READ_ONLY_MUTABILITIES = frozenset({"pure", "view"})


def classify(descriptor: FunctionDescriptor) -> Classification:
    """Only ``pure`` and ``view`` are simulated; anything else must be signed."""

    if descriptor.state_mutability in READ_ONLY_MUTABILITIES:
        return Classification.READ_ONLY
    return Classification.MUTATING


def is_read_only(descriptor: FunctionDescriptor) -> bool:
    return classify(descriptor) is Classification.READ_ONLY


__all__ = ["READ_ONLY_MUTABILITIES", "classify", "is_read_only"]
