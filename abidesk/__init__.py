"""Inspect contract ABIs, call their functions, and sign typed data."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
