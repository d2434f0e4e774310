"""Marshmallow schemas used by the HTTP layer."""

from __future__ import annotations

from .auth import TokenPairSchema, WhoAmISchema

__all__ = ["TokenPairSchema", "WhoAmISchema"]
