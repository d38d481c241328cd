"""Utility helpers for the im.ge uploader."""

from __future__ import annotations

from .redact import redact

__all__ = ["redact"]
