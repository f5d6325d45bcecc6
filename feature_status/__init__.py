"""Classify upstream feature flags by cluster activation and emit a code listing."""

from __future__ import annotations

__version__ = "0.1.0"
