"""Clustering service resources."""

from __future__ import annotations

from stratus.clustering import receivers

__all__ = ["receivers"]
