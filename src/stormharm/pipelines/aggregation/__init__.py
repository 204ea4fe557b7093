"""Event-type totals, ranked views, and per-year series."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
