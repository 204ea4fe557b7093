"""Markdown tables, line charts, and the final report document."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
