"""Raw storm data → cleaned, dated, dollar-normalised events."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
