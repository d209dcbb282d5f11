"""Utility helpers for scs-metadata."""

from .output import OutputFormatter

__all__ = ["OutputFormatter"]
