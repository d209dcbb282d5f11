"""CLI module for scs-metadata."""

from .main import main, cli

__all__ = ["main", "cli"]
