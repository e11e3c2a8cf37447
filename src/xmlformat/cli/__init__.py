"""Command-line interface for XML reformatting."""

from .main import main

__all__ = ["main"]
