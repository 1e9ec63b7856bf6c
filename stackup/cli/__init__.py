"""Command-line interface for stackup."""

from .main import main

__all__ = ["main"]
