"""Command-line interface for Trial Clock."""

from .main import app, main

__all__ = ["app", "main"]
