"""Command-line interface for stockchat."""

from .app import app, main

__all__ = ["app", "main"]
