"""Command line interface for the Disqus client."""

from .main import app, main


__all__ = ["app", "main"]
