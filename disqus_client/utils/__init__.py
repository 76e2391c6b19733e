"""Utility helpers for the Disqus client."""
