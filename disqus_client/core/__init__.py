"""Core infrastructure shared across the client."""
