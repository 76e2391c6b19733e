"""XDG Base Directory Specification utilities."""

import os
from pathlib import Path


def get_xdg_config_home() -> Path:
    """Get the XDG_CONFIG_HOME directory.

    Returns:
        Path to the XDG config directory. Falls back to ~/.config if not set.
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home)
    return Path.home() / ".config"


def get_disqus_config_dir() -> Path:
    """Directory holding the client's configuration and stored identity."""
    return get_xdg_config_home() / "disqus"
