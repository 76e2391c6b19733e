"""CLI helper utilities."""

from rich_toolkit import RichToolkit, RichToolkitTheme
from rich_toolkit.styles import TaggedStyle


def get_rich_toolkit() -> RichToolkit:
    theme = RichToolkitTheme(
        style=TaggedStyle(tag_width=11),
        theme={
            "tag.title": "white on #2e9fff",
            "tag": "white on #1d6fb8",
            "placeholder": "grey85",
            "text": "white",
            "selected": "#1d6fb8",
            "result": "grey85",
            "progress": "on #1d6fb8",
            "error": "bold red",
            "success": "bold green",
            "warning": "bold yellow",
            "info": "blue",
            "version": "cyan",
            "auth": "magenta",
            "api": "bright_cyan",
        },
    )

    return RichToolkit(theme=theme)


def parse_params(values: list[str] | None) -> dict[str, str]:
    """Parse repeated ``key=value`` options into a mapping.

    Raises:
        ValueError: If an entry has no ``=``
    """
    params: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Expected key=value, got {item!r}")
        params[key] = value
    return params
