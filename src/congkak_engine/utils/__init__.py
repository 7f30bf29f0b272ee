"""Utility modules for the Congkak engine."""

from .rich_display import GameDisplay, console, format_pit, setup_rich_logging

__all__ = [
    "GameDisplay",
    "console",
    "format_pit",
    "setup_rich_logging",
]
