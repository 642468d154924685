"""Emoji asset dev console."""

__version__ = "0.1.0"
