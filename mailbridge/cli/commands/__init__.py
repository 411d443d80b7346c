"""CLI commands module."""

from . import compose, config, decode

__all__ = ["decode", "compose", "config"]
