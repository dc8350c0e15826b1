"""CLI layer: command groups and shared console helpers."""

from .commands import register_commands

__all__ = ["register_commands"]
