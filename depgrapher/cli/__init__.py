"""Command implementations for the depgrapher CLI."""

from depgrapher.cli.render import render_command

__all__ = ["render_command"]
