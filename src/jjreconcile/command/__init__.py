"""CLI command modules for jjreconcile."""

from jjreconcile.command.resolve import ResolveCommand

__all__ = ["ResolveCommand"]
