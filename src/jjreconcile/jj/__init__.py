"""Jujutsu repository access."""

from jjreconcile.jj.base import Repository
from jjreconcile.jj.repository import JJRepository

__all__ = ["Repository", "JJRepository"]
