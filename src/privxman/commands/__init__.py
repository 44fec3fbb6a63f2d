"""Command modules for privxman."""

from . import profile, users

__all__ = ["profile", "users"]
