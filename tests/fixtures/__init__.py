"""Test fixtures package for privxman.

- directory: recording directory client and sample user/role/settings data

Usage:
    from tests.fixtures.directory import RecordingDirectoryClient
"""

from .directory import ROLES, SETTINGS, USERS, RecordingDirectoryClient

__all__ = ["RecordingDirectoryClient", "USERS", "ROLES", "SETTINGS"]
