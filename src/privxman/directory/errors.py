"""Errors raised by the user-directory client."""

from typing import Optional


class DirectoryError(Exception):
    """Base exception for failures talking to the user directory."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class DirectoryAPIError(DirectoryError):
    """The role-store answered with a non-success status."""

    def __init__(self, status_code: int, message: str, cause: Optional[Exception] = None):
        super().__init__(message, cause)
        self.status_code = status_code

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"


class DirectoryConnectionError(DirectoryError):
    """The request never produced a response (DNS, TLS, timeout, refused)."""

    pass
