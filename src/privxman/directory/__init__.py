"""User-directory (role-store) client for privxman."""

from .client import ClientSettings, DirectoryClient, RoleStoreClient
from .errors import DirectoryAPIError, DirectoryConnectionError, DirectoryError

__all__ = [
    "ClientSettings",
    "DirectoryClient",
    "RoleStoreClient",
    "DirectoryError",
    "DirectoryAPIError",
    "DirectoryConnectionError",
]
