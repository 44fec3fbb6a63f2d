"""User command orchestration: option model, handlers and batching."""

from .errors import FatalUsageError, UsageError
from .handlers import (
    list_users,
    load_settings_patch,
    prepare_update_settings,
    search_external_users,
    set_user_mfa,
    show_settings,
    show_users,
    update_settings,
    user_roles,
)
from .models import MfaMode, UserOptions, split_ids

__all__ = [
    "MfaMode",
    "UserOptions",
    "split_ids",
    "UsageError",
    "FatalUsageError",
    "list_users",
    "search_external_users",
    "show_users",
    "show_settings",
    "update_settings",
    "load_settings_patch",
    "prepare_update_settings",
    "user_roles",
    "set_user_mfa",
]
