"""Command handlers for the ``users`` command group.

Each handler takes a directory client and the invocation's ``UserOptions``,
issues its remote calls in a fixed order and either returns the value to
display or raises. Handlers are fail-fast: the first error from the client
propagates unchanged and nothing after it is attempted. Handlers never print
and never exit the process; that is left to the CLI layer.
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Optional

from ..directory.client import DirectoryClient
from .batch import apply_each, fetch_each, join_values
from .errors import FatalUsageError, UsageError
from .models import MfaMode, UserOptions

logger = logging.getLogger(__name__)

MFA_MODE_REQUIRED = "you have to specify one of the following flags: --enable, --disable or --reset"


def _require_identifiers(options: UserOptions) -> List[str]:
    if not options.identifiers:
        raise UsageError("at least one user ID is required (--id)")
    return list(options.identifiers)


def _require_single_identifier(options: UserOptions) -> str:
    if len(options.identifiers) != 1:
        raise UsageError("exactly one user ID is required (--id)")
    return options.identifiers[0]


def load_settings_patch(path: Optional[Path]) -> Any:
    """
    Read a JSON settings patch from disk.

    Args:
        path: Path of the JSON document

    Returns:
        The decoded JSON value

    Raises:
        UsageError: If the path is missing, unreadable or not valid JSON
    """
    if path is None:
        raise UsageError("a settings file is required")

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        raise UsageError(f"settings file '{path}' does not exist")
    except json.JSONDecodeError as e:
        raise UsageError(f"settings file '{path}' is not valid JSON: {e}")
    except (OSError, UnicodeDecodeError) as e:
        raise UsageError(f"cannot read settings file '{path}': {e}")


def list_users(client: DirectoryClient, options: UserOptions) -> List[Any]:
    """Search the directory's own users by keyword."""
    return client.search(join_values(options.keywords), "")


def search_external_users(client: DirectoryClient, options: UserOptions) -> List[Any]:
    """Search users in external directory sources."""
    return client.search_external(join_values(options.keywords), join_values(options.sources))


def show_users(client: DirectoryClient, options: UserOptions) -> List[Any]:
    """Fetch every requested user in order; the first failing lookup aborts the command."""
    identifiers = _require_identifiers(options)
    return fetch_each(identifiers, client.get)


def show_settings(client: DirectoryClient, options: UserOptions) -> Any:
    user_id = _require_single_identifier(options)
    return client.get_settings(user_id)


def prepare_update_settings(options: UserOptions) -> UserOptions:
    """Check the identifier and load the patch file without contacting the directory.

    Run before the client is built so a bad patch is reported as a usage
    error even when no connection settings are configured.
    """
    _require_single_identifier(options)
    return replace(options, settings_patch=load_settings_patch(options.settings_file))


def update_settings(client: DirectoryClient, options: UserOptions) -> None:
    """Apply a settings patch, either preloaded or read from ``options.settings_file``.

    The patch file is read and validated before the directory is contacted.
    Nothing is returned on success.
    """
    user_id = _require_single_identifier(options)
    patch = options.settings_patch
    if patch is None:
        patch = load_settings_patch(options.settings_file)

    client.update_settings(user_id, patch)
    logger.info(f"Updated settings for user {user_id}")


def user_roles(client: DirectoryClient, options: UserOptions) -> List[Any]:
    """
    Grant, then revoke, then list a user's roles.

    The final listing always happens so the caller sees the resulting role
    set; with no grants or revokes this is a plain read.

    Args:
        client: Directory client
        options: Options carrying one identifier and the grant/revoke lists

    Returns:
        The user's roles after all changes

    Raises:
        UsageError: If the identifier is missing or a role is both granted and revoked
    """
    user_id = _require_single_identifier(options)

    overlap = sorted(set(options.role_grants) & set(options.role_revokes))
    if overlap:
        raise UsageError(f"roles cannot be granted and revoked at once: {', '.join(overlap)}")

    apply_each(options.role_grants, lambda role_id: client.grant_role(user_id, role_id))
    apply_each(options.role_revokes, lambda role_id: client.revoke_role(user_id, role_id))

    return client.list_roles(user_id)


def set_user_mfa(client: DirectoryClient, options: UserOptions) -> None:
    """Enable, disable or reset MFA for all identifiers in one batched call."""
    if options.mfa_mode is MfaMode.UNSPECIFIED:
        raise FatalUsageError(MFA_MODE_REQUIRED)

    identifiers = _require_identifiers(options)
    client.set_mfa(identifiers, options.mfa_mode)
    logger.info(f"MFA {options.mfa_mode.value} requested for {len(identifiers)} user(s)")
