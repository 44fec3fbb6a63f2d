"""User multi-factor authentication command for privxman."""

from typing import Optional

import typer

from ...users.errors import UsageError
from ...users.handlers import set_user_mfa as set_user_mfa_handler
from ...users.models import MfaMode, UserOptions
from .helpers import id_option, print_usage_error, profile_option, run_handler


def set_user_mfa(
    user_id: str = id_option(multiple=True),
    enable: bool = typer.Option(
        False, "--enable", "-e", help="Turn on multi-factor authentication"
    ),
    disable: bool = typer.Option(
        False, "--disable", "-d", help="Turn off multi-factor authentication"
    ),
    reset: bool = typer.Option(False, "--reset", "-r", help="Reset multi-factor authentication"),
    profile: Optional[str] = profile_option(),
):
    """Enable, disable or reset multi-factor authentication.

    User IDs are separated by commas when changing several users; all of them
    are sent in a single request. Exactly one of --enable, --disable or
    --reset must be given.

    Examples:
        $ privxman users mfa --id <USER-ID>,<USER-ID> --enable
    """
    try:
        mode = MfaMode.from_flags(enable=enable, disable=disable, reset=reset)
    except UsageError as e:
        print_usage_error(e)
        raise typer.Exit(2)

    options = UserOptions.create(user_id=user_id, mfa_mode=mode)
    run_handler(set_user_mfa_handler, options, profile)
