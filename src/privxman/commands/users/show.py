"""Show users command for privxman."""

from typing import Optional

from ...users.handlers import show_users as show_users_handler
from ...users.models import UserOptions
from ...utils.output_formatters import OutputFormat
from .helpers import format_option, id_option, profile_option, run_handler


def show_users(
    user_id: str = id_option(multiple=True),
    output_format: OutputFormat = format_option(),
    profile: Optional[str] = profile_option(),
):
    """Show one or more users.

    User IDs are separated by commas when fetching several users. The users
    are fetched one at a time in the given order; the command stops at the
    first user that cannot be fetched.

    Examples:
        $ privxman users show --id <USER-ID>,<USER-ID>
    """
    options = UserOptions.create(user_id=user_id)
    run_handler(show_users_handler, options, profile, output_format)
