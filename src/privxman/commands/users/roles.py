"""User roles command for privxman."""

from typing import List, Optional

import typer

from ...users.handlers import user_roles as user_roles_handler
from ...users.models import UserOptions
from ...utils.output_formatters import OutputFormat
from .helpers import format_option, id_option, profile_option, run_handler


def user_roles(
    user_id: str = id_option(),
    grants: Optional[List[str]] = typer.Option(
        None, "--grant", help="Grant a role to the user, requires the role ID. Repeatable."
    ),
    revokes: Optional[List[str]] = typer.Option(
        None, "--revoke", help="Revoke a role from the user, requires the role ID. Repeatable."
    ),
    output_format: OutputFormat = format_option(),
    profile: Optional[str] = profile_option(),
):
    """Show and manage a user's roles.

    Grants are applied first, then revokes, and the user's resulting roles
    are always listed at the end.

    Examples:
        # Show roles
        $ privxman users roles --id <USER-ID>

        # Grant a role and show the result
        $ privxman users roles --id <USER-ID> --grant <ROLE-ID>

        # Revoke a role and show the result
        $ privxman users roles --id <USER-ID> --revoke <ROLE-ID>
    """
    options = UserOptions.for_single_user(user_id, grants=grants, revokes=revokes)
    run_handler(user_roles_handler, options, profile, output_format)
