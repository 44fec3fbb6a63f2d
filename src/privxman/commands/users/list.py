"""List users command for privxman."""

from typing import List, Optional

import typer

from ...users.errors import UsageError
from ...users.handlers import list_users as list_users_handler
from ...users.models import UserOptions
from ...utils.output_formatters import OutputFormat
from .helpers import print_usage_error, profile_option, run_handler


def list_users(
    ctx: typer.Context,
    keywords: Optional[List[str]] = typer.Option(
        None, "--keywords", help="Search keywords, repeat the flag for several keywords"
    ),
    output_format: Optional[OutputFormat] = typer.Option(
        None, "--format", "-f", help="Output format: json or table (default: json)"
    ),
    profile: Optional[str] = profile_option(),
):
    """List and manage users.

    Without a subcommand, searches the directory's users. All keywords are
    sent to the directory as one comma-separated search string. The options
    here only apply to listing; give a subcommand's options after its name.

    Examples:
        # List all users
        $ privxman users

        # Search users matching two keywords
        $ privxman users --keywords alice --keywords admin
    """
    if ctx.invoked_subcommand is not None:
        given = [
            flag
            for flag, value in (
                ("--keywords", keywords),
                ("--format", output_format),
                ("--profile", profile),
            )
            if value
        ]
        if given:
            print_usage_error(
                UsageError(
                    f"{', '.join(given)} only apply to listing users; "
                    f"pass them after '{ctx.invoked_subcommand}' instead"
                )
            )
            raise typer.Exit(2)
        return

    options = UserOptions.create(keywords=keywords)
    run_handler(list_users_handler, options, profile, output_format or OutputFormat.JSON)
