"""External user search command for privxman."""

from typing import List, Optional

import typer

from ...users.handlers import search_external_users as search_external_users_handler
from ...users.models import UserOptions
from ...utils.output_formatters import OutputFormat
from .helpers import format_option, profile_option, run_handler


def search_external_users(
    keywords: Optional[List[str]] = typer.Option(
        None, "--keywords", help="Search keywords, repeat the flag for several keywords"
    ),
    sources: Optional[List[str]] = typer.Option(
        None, "--sources", help="Source ID to search the user from, repeatable"
    ),
    output_format: OutputFormat = format_option(),
    profile: Optional[str] = profile_option(),
):
    """Search users in external directories.

    Examples:
        $ privxman users search --keywords alice
        $ privxman users search --keywords alice --sources <SOURCE-ID> --sources <SOURCE-ID>
    """
    options = UserOptions.create(keywords=keywords, sources=sources)
    run_handler(search_external_users_handler, options, profile, output_format)
