"""User settings commands for privxman."""

from pathlib import Path
from typing import Optional

import typer

from ...users.handlers import prepare_update_settings
from ...users.handlers import show_settings as show_settings_handler
from ...users.handlers import update_settings as update_settings_handler
from ...users.models import UserOptions
from ...utils.output_formatters import OutputFormat
from .helpers import format_option, id_option, profile_option, run_handler


def show_user_settings(
    user_id: str = id_option(),
    output_format: OutputFormat = format_option(),
    profile: Optional[str] = profile_option(),
):
    """Show a user's settings.

    Examples:
        $ privxman users settings --id <USER-ID>
    """
    options = UserOptions.for_single_user(user_id)
    run_handler(show_settings_handler, options, profile, output_format)


def update_user_settings(
    settings_file: Path = typer.Argument(..., help="JSON file with the settings to apply"),
    user_id: str = id_option(),
    profile: Optional[str] = profile_option(),
):
    """Update a user's settings from a JSON file.

    The file is read and checked before connecting. Nothing is printed on
    success.

    Examples:
        $ privxman users update-settings settings.json --id <USER-ID>
    """
    options = UserOptions.for_single_user(user_id, settings_file=settings_file)
    run_handler(update_settings_handler, options, profile, prepare=prepare_update_settings)
