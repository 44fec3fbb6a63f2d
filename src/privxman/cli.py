#!/usr/bin/env python3
"""
privxman - identity-platform user manager

A CLI tool for listing and managing users of a role-store user directory.
"""
import typer
from rich.console import Console

from . import __version__
from .commands import profile, users
from .utils.logging_config import LogFormat, LoggingConfig, setup_logging

app = typer.Typer(
    help="privxman - list and manage identity-platform users, their settings, roles and MFA state.",
    add_completion=True,
    no_args_is_help=True,
)
console = Console()

# Add subcommands
app.add_typer(profile.app, name="profile")
app.add_typer(users.app, name="users")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show informational log output"),
    debug: bool = typer.Option(False, "--debug", help="Show debug log output including HTTP"),
    log_format: LogFormat = typer.Option(
        LogFormat.RICH, "--log-format", help="Log output format: rich or json (one object per line)"
    ),
):
    """Configure logging before any command runs."""
    setup_logging(LoggingConfig.from_flags(verbose=verbose, debug=debug, log_format=log_format))


# Add version command
@app.command()
def version():
    """Show the application version and exit."""
    console.print(f"privxman version: {__version__}")
    raise typer.Exit()


if __name__ == "__main__":
    app()
