"""Shared utilities for user management commands."""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ...directory.client import DirectoryClient, RoleStoreClient
from ...directory.errors import DirectoryAPIError, DirectoryError
from ...users.errors import FatalUsageError, UsageError
from ...users.models import UserOptions
from ...utils.config import Config, ConfigError
from ...utils.output_formatters import OutputFormat, emit_result

# Shared console and config instances
console = Console()
err_console = Console(stderr=True)
config = Config()
logger = logging.getLogger(__name__)

Handler = Callable[[DirectoryClient, UserOptions], Any]


def profile_option() -> Any:
    """Create the standard --profile option."""
    return typer.Option(
        None, "--profile", "-p", help="Profile to use (uses default profile if not specified)"
    )


def format_option() -> Any:
    """Create the standard --format option."""
    return typer.Option(OutputFormat.JSON, "--format", "-f", help="Output format: json or table")


def id_option(multiple: bool = False) -> Any:
    """Create the required --id option."""
    help_text = "User ID"
    if multiple:
        help_text = "User ID, separate multiple IDs with commas"
    return typer.Option(..., "--id", help=help_text)


def print_usage_error(error: Exception) -> None:
    """Print a usage error to stderr; the message is printed literally."""
    err_console.print(f"[red]Error: {escape(str(error))}[/red]")


@contextmanager
def create_client(profile: Optional[str] = None) -> Iterator[DirectoryClient]:
    """
    Open a role-store client for the given profile.

    Args:
        profile: Profile name (falls back to the default profile)

    Yields:
        Directory client, closed when the block exits

    Raises:
        ConfigError: If no usable connection settings can be resolved
    """
    profile_name, settings = config.resolve_client_settings(profile)
    logger.debug(f"Using profile={profile_name or '<environment>'}, base_url={settings.base_url}")

    with RoleStoreClient(settings) as client:
        yield client


def run_handler(
    handler: Handler,
    options: UserOptions,
    profile: Optional[str] = None,
    output_format: OutputFormat = OutputFormat.JSON,
    prepare: Optional[Callable[[UserOptions], UserOptions]] = None,
) -> Any:
    """
    Run one command handler and print its result.

    This is the boundary where errors become exit codes: usage errors exit
    with status 2, a fatal usage error and every directory or configuration
    error exit with status 1.

    Args:
        handler: Command handler to run
        options: Option model for this invocation
        profile: Profile to connect with
        output_format: How to print the result
        prepare: Local validation run before the client is created; returns the options to use

    Returns:
        The handler's result

    Raises:
        typer.Exit: If the handler or client setup failed
    """
    try:
        if prepare is not None:
            options = prepare(options)
        with create_client(profile) as client:
            result = handler(client, options)
    except FatalUsageError as e:
        logger.debug("Fatal usage error", exc_info=True)
        err_console.print(f"Error: {escape(str(e))}")
        raise typer.Exit(1)
    except UsageError as e:
        logger.debug("Usage error", exc_info=True)
        print_usage_error(e)
        raise typer.Exit(2)
    except DirectoryAPIError as e:
        logger.debug("Directory API error", exc_info=True)
        err_console.print(f"[red]API Error ({e.status_code}): {escape(e.message)}[/red]")
        raise typer.Exit(1)
    except DirectoryError as e:
        logger.debug("Directory connection error", exc_info=True)
        err_console.print(f"[red]Connection Error: {escape(e.message)}[/red]")
        raise typer.Exit(1)
    except ConfigError as e:
        logger.debug("Configuration error", exc_info=True)
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        err_console.print("Use 'privxman profile add' to configure a profile.")
        raise typer.Exit(1)

    emit_result(result, OutputFormat(output_format).value, out=console)
    return result
