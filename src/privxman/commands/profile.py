"""Profile management commands for privxman."""

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..utils.config import DEFAULT_TIMEOUT, Config

app = typer.Typer(help="Manage connection profiles for the user directory.")
console = Console()
config = Config()


def _mask_token(token: Optional[str]) -> str:
    if not token:
        return ""
    if len(token) <= 8:
        return "****"
    return f"{token[:4]}...{token[-4:]}"


@app.command("list")
def list_profiles():
    """List all configured profiles."""
    profiles = config.get_profiles()

    if not profiles:
        console.print("No profiles configured. Use 'privxman profile add' to add a profile.")
        return

    table = Table(title="Profiles")
    table.add_column("Name", style="cyan")
    table.add_column("Base URL", style="green")
    table.add_column("Token")
    table.add_column("Verify SSL")
    table.add_column("Default", style="yellow")

    default_profile = config.get("default_profile")

    for name, profile_data in profiles.items():
        is_default = "✓" if name == default_profile else ""
        table.add_row(
            escape(name),
            escape(str(profile_data.get("base_url", ""))),
            escape(_mask_token(profile_data.get("api_token"))),
            "yes" if profile_data.get("verify_ssl", True) else "no",
            is_default,
        )

    console.print(table)


@app.command("add")
def add_profile(
    name: str = typer.Argument(...),
    base_url: str = typer.Option(..., "--url", "-u", help="Base URL of the directory service"),
    api_token: Optional[str] = typer.Option(
        None, "--token", "-t", help="API bearer token (or set PRIVXMAN_API_TOKEN)"
    ),
    verify_ssl: bool = typer.Option(
        True, "--verify-ssl/--no-verify-ssl", help="Verify the server TLS certificate"
    ),
    timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Request timeout in seconds"),
    set_default: bool = typer.Option(False, "--default", "-d", help="Set as default profile"),
):
    """Add a new profile."""
    profiles = config.get_profiles()

    if name in profiles:
        console.print(
            f"[yellow]Profile '{escape(name)}' already exists. "
            "Remove it first to replace it.[/yellow]"
        )
        return

    profile_data = {"base_url": base_url, "verify_ssl": verify_ssl, "timeout": timeout}
    if api_token:
        profile_data["api_token"] = api_token

    profiles[name] = profile_data
    config.set("profiles", profiles)

    if set_default or not config.get("default_profile"):
        config.set("default_profile", name)
        console.print(f"[green]Profile '{escape(name)}' added and set as default.[/green]")
    else:
        console.print(f"[green]Profile '{escape(name)}' added.[/green]")


@app.command("remove")
def remove_profile(
    name: str = typer.Argument(...),
    force: bool = typer.Option(False, "--force", "-f", help="Force removal without confirmation"),
):
    """Remove a profile."""
    profiles = config.get_profiles()

    if name not in profiles:
        console.print(f"[red]Profile '{escape(name)}' does not exist.[/red]")
        raise typer.Exit(1)

    if not force:
        confirm = typer.confirm(f"Are you sure you want to remove profile '{name}'?")
        if not confirm:
            console.print("Operation cancelled.")
            return

    del profiles[name]
    config.set("profiles", profiles)

    if config.get("default_profile") == name:
        if profiles:
            new_default = next(iter(profiles.keys()))
            config.set("default_profile", new_default)
            console.print(f"[yellow]Default profile changed to '{escape(new_default)}'.[/yellow]")
        else:
            config.delete("default_profile")

    console.print(f"[green]Profile '{escape(name)}' removed.[/green]")


@app.command("set-default")
def set_default_profile(
    name: str = typer.Argument(...),
):
    """Set the default profile."""
    profiles = config.get_profiles()

    if name not in profiles:
        console.print(
            f"[red]Profile '{escape(name)}' does not exist. "
            "Use 'privxman profile add' to create it.[/red]"
        )
        raise typer.Exit(1)

    config.set("default_profile", name)
    console.print(f"[green]Default profile set to '{escape(name)}'.[/green]")
