"""User management commands for privxman.

This module provides the ``users`` command group: listing and searching
users, showing user details and settings, updating settings, managing role
grants and setting multi-factor authentication state.
"""

import typer

# Import all submodules first
from . import helpers, list, mfa, roles, search, settings, show

# Import command functions
from .list import list_users
from .mfa import set_user_mfa
from .roles import user_roles
from .search import search_external_users
from .settings import show_user_settings, update_user_settings
from .show import show_users

# Create the main app instance
app = typer.Typer(help="List and manage users.")

# Running `users` without a subcommand lists users
app.callback(invoke_without_command=True)(list_users)

# Register commands with the app
app.command("show")(show_users)
app.command("settings")(show_user_settings)
app.command("update-settings")(update_user_settings)
app.command("roles")(user_roles)
app.command("mfa")(set_user_mfa)
app.command("search")(search_external_users)

__all__ = ["app", "list", "show", "settings", "roles", "mfa", "search", "helpers"]
