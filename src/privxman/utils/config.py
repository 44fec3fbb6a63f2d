"""Configuration utilities for privxman."""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from rich.console import Console
from rich.markup import escape

from ..directory.client import ClientSettings

console = Console(stderr=True)

CONFIG_DIR_ENV = "PRIVXMAN_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path.home() / ".privxman"
CONFIG_FILENAME = "config.yaml"

DEFAULT_TIMEOUT = 30.0


class ConfigError(Exception):
    """Raised when no usable connection settings can be resolved."""

    pass


def get_config_dir() -> Path:
    """Return the configuration directory, honouring PRIVXMAN_CONFIG_DIR."""
    override = os.environ.get(CONFIG_DIR_ENV)
    return Path(override).expanduser() if override else DEFAULT_CONFIG_DIR


class Config:
    """Manages privxman configuration stored as YAML."""

    def __init__(self, config_dir: Optional[Path] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Directory holding config.yaml (defaults to ~/.privxman)
        """
        self._config_dir = config_dir
        self.config_data: Dict[str, Any] = {}
        self._config_loaded = False

    @property
    def config_dir(self) -> Path:
        return self._config_dir or get_config_dir()

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def _ensure_config_loaded(self):
        """Ensure configuration is loaded from file."""
        if not self._config_loaded:
            self._load_config()
            self._config_loaded = True

    def reload_config(self):
        """Force reload configuration from file."""
        self._config_loaded = False
        self._ensure_config_loaded()

    def _load_config(self):
        """Load the configuration from the YAML file, if there is one."""
        if not self.config_file.exists():
            self.config_data = {}
            return

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                console.print(
                    f"[yellow]Warning: Configuration file {escape(str(self.config_file))} "
                    "does not contain a mapping, ignoring it.[/yellow]"
                )
                data = {}
            self.config_data = data
        except yaml.YAMLError as e:
            console.print(
                f"[red]Error: Configuration file {escape(str(self.config_file))} "
                f"is not valid YAML: {escape(str(e))}[/red]"
            )
            self.config_data = {}
        except OSError as e:
            console.print(
                f"[red]Error reading configuration file "
                f"{escape(str(self.config_file))}: {escape(str(e))}[/red]"
            )
            self.config_data = {}

    def save_config(self):
        """Save the configuration to the YAML file."""
        if not self.config_dir.exists():
            self.config_dir.mkdir(parents=True)
            console.print(f"Created configuration directory: {self.config_dir}")

        with open(self.config_file, "w", encoding="utf-8") as f:
            yaml.dump(self.config_data, f, default_flow_style=False, indent=2, sort_keys=False)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value with dot notation support.

        Args:
            key: Configuration key (supports dot notation like "profiles.prod.base_url")
            default: Default value if key doesn't exist

        Returns:
            Configuration value
        """
        self._ensure_config_loaded()

        if "." in key:
            value: Any = self.config_data
            for k in key.split("."):
                if isinstance(value, dict) and k in value:
                    value = value[k]
                else:
                    return default
            return value

        return self.config_data.get(key, default)

    def set(self, key: str, value: Any):
        """
        Set a top-level configuration value and save.

        Args:
            key: Configuration key
            value: Configuration value
        """
        self._ensure_config_loaded()
        self.config_data[key] = value
        self.save_config()

    def delete(self, key: str):
        """Delete a top-level configuration value and save."""
        self._ensure_config_loaded()
        if key in self.config_data:
            del self.config_data[key]
            self.save_config()

    def get_all(self) -> Dict[str, Any]:
        """Get a copy of all configuration values."""
        self._ensure_config_loaded()
        return self.config_data.copy()

    def get_profiles(self) -> Dict[str, Dict[str, Any]]:
        """
        Get the configured profiles keyed by name.

        A profile entry without settings (``prod:`` in the YAML file) comes
        back as an empty dict. Values that are not mappings are ignored with
        a warning.

        Returns:
            Profiles keyed by name, each one a dict of settings
        """
        profiles = self.get("profiles") or {}
        if not isinstance(profiles, dict):
            console.print(
                "[yellow]Warning: 'profiles' in the configuration file is not a mapping, "
                "ignoring it.[/yellow]"
            )
            return {}

        result: Dict[str, Dict[str, Any]] = {}
        for name, profile_data in profiles.items():
            if profile_data is not None and not isinstance(profile_data, dict):
                console.print(
                    f"[yellow]Warning: Profile '{escape(str(name))}' is not a mapping, "
                    "ignoring its settings.[/yellow]"
                )
            result[str(name)] = profile_data if isinstance(profile_data, dict) else {}
        return result

    def _get_env_bool(self, env_var: str, default: bool) -> bool:
        """
        Get boolean value from environment variable.

        Args:
            env_var: Environment variable name
            default: Default value if env var is not set

        Returns:
            Boolean value
        """
        value = os.environ.get(env_var)
        if value is None:
            return default
        return value.lower() in ("true", "1", "yes", "on")

    def _get_env_float(self, env_var: str, default: float) -> float:
        value = os.environ.get(env_var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            console.print(
                f"Warning: Invalid number for {env_var}: {value}. Using default: {default}"
            )
            return default

    def resolve_client_settings(
        self, profile_name: Optional[str] = None
    ) -> Tuple[Optional[str], ClientSettings]:
        """
        Resolve connection settings for a profile, applying environment overrides.

        Environment variables PRIVXMAN_BASE_URL, PRIVXMAN_API_TOKEN,
        PRIVXMAN_VERIFY_SSL and PRIVXMAN_TIMEOUT take precedence over the
        profile values. When no profile exists at all, the environment alone
        may supply the settings.

        Args:
            profile_name: Profile to use (falls back to default_profile)

        Returns:
            Tuple of (profile_name, client_settings); profile_name is None when
            the settings came from the environment only

        Raises:
            ConfigError: If the profile does not exist or base URL/token are missing
        """
        profile_name = profile_name or self.get("default_profile")
        profiles = self.get_profiles()

        profile_data: Dict[str, Any] = {}
        if profile_name:
            if profile_name not in profiles:
                raise ConfigError(f"Profile '{profile_name}' does not exist.")
            profile_data = profiles[profile_name]
        elif not os.environ.get("PRIVXMAN_BASE_URL"):
            raise ConfigError("No profile specified and no default profile set.")

        base_url = os.environ.get("PRIVXMAN_BASE_URL") or profile_data.get("base_url")
        api_token = os.environ.get("PRIVXMAN_API_TOKEN") or profile_data.get("api_token")

        if not base_url:
            raise ConfigError(f"Profile '{profile_name}' has no base_url configured.")
        if not api_token:
            raise ConfigError(
                f"No API token for profile '{profile_name}'. "
                "Set api_token in the profile or the PRIVXMAN_API_TOKEN environment variable."
            )

        settings = ClientSettings(
            base_url=base_url,
            api_token=api_token,
            verify_ssl=self._get_env_bool(
                "PRIVXMAN_VERIFY_SSL", bool(profile_data.get("verify_ssl", True))
            ),
            timeout=self._get_env_float(
                "PRIVXMAN_TIMEOUT", float(profile_data.get("timeout", DEFAULT_TIMEOUT))
            ),
        )
        return profile_name, settings
