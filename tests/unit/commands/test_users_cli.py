"""CLI tests for the users command group."""

import json
import re
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from privxman.cli import app
from privxman.directory.errors import DirectoryAPIError, DirectoryConnectionError
from privxman.users.models import MfaMode
from privxman.utils.config import Config
from privxman.utils.logging_config import LoggingConfig, setup_logging
from tests.fixtures.directory import RecordingDirectoryClient

runner = CliRunner()


def clean(text):
    """Strip ANSI color codes and line wrapping for reliable string matching."""
    return " ".join(re.sub(r"\x1b\[[0-9;]*m", "", text).split())


@pytest.fixture
def directory():
    """Patch client creation so commands talk to a recording client."""
    client = RecordingDirectoryClient()
    with patch("privxman.commands.users.helpers.create_client") as mock_create_client:
        mock_create_client.return_value.__enter__.return_value = client
        mock_create_client.return_value.__exit__.return_value = False
        client.factory = mock_create_client
        yield client


def test_users_without_subcommand_lists_users(directory):
    result = runner.invoke(app, ["users", "--keywords", "a", "--keywords", "b"])

    assert result.exit_code == 0, result.output
    assert directory.calls == [("search", "a,b", "")]
    assert json.loads(result.stdout) == list(directory.users.values())


def test_users_uses_requested_profile(directory):
    result = runner.invoke(app, ["users", "--profile", "lab"])

    assert result.exit_code == 0, result.output
    directory.factory.assert_called_once_with("lab")


def test_users_table_format(directory):
    result = runner.invoke(app, ["users", "--format", "table"])

    assert result.exit_code == 0, result.output
    assert "principal" in result.stdout


def test_show_fetches_each_id_in_order(directory):
    result = runner.invoke(app, ["users", "show", "--id", "u-2,u-1"])

    assert result.exit_code == 0, result.output
    assert directory.calls == [("get", "u-2"), ("get", "u-1")]
    assert [user["id"] for user in json.loads(result.stdout)] == ["u-2", "u-1"]


def test_show_stops_at_first_missing_user(directory):
    result = runner.invoke(app, ["users", "show", "--id", "u-1,missing,u-2"])

    assert result.exit_code == 1
    assert directory.calls == [("get", "u-1"), ("get", "missing")]
    assert "API Error (404)" in clean(result.output)
    # No partial result is printed
    assert '"u-1"' not in result.stdout


def test_show_requires_id(directory):
    result = runner.invoke(app, ["users", "show"])

    assert result.exit_code == 2
    assert directory.calls == []


def test_show_with_empty_id_is_usage_error(directory):
    result = runner.invoke(app, ["users", "show", "--id", ","])

    assert result.exit_code == 2
    assert "at least one user ID" in clean(result.output)
    assert directory.calls == []


def test_settings_shows_raw_settings(directory):
    result = runner.invoke(app, ["users", "settings", "--id", "u-1"])

    assert result.exit_code == 0, result.output
    assert directory.calls == [("get_settings", "u-1")]
    assert json.loads(result.stdout) == directory.settings


def test_update_settings_prints_nothing_on_success(directory, tmp_path):
    patch_file = tmp_path / "settings.json"
    patch_file.write_text('{"language": "fi"}', encoding="utf-8")

    result = runner.invoke(app, ["users", "update-settings", str(patch_file), "--id", "u-1"])

    assert result.exit_code == 0, result.output
    assert directory.calls == [("update_settings", "u-1", {"language": "fi"})]
    assert result.stdout == ""


def test_update_settings_with_malformed_file(directory, tmp_path):
    patch_file = tmp_path / "settings.json"
    patch_file.write_text("{broken", encoding="utf-8")

    result = runner.invoke(app, ["users", "update-settings", str(patch_file), "--id", "u-1"])

    assert result.exit_code == 2
    assert "not valid JSON" in clean(result.output)
    assert directory.calls == []


def test_update_settings_requires_file_argument(directory):
    result = runner.invoke(app, ["users", "update-settings", "--id", "u-1"])

    assert result.exit_code == 2
    assert directory.calls == []


def test_roles_grant_revoke_then_list(directory):
    result = runner.invoke(
        app, ["users", "roles", "--id", "u-1", "--revoke", "r2", "--grant", "r1"]
    )

    assert result.exit_code == 0, result.output
    assert directory.calls == [
        ("grant_role", "u-1", "r1"),
        ("revoke_role", "u-1", "r2"),
        ("list_roles", "u-1"),
    ]
    assert json.loads(result.stdout) == directory.roles


def test_roles_without_changes_only_lists(directory):
    result = runner.invoke(app, ["users", "roles", "--id", "u-1"])

    assert result.exit_code == 0, result.output
    assert directory.calls == [("list_roles", "u-1")]


def test_roles_overlap_is_rejected(directory):
    result = runner.invoke(
        app, ["users", "roles", "--id", "u-1", "--grant", "r1", "--revoke", "r1"]
    )

    assert result.exit_code == 2
    assert directory.calls == []


def test_mfa_enable_sends_one_batched_call(directory):
    result = runner.invoke(app, ["users", "mfa", "--id", "a,b,c", "--enable"])

    assert result.exit_code == 0, result.output
    assert directory.calls == [("set_mfa", ["a", "b", "c"], MfaMode.ENABLE)]
    assert result.stdout == ""


@pytest.mark.parametrize(
    "flag, mode", [("-d", MfaMode.DISABLE), ("--reset", MfaMode.RESET), ("-e", MfaMode.ENABLE)]
)
def test_mfa_modes(directory, flag, mode):
    result = runner.invoke(app, ["users", "mfa", "--id", "a", flag])

    assert result.exit_code == 0, result.output
    assert directory.calls == [("set_mfa", ["a"], mode)]


def test_mfa_without_mode_terminates(directory):
    result = runner.invoke(app, ["users", "mfa", "--id", "a,b"])

    assert result.exit_code == 1
    assert "you have to specify one of the following flags" in clean(result.output)
    assert directory.calls == []


def test_mfa_conflicting_flags_are_rejected(directory):
    result = runner.invoke(app, ["users", "mfa", "--id", "a", "--enable", "--disable"])

    assert result.exit_code == 2
    assert "mutually exclusive" in clean(result.output)
    assert directory.calls == []
    directory.factory.assert_not_called()


def test_search_external(directory):
    result = runner.invoke(
        app, ["users", "search", "--keywords", "carol", "--sources", "s1", "--sources", "s2"]
    )

    assert result.exit_code == 0, result.output
    assert directory.calls == [("search_external", "carol", "s1,s2")]


def test_connection_error_exits_with_status_1(directory):
    directory.failures[("search", "")] = DirectoryConnectionError("connection refused")

    result = runner.invoke(app, ["users"])

    assert result.exit_code == 1
    assert "Connection Error: connection refused" in clean(result.output)


def test_api_error_during_roles_exits_with_status_1(directory):
    directory.failures[("grant_role", "r1")] = DirectoryAPIError(403, "forbidden")

    result = runner.invoke(app, ["users", "roles", "--id", "u-1", "--grant", "r1"])

    assert result.exit_code == 1
    assert "API Error (403): forbidden" in clean(result.output)
    assert directory.method_names() == ["grant_role"]


def test_missing_configuration_exits_with_status_1(tmp_path, monkeypatch):
    for var in ("PRIVXMAN_BASE_URL", "PRIVXMAN_API_TOKEN"):
        monkeypatch.delenv(var, raising=False)

    with patch("privxman.commands.users.helpers.config", Config(config_dir=tmp_path)):
        result = runner.invoke(app, ["users", "show", "--id", "u-1"])

    assert result.exit_code == 1
    assert "No profile specified" in clean(result.output)
    assert "privxman profile add" in clean(result.output)


def test_users_help_lists_subcommands():
    result = runner.invoke(app, ["users", "--help"])

    assert result.exit_code == 0
    output = clean(result.output)
    for command in ("show", "settings", "update-settings", "roles", "mfa", "search"):
        assert command in output


def test_version_command():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "privxman version:" in result.output


def test_malformed_settings_file_is_usage_error_without_configuration(tmp_path, monkeypatch):
    for var in ("PRIVXMAN_BASE_URL", "PRIVXMAN_API_TOKEN"):
        monkeypatch.delenv(var, raising=False)
    patch_file = tmp_path / "settings.json"
    patch_file.write_text("{broken", encoding="utf-8")

    with patch("privxman.commands.users.helpers.config", Config(config_dir=tmp_path / "cfg")):
        result = runner.invoke(app, ["users", "update-settings", str(patch_file), "--id", "u-1"])

    assert result.exit_code == 2
    assert "not valid JSON" in clean(result.output)
    assert "No profile specified" not in clean(result.output)


def test_settings_file_is_read_before_connecting(directory, tmp_path):
    patch_file = tmp_path / "settings.json"
    patch_file.write_text("{broken", encoding="utf-8")

    runner.invoke(app, ["users", "update-settings", str(patch_file), "--id", "u-1"])

    directory.factory.assert_not_called()


def test_server_error_with_brackets_is_printed_literally(directory):
    directory.failures[("get", "u-1")] = DirectoryAPIError(400, "invalid value [/roles]")

    result = runner.invoke(app, ["users", "show", "--id", "u-1"])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "API Error (400): invalid value [/roles]" in clean(result.output)


def test_connection_error_with_brackets_is_printed_literally(directory):
    directory.failures[("list_roles", "u-1")] = DirectoryConnectionError("proxy [bold] refused")

    result = runner.invoke(app, ["users", "roles", "--id", "u-1"])

    assert result.exit_code == 1
    assert "Connection Error: proxy [bold] refused" in clean(result.output)


def test_usage_error_keeps_bracketed_role_ids(directory):
    result = runner.invoke(
        app, ["users", "roles", "--id", "u-1", "--grant", "[prod]", "--revoke", "[prod]"]
    )

    assert result.exit_code == 2
    assert "[prod]" in clean(result.output)
    assert directory.calls == []


@pytest.mark.parametrize(
    "group_args, flag",
    [
        (["--keywords", "x"], "--keywords"),
        (["--format", "table"], "--format"),
        (["--profile", "lab"], "--profile"),
    ],
)
def test_list_options_before_subcommand_are_rejected(directory, group_args, flag):
    result = runner.invoke(app, ["users", *group_args, "show", "--id", "u-1"])

    assert result.exit_code == 2
    assert flag in clean(result.output)
    assert "only apply to listing users" in clean(result.output)
    assert directory.calls == []


def test_config_error_is_logged_with_traceback(tmp_path, monkeypatch):
    for var in ("PRIVXMAN_BASE_URL", "PRIVXMAN_API_TOKEN"):
        monkeypatch.delenv(var, raising=False)

    with patch("privxman.commands.users.helpers.config", Config(config_dir=tmp_path)), patch(
        "privxman.commands.users.helpers.logger"
    ) as mock_logger:
        result = runner.invoke(app, ["users", "show", "--id", "u-1"])

    assert result.exit_code == 1
    mock_logger.debug.assert_called_with("Configuration error", exc_info=True)


@pytest.fixture
def default_logging():
    yield
    setup_logging(LoggingConfig())


def test_json_log_format(directory, default_logging):
    result = runner.invoke(
        app, ["--log-format", "json", "--verbose", "users", "mfa", "--id", "a", "-e"]
    )

    assert result.exit_code == 0, result.output
    records = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
    assert any(record["message"] == "MFA enable requested for 1 user(s)" for record in records)
