"""Unit tests for cowork/cli/auth.py - credential management CLI."""

from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from cowork.auth import AuthManager
from cowork.cli.common import mask_secret
from cowork.cli.main import cli
from cowork.enums import AuthMethod, AuthScope, GitAuthMethod, ProviderType
from cowork.exceptions import ProviderAuthenticationError
from cowork.providers import GitHubProvider


@pytest.fixture
def cli_runner():
    """Create CLI runner for testing Click commands."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner, cli_env, no_logging_setup):
    """Invoke the root CLI against the temp config directories."""

    def _invoke(args, input=None):
        return cli_runner.invoke(cli, args, input=input, env=cli_env)

    return _invoke


@pytest.fixture
def manager(settings):
    """AuthManager reading the same stores as the CLI."""
    return AuthManager.from_settings(settings)


class TestMaskSecret:
    def test_long_value(self):
        assert mask_secret("ghp_abcdefghijkl") == "ghp_********ijkl"

    def test_short_value(self):
        assert mask_secret("abcd1234") == "********"

    def test_empty(self):
        assert mask_secret("") == ""


class TestAuthGroup:
    def test_help(self, invoke):
        result = invoke(["auth", "--help"])

        assert result.exit_code == 0
        assert "login" in result.output
        assert "git" in result.output


class TestLogin:
    def test_token_login(self, invoke, manager):
        result = invoke(["auth", "login", "GitHub"], input="ghp_secret_token\n")

        assert result.exit_code == 0, result.output
        assert "GitHub credentials stored (global)" in result.output
        config = manager.get_auth_config(ProviderType.GITHUB, AuthScope.GLOBAL)
        assert config.token == "ghp_secret_token"

    def test_basic_login_project_scope(self, invoke, manager):
        result = invoke(
            ["auth", "login", "gitlab", "--basic", "--scope", "project", "--base-url", "https://gitlab.example.com"],
            input="dev\nhunter2\n",
        )

        assert result.exit_code == 0, result.output
        config = manager.get_auth_config(ProviderType.GITLAB, AuthScope.PROJECT)
        assert config.auth_method == AuthMethod.BASIC
        assert (config.username, config.password) == ("dev", "hunter2")
        assert config.base_url == "https://gitlab.example.com"

    def test_unknown_provider(self, invoke):
        result = invoke(["auth", "login", "gitea"], input="t\n")

        assert result.exit_code == 1
        assert "unsupported provider: gitea" in result.output


class TestShowListRemove:
    def test_show_masks_token(self, invoke, manager):
        manager.set_token(ProviderType.GITHUB, "ghp_abcdefghijkl", AuthScope.GLOBAL)

        result = invoke(["auth", "show", "github"])

        assert result.exit_code == 0, result.output
        assert "Scope: global" in result.output
        assert "ghp_********ijkl" in result.output
        assert "ghp_abcdefghijkl" not in result.output

    def test_show_value(self, invoke, manager):
        manager.set_token(ProviderType.GITHUB, "ghp_abcdefghijkl", AuthScope.PROJECT)

        result = invoke(["auth", "show", "github", "--show-value"])

        assert "Scope: project" in result.output
        assert "ghp_abcdefghijkl" in result.output

    def test_show_missing(self, invoke):
        result = invoke(["auth", "show", "bitbucket", "--scope", "global"])

        assert result.exit_code == 1
        assert "Error: value not found for key: bitbucket_global" in result.output

    def test_list(self, invoke, manager):
        manager.set_token(ProviderType.GITLAB, "t", AuthScope.GLOBAL)
        manager.set_basic_auth(ProviderType.GITLAB, "u", "p", AuthScope.PROJECT)

        result = invoke(["auth", "list"])

        assert result.exit_code == 0
        lines = [line.split() for line in result.output.strip().splitlines()]
        assert lines == [["gitlab", "global", "token"], ["gitlab", "project", "basic"]]

    def test_list_empty(self, invoke):
        result = invoke(["auth", "list"])

        assert "No credentials configured" in result.output

    def test_remove(self, invoke, manager):
        manager.set_token(ProviderType.GITHUB, "t", AuthScope.GLOBAL)

        result = invoke(["auth", "remove", "github", "--yes"])

        assert result.exit_code == 0
        assert manager.list_auth_configs() == []

    def test_remove_missing(self, invoke):
        result = invoke(["auth", "remove", "github", "--yes"])

        assert result.exit_code == 1


class TestCheckAuth:
    def test_ok(self, invoke, manager):
        manager.set_token(ProviderType.GITHUB, "ghp_x", AuthScope.GLOBAL)

        with patch.object(GitHubProvider, "test_auth", new=AsyncMock()) as mock_test:
            result = invoke(["auth", "test", "github"])

        assert result.exit_code == 0, result.output
        assert "GitHub authentication OK (global)" in result.output
        mock_test.assert_awaited_once()

    def test_rejected(self, invoke, manager):
        manager.set_token(ProviderType.GITHUB, "bad", AuthScope.GLOBAL)
        error = ProviderAuthenticationError("GitHub authentication failed", provider_type="github", status_code=401)

        with patch.object(GitHubProvider, "test_auth", new=AsyncMock(side_effect=error)):
            result = invoke(["auth", "test", "github"])

        assert result.exit_code == 1
        assert "credentials rejected" in result.output

    def test_not_configured(self, invoke):
        result = invoke(["auth", "test", "gitlab", "--scope", "project"])

        assert result.exit_code == 1
        assert "no authentication configured" in result.output
        assert "cowork auth login gitlab" in result.output


class TestGitCommands:
    def test_ssh_key_file(self, invoke, manager, tmp_path):
        key_file = tmp_path / "id_ed25519"
        key_file.write_text("KEY")

        result = invoke(["auth", "git", "ssh", str(key_file), "--scope", "project"])

        assert result.exit_code == 0, result.output
        config = manager.get_git_auth_config(AuthScope.PROJECT)
        assert config.ssh_key_path == str(key_file.resolve())
        assert manager.get_git_ssh_key(AuthScope.PROJECT) == "KEY"

    def test_ssh_inline(self, invoke, manager, tmp_path):
        key_file = tmp_path / "id_ed25519"
        key_file.write_text("KEY")

        result = invoke(["auth", "git", "ssh", str(key_file), "--inline"])

        assert result.exit_code == 0, result.output
        config = manager.get_git_auth_config(AuthScope.GLOBAL)
        assert config.ssh_key == "KEY"
        assert config.ssh_key_path is None

    def test_https(self, invoke, manager):
        result = invoke(["auth", "git", "https", "--username", "dev"], input="pass\n")

        assert result.exit_code == 0, result.output
        assert manager.get_git_https_auth(AuthScope.GLOBAL) == ("dev", "pass")

    def test_token_and_show(self, invoke, manager):
        invoke(["auth", "git", "token", "--scope", "project"], input="glpat-abcdefgh1234\n")

        result = invoke(["auth", "git", "show"])

        assert result.exit_code == 0, result.output
        assert "Scope: project" in result.output
        assert "Method: token" in result.output
        assert "glpa**********1234" in result.output
        assert manager.get_git_auth_config(AuthScope.PROJECT).auth_method == GitAuthMethod.TOKEN

    def test_show_missing(self, invoke):
        result = invoke(["auth", "git", "show"])

        assert result.exit_code == 1
        assert "git authentication not configured" in result.output

    def test_remove(self, invoke, manager):
        manager.set_git_token_auth("t", AuthScope.GLOBAL)

        result = invoke(["auth", "git", "remove", "--yes"])

        assert result.exit_code == 0
        assert "Git credential removed" in result.output
