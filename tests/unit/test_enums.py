"""Tests for cowork/enums.py."""

import pytest

from cowork.enums import AuthMethod, AuthScope, GitAuthMethod, ProviderType
from cowork.exceptions import ConfigurationError


class TestProviderType:
    @pytest.mark.parametrize("name", ["github", "GitHub", "GITHUB", "  github "])
    def test_parse_case_insensitive(self, name):
        assert ProviderType.parse(name) == ProviderType.GITHUB

    def test_parse_unknown(self):
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderType.parse("gitea")

        assert "unsupported provider: gitea" in exc_info.value.message
        assert "github, gitlab, bitbucket" in exc_info.value.message

    def test_display_names(self):
        assert [p.display_name for p in ProviderType] == ["GitHub", "GitLab", "Bitbucket"]

    def test_str_is_value(self):
        assert str(ProviderType.BITBUCKET) == "bitbucket"
        assert f"{ProviderType.GITLAB}_global" == "gitlab_global"


class TestAuthScope:
    @pytest.mark.parametrize(("name", "expected"), [("Global", AuthScope.GLOBAL), ("PROJECT", AuthScope.PROJECT)])
    def test_parse_case_insensitive(self, name, expected):
        assert AuthScope.parse(name) == expected

    def test_parse_unknown(self):
        with pytest.raises(ConfigurationError, match="unsupported scope: system"):
            AuthScope.parse("system")


class TestMethods:
    def test_auth_methods(self):
        assert {m.value for m in AuthMethod} == {"token", "basic", "ssh"}

    def test_git_auth_methods(self):
        assert str(GitAuthMethod.HTTPS) == "https"
        assert GitAuthMethod("none") == GitAuthMethod.NONE
