"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest
from structlog.testing import capture_logs

from cowork.auth import AuthManager
from cowork.config import CoworkSettings, EnvStore
from cowork.enums import ProviderType
from cowork.providers import GitProvider
from cowork.secure_store import SecureStore


@pytest.fixture
def global_config_dir(tmp_path: Path) -> Path:
    """Stand-in for ~/.config/cowork."""
    return tmp_path / "home" / ".config" / "cowork"


@pytest.fixture
def project_config_dir(tmp_path: Path) -> Path:
    """Stand-in for <repo>/.cowork."""
    return tmp_path / "repo" / ".cowork"


@pytest.fixture
def settings(global_config_dir: Path, project_config_dir: Path) -> CoworkSettings:
    """Settings pointing both scopes into the temp directory."""
    return CoworkSettings(
        global_config_path=global_config_dir,
        project_config_path=project_config_dir,
    )


@pytest.fixture
def store(tmp_path: Path) -> SecureStore:
    """SecureStore rooted in a fresh temp directory."""
    return SecureStore(tmp_path / "store")


@pytest.fixture
def mock_provider() -> Mock:
    """Provider client whose test_auth succeeds."""
    provider = Mock(spec=GitProvider)
    provider.provider_type = ProviderType.GITHUB
    provider.test_auth = AsyncMock(return_value=None)
    return provider


@pytest.fixture
def mock_factory(mock_provider: Mock) -> Mock:
    """Provider factory returning mock_provider."""
    return Mock(return_value=mock_provider)


@pytest.fixture
def auth_manager(settings: CoworkSettings, mock_factory: Mock) -> AuthManager:
    """AuthManager over temp stores with a mock provider factory."""
    return AuthManager.from_settings(settings, provider_factory=mock_factory)


@pytest.fixture
def env_store(settings: CoworkSettings) -> EnvStore:
    """EnvStore over temp stores."""
    return EnvStore.from_settings(settings)


@pytest.fixture
def cli_env(global_config_dir: Path, project_config_dir: Path) -> dict[str, str]:
    """Environment that points the CLI's settings at the temp directories."""
    return {
        "COWORK_GLOBAL_CONFIG_PATH": str(global_config_dir),
        "COWORK_PROJECT_CONFIG_PATH": str(project_config_dir),
    }


@pytest.fixture
def no_logging_setup():
    """Keep CLI invocations from reconfiguring structlog and keep log lines out of CLI output."""
    with patch("cowork.cli.main.configure_logging") as mock_configure, capture_logs():
        yield mock_configure
