"""Tests for cowork/utils/logging_config.py."""

import json

import structlog

from cowork.utils.logging_config import REDACTED, configure_logging, redact_secrets


class TestRedactSecrets:
    """Tests for the credential masking processor."""

    def test_masks_credential_fields(self):
        event = {"event": "saved", "token": "ghp_x", "password": "pw", "scope": "global"}

        result = redact_secrets(None, "info", event)

        assert result == {"event": "saved", "token": REDACTED, "password": REDACTED, "scope": "global"}

    def test_record_key_names_kept(self):
        event = {"event": "secure_store_record_written", "key": "github_global"}

        assert redact_secrets(None, "debug", event)["key"] == "github_global"

    def test_none_left_alone(self):
        assert redact_secrets(None, "info", {"event": "e", "token": None})["token"] is None


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_on_stderr(self, capsys):
        try:
            configure_logging("INFO")
            structlog.get_logger("test").info("auth_config_saved", provider="github", token="ghp_secret")

            captured = capsys.readouterr()
        finally:
            structlog.reset_defaults()

        assert captured.out == ""
        line = json.loads(captured.err.strip())
        assert line["event"] == "auth_config_saved"
        assert line["level"] == "info"
        assert line["token"] == REDACTED
        assert "ghp_secret" not in captured.err

    def test_level_filtering(self, capsys):
        try:
            configure_logging("WARNING")
            log = structlog.get_logger("test")
            log.info("quiet")
            log.warning("loud")

            captured = capsys.readouterr()
        finally:
            structlog.reset_defaults()

        assert "quiet" not in captured.err
        assert "loud" in captured.err
