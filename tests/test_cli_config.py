"""Tests for configuration file loading and overrides."""

from types import SimpleNamespace

from cli_config import apply_config_overrides, apply_settings, load_config
from constants import Constants


class TestLoadConfig:
    """YAML config loading."""

    def test_none_path(self):
        """Test no path yields empty settings."""
        assert load_config(None) == {}

    def test_missing_file(self, tmp_path, caplog):
        """Test a missing file logs and yields empty settings."""
        assert load_config(str(tmp_path / "nope.yml")) == {}
        assert "Config file not found" in caplog.text

    def test_top_level_mapping(self, tmp_path):
        """Test a flat mapping is returned as is."""
        path = tmp_path / "cfg.yml"
        path.write_text("registry_url: https://mirror.test/\nchannel_size: 5\n", encoding="utf-8")

        assert load_config(str(path)) == {"registry_url": "https://mirror.test/", "channel_size": 5}

    def test_named_section(self, tmp_path):
        """Test the named section is preferred."""
        path = tmp_path / "cfg.yml"
        path.write_text("cratescout:\n  request_timeout: 45\nother: 1\n", encoding="utf-8")

        assert load_config(str(path)) == {"request_timeout": 45}

    def test_malformed_yaml(self, tmp_path, caplog):
        """Test malformed YAML logs and yields empty settings."""
        path = tmp_path / "cfg.yml"
        path.write_text("registry_url: [unclosed\n", encoding="utf-8")

        assert load_config(str(path)) == {}
        assert "Failed to load config" in caplog.text

    def test_non_mapping(self, tmp_path):
        """Test a non-mapping document is ignored."""
        path = tmp_path / "cfg.yml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        assert load_config(str(path)) == {}


class TestOverrides:
    """Precedence of config file and CLI flags."""

    def test_apply_settings(self):
        """Test settings are converted onto Constants."""
        apply_settings({
            "registry_url": "https://mirror.test/",
            "connect_timeout": "3",
            "request_timeout": 9,
            "channel_size": "12",
            "user_agent": "cratescout-test/2",
        })

        assert Constants.REGISTRY_URL == "https://mirror.test/"
        assert Constants.CONNECT_TIMEOUT == 3.0
        assert Constants.REQUEST_TIMEOUT == 9.0
        assert Constants.RESULT_CHANNEL_SIZE == 12
        assert Constants.USER_AGENT == "cratescout-test/2"

    def test_unknown_and_invalid_values_skipped(self, caplog):
        """Test unknown keys and bad values are skipped."""
        before = Constants.RESULT_CHANNEL_SIZE

        apply_settings({"bogus": 1, "channel_size": "many"})

        assert Constants.RESULT_CHANNEL_SIZE == before
        assert "unknown config key" in caplog.text
        assert "invalid value" in caplog.text

    def test_cli_flags_win_over_file(self, tmp_path):
        """Test CLI flags override the config file."""
        path = tmp_path / "cfg.yml"
        path.write_text("registry_url: https://file.test/\nchannel_size: 5\n", encoding="utf-8")
        args = SimpleNamespace(CONFIG=str(path), REGISTRY_URL="https://cli.test/", CHANNEL_SIZE=None)

        apply_config_overrides(args)

        assert Constants.REGISTRY_URL == "https://cli.test/"
        assert Constants.RESULT_CHANNEL_SIZE == 5
