"""Tests for the cratescout command line."""

import json
from unittest.mock import patch

import pytest

import cratescout
from args import parse_args
from common.errors import InvalidPackageName, InvalidVersionRequirement, ParseError
from constants import Constants
from exploration.demand import LookupFeatures
from exploration.engine import ExplorationResult
from versioning.parser import parse_seed_token, split_feature_list, tokenize_at
from versioning.semver import VersionReq


def _result(*names):
    return ExplorationResult(
        packages={n: LookupFeatures({"default"}, {VersionReq.any()}) for n in names},
        elapsed_ms=12,
        fetch_count=len(names),
    )


class TestArgParsing:
    """Tests for argument parsing."""

    def test_positional_packages(self):
        """Test seed tokens are collected positionally."""
        ns = parse_args(["serde@1.0", "tokio"])
        assert ns.packages == ["serde@1.0", "tokio"]

    def test_defaults(self):
        """Test defaults when no options are given."""
        ns = parse_args([])
        assert ns.packages == []
        assert ns.FEATURES == []
        assert ns.NO_DEFAULT_FEATURES is False
        assert ns.LOG_LEVEL == "INFO"
        assert ns.OUTPUT is None

    def test_features_accumulate(self):
        """Test repeated feature flags accumulate."""
        ns = parse_args(["app", "-F", "ext", "--features", "serde/derive,std"])
        assert split_feature_list(ns.FEATURES) == ["ext", "serde/derive", "std"]

    def test_registry_and_channel(self):
        """Test registry URL and channel size options."""
        ns = parse_args(["app", "--registry-url", "http://mirror/", "--channel-size", "8"])
        assert ns.REGISTRY_URL == "http://mirror/"
        assert ns.CHANNEL_SIZE == 8


class TestSeedParsing:
    """Tests for seed token parsing."""

    def test_tokenize(self):
        """Test splitting a token on its first at sign."""
        assert tokenize_at("serde@1.0") == ("serde", "1.0")
        assert tokenize_at("serde") == ("serde", None)
        assert tokenize_at("serde@") == ("serde", None)
        assert tokenize_at("a@>=1.0.0@x") == ("a", ">=1.0.0@x")

    def test_missing_requirement_means_any(self):
        """Test a name without a range requests any version."""
        seed = parse_seed_token("leaf")
        assert seed.name == "leaf"
        assert seed.requirement == VersionReq.any()

    def test_requirement(self):
        """Test a bare version seed becomes a caret range."""
        seed = parse_seed_token("leaf@1.0")
        assert str(seed.requirement) == "^1.0"
        assert seed.raw_token == "leaf@1.0"

    def test_empty_name(self):
        """Test an empty seed name is rejected."""
        with pytest.raises(InvalidPackageName):
            parse_seed_token("@1.0")

    def test_bad_requirement(self):
        """Test an unparsable seed range is rejected."""
        with pytest.raises(InvalidVersionRequirement):
            parse_seed_token("leaf@not a version")

    def test_build_seeds(self):
        """Test seeds carry features and ranges."""
        seeds = cratescout.build_seeds(["a", "b@^2"], ["ext"], default_features=False)

        assert [name for name, _ in seeds] == ["a", "b"]
        assert seeds[0][1].features == {"ext"}
        assert {str(r) for r in seeds[1][1].version_reqs} == {"^2"}

    def test_build_seeds_default_feature(self):
        """Test seeds request the default feature."""
        seeds = cratescout.build_seeds(["a"])

        assert seeds[0][1].features == {"default"}


class TestMain:
    """Tests for the main entry point."""

    @patch("cratescout.Exploration")
    def test_prints_summary(self, mock_exploration, capsys):
        """Test a successful run prints the sorted summary."""
        mock_exploration.return_value.explore.return_value = _result("lib", "app")

        with pytest.raises(SystemExit) as excinfo:
            cratescout.main(["app"])

        assert excinfo.value.code == 0
        out = capsys.readouterr().out
        assert out.strip() == "Discovered 2 crates in 12ms: app, lib"
        seeds = mock_exploration.return_value.explore.call_args[0][0]
        assert seeds[0][0] == "app"
        assert seeds[0][1].features == {"default"}

    @patch("cratescout.Exploration")
    def test_no_seeds_prints_usage_hint(self, mock_exploration, capsys, caplog):
        """Test running without seeds logs the usage hint."""
        with pytest.raises(SystemExit) as excinfo:
            cratescout.main([])

        assert excinfo.value.code == 0
        assert capsys.readouterr().out == ""
        assert cratescout.USAGE_HINT in caplog.text
        mock_exploration.assert_not_called()

    @patch("cratescout.Exploration")
    def test_exploration_error_exit_code(self, mock_exploration, capsys):
        """Test exploration errors exit with their code."""
        mock_exploration.return_value.explore.side_effect = ParseError(
            "bad line", package="broken", line="{"
        )

        with pytest.raises(SystemExit) as excinfo:
            cratescout.main(["app"])

        assert excinfo.value.code == 3
        assert capsys.readouterr().out == ""

    def test_invalid_seed_exit_code(self):
        """Test an invalid seed exits with the input error code."""
        with pytest.raises(SystemExit) as excinfo:
            cratescout.main(["@1.0"])

        assert excinfo.value.code == 4

    @patch("cratescout.Exploration")
    def test_registry_override_applied(self, mock_exploration):
        """Test CLI overrides reach Constants and the engine."""
        mock_exploration.return_value.explore.return_value = _result("app")

        with pytest.raises(SystemExit):
            cratescout.main(["app", "--registry-url", "http://mirror.test/", "--channel-size", "7"])

        assert Constants.REGISTRY_URL == "http://mirror.test/"
        mock_exploration.assert_called_once_with(channel_size=7)

    @patch("cratescout.Exploration")
    def test_json_export(self, mock_exploration, tmp_path):
        """Test the JSON report contents."""
        mock_exploration.return_value.explore.return_value = _result("lib", "app")
        out = tmp_path / "report.json"

        with pytest.raises(SystemExit):
            cratescout.main(["app", "-o", str(out)])

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["count"] == 2
        assert data["fetches"] == 2
        assert data["elapsed_ms"] == 12
        assert [p["name"] for p in data["packages"]] == ["app", "lib"]
        assert data["packages"][0]["features"] == ["default"]
        assert data["packages"][0]["version_reqs"] == ["*"]
