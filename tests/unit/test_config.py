"""Tests for scanner configuration loading and exclusion rules."""

from __future__ import annotations

from pathlib import Path

import pytest

from leakwatch.config import ScannerConfig
from leakwatch.errors import RuleError
from leakwatch.repo.base import ScanMode
from leakwatch.rules.models import Severity


class TestDefaults:
    def test_values(self):
        config = ScannerConfig()
        assert config.max_file_size == 10 * 1024 * 1024
        assert config.context_lines == 3
        assert config.default_scan_mode is ScanMode.RISKY
        assert config.enabled_severities == set(Severity)
        assert config.database == Path(".security-findings.json")
        assert "node_modules" in config.excluded_paths
        assert "*.log" in config.excluded_files

    def test_lists_not_shared(self):
        a, b = ScannerConfig(), ScannerConfig()
        a.excluded_paths.append("extra")
        assert "extra" not in b.excluded_paths


class TestExclusion:
    @pytest.mark.parametrize(
        "path",
        [
            "node_modules/pkg/index.js",
            "web/node_modules/pkg/index.js",
            ".git/config",
            "build/out.txt",
            "logs/app.log",
            "cache/x.tmp",
            ".security-findings.json",
        ],
    )
    def test_excluded(self, path):
        assert ScannerConfig().is_excluded(path)

    @pytest.mark.parametrize(
        "path",
        [
            "src/app.py",
            ".github/workflows/ci.yml",
            "app/builder.py",
            "distance.py",
            "catalog.py",
        ],
    )
    def test_not_excluded(self, path):
        assert not ScannerConfig().is_excluded(path)

    def test_is_excluded_dir(self):
        config = ScannerConfig()
        assert config.is_excluded_dir("vendor")
        assert config.is_excluded_dir("a/vendor/b")
        assert not config.is_excluded_dir("vendored")

    def test_nested_excluded_path(self):
        config = ScannerConfig(excluded_paths=["docs/generated"])
        assert config.is_excluded("docs/generated/api.md")
        assert not config.is_excluded("docs/guide.md")


class TestFromYaml:
    def test_full_file(self, fixtures_dir: Path):
        config = ScannerConfig.from_yaml((fixtures_dir / "config.yaml").read_text())

        assert config.excluded_paths == ["node_modules", ".git", "third_party"]
        assert config.excluded_files == ["*.log", "*.min.js"]
        assert config.max_file_size == 2048
        assert config.context_lines == 2
        assert config.enabled_severities == {Severity.CRITICAL, Severity.HIGH}
        assert config.default_scan_mode is ScanMode.TRACKED
        assert config.respect_gitignore is False
        assert config.max_history_depth == 25
        assert config.database == Path("audit/findings.json")
        assert [r.name for r in config.rules] == ["internal_token"]
        assert config.disabled_rules == ["generic_secret"]

    def test_empty_document_gives_defaults(self):
        assert ScannerConfig.from_yaml("") == ScannerConfig()

    def test_partial_document(self):
        config = ScannerConfig.from_yaml("context_lines: 0\n")
        assert config.context_lines == 0
        assert config.max_file_size == ScannerConfig().max_file_size

    def test_severity_names_case_insensitive(self):
        config = ScannerConfig.from_yaml("enabled_severity: [CRITICAL, Low]\n")
        assert config.enabled_severities == {Severity.CRITICAL, Severity.LOW}

    @pytest.mark.parametrize(
        "text",
        [
            "- just\n- a list\n",
            "default_scan_mode: everything\n",
            "max_file_size: 0\n",
            "context_lines: -1\n",
            "enabled_severity: [urgent]\n",
        ],
    )
    def test_invalid_values(self, text):
        with pytest.raises(ValueError):
            ScannerConfig.from_yaml(text)

    def test_invalid_rule(self):
        with pytest.raises(RuleError):
            ScannerConfig.from_yaml("patterns:\n  - name: broken\n")


class TestLoad:
    def test_explicit_path(self, fixtures_dir: Path):
        config = ScannerConfig.load(fixtures_dir / "config.yaml")
        assert config.max_file_size == 2048

    def test_no_file_gives_defaults(self):
        assert ScannerConfig.load() == ScannerConfig()

    def test_xdg_config_file(self, tmp_path: Path):
        config_dir = tmp_path / "xdg" / "leakwatch"
        config_dir.mkdir(parents=True)
        (config_dir / "config.yaml").write_text("context_lines: 7\n")

        assert ScannerConfig.load().context_lines == 7

    def test_env_overrides(self, fixtures_dir: Path, monkeypatch):
        monkeypatch.setenv("LEAKWATCH_DATABASE", "/tmp/other.json")
        monkeypatch.setenv("LEAKWATCH_SCAN_MODE", "comprehensive")
        monkeypatch.setenv("LEAKWATCH_MAX_FILE_SIZE", "4096")
        monkeypatch.setenv("LEAKWATCH_WEB_PORT", "9000")

        config = ScannerConfig.load(fixtures_dir / "config.yaml")

        assert config.database == Path("/tmp/other.json")
        assert config.default_scan_mode is ScanMode.COMPREHENSIVE
        assert config.max_file_size == 4096
        assert config.web_port == 9000

    def test_invalid_env_mode(self, monkeypatch):
        monkeypatch.setenv("LEAKWATCH_SCAN_MODE", "sometimes")
        with pytest.raises(ValueError):
            ScannerConfig.load()
