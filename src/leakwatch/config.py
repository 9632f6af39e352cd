"""Global configuration — YAML config file, env vars, defaults."""

from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from leakwatch.repo.base import ScanMode
from leakwatch.rules.loader import parse_rules
from leakwatch.rules.models import Rule, Severity

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = ".security-findings.json"
CONFIG_FILENAME = "config.yaml"


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "leakwatch"
    return Path.home() / ".config" / "leakwatch"


def _default_excluded_paths() -> list[str]:
    return ["node_modules", ".git", "vendor", "dist", "build"]


def _default_excluded_files() -> list[str]:
    return ["*.log", "*.tmp", "*.cache", DEFAULT_DATABASE, "security-config.json"]


@dataclass
class ScannerConfig:
    """Scanner-wide configuration."""

    excluded_paths: list[str] = field(default_factory=_default_excluded_paths)
    excluded_files: list[str] = field(default_factory=_default_excluded_files)
    max_file_size: int = 10 * 1024 * 1024
    context_lines: int = 3
    enabled_severities: set[Severity] = field(default_factory=lambda: set(Severity))
    default_scan_mode: ScanMode = ScanMode.RISKY
    respect_gitignore: bool = True
    max_history_depth: int = 100
    database: Path = field(default_factory=lambda: Path(DEFAULT_DATABASE))
    rules: list[Rule] = field(default_factory=list)
    disabled_rules: list[str] = field(default_factory=list)
    web_host: str = "127.0.0.1"
    web_port: int = 8471

    def is_excluded(self, file_path: str | Path) -> bool:
        """Excluded if under an excluded path or the basename matches a glob."""
        if self.is_excluded_dir(file_path):
            return True
        name = os.path.basename(str(file_path))
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.excluded_files)

    def is_excluded_dir(self, path: str | Path) -> bool:
        """Whether an excluded path occurs in ``path`` on component boundaries.

        ``build`` matches ``app/build/x`` but not ``app/builder.py``, and
        ``.git`` does not match ``.github``.
        """
        wrapped = f"/{Path(path).as_posix().strip('/')}/"
        for excluded in self.excluded_paths:
            needle = excluded.replace(os.sep, "/").strip("/")
            if needle and f"/{needle}/" in wrapped:
                return True
        return False

    @classmethod
    def load(cls, path: str | Path | None = None) -> ScannerConfig:
        """Load config from a YAML file (or the XDG default) plus env vars."""
        if path is None:
            candidate = _default_config_dir() / CONFIG_FILENAME
            path = candidate if candidate.is_file() else None

        if path is not None:
            config = cls.from_yaml(Path(path).read_text(encoding="utf-8"))
            logger.info("Loaded configuration from %s", path)
        else:
            config = cls()

        env_db = os.environ.get("LEAKWATCH_DATABASE")
        if env_db:
            config.database = Path(env_db)

        env_mode = os.environ.get("LEAKWATCH_SCAN_MODE")
        if env_mode:
            config.default_scan_mode = ScanMode(env_mode)

        env_size = os.environ.get("LEAKWATCH_MAX_FILE_SIZE")
        if env_size:
            config.max_file_size = int(env_size)

        env_port = os.environ.get("LEAKWATCH_WEB_PORT")
        if env_port:
            config.web_port = int(env_port)

        return config

    @classmethod
    def from_yaml(cls, text: str) -> ScannerConfig:
        data = yaml.safe_load(text) or {}
        if not isinstance(data, dict):
            raise ValueError("Config YAML must be a mapping")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> ScannerConfig:
        config = cls()
        if "excluded_paths" in data:
            config.excluded_paths = [str(p) for p in data["excluded_paths"]]
        if "excluded_files" in data:
            config.excluded_files = [str(p) for p in data["excluded_files"]]
        if "max_file_size" in data:
            config.max_file_size = int(data["max_file_size"])
        if "context_lines" in data:
            config.context_lines = int(data["context_lines"])
        if "enabled_severity" in data:
            config.enabled_severities = {
                Severity(str(s).lower()) for s in data["enabled_severity"]
            }
        if "default_scan_mode" in data:
            config.default_scan_mode = ScanMode(data["default_scan_mode"])
        if "respect_gitignore" in data:
            config.respect_gitignore = bool(data["respect_gitignore"])
        if "max_history_depth" in data:
            config.max_history_depth = int(data["max_history_depth"])
        if "database" in data:
            config.database = Path(data["database"])
        config.rules = parse_rules(data.get("patterns", []))
        config.disabled_rules = [str(n) for n in data.get("disabled_patterns", [])]

        if config.max_file_size <= 0:
            raise ValueError("max_file_size must be positive")
        if config.context_lines < 0:
            raise ValueError("context_lines must not be negative")
        return config
