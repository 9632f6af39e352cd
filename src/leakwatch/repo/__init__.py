"""Version-control-aware file selection."""

from leakwatch.repo.base import ScanMode, VersionControl
from leakwatch.repo.git import GitCli
from leakwatch.repo.selector import FileSelector

__all__ = ["FileSelector", "GitCli", "ScanMode", "VersionControl"]
