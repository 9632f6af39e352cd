"""leakwatch — find committed secrets and track them across scans."""

__version__ = "0.1.0"
