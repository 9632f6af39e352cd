"""Secret scanning — content matching and scan orchestration."""
