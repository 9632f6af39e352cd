"""HTTP API exposing scans and findings."""
