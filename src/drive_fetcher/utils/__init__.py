"""Shared helpers: log sanitization and caller-side retries."""
