"""Shared utilities: logging and structured-text validation."""
