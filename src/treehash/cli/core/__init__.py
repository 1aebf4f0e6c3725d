"""Shared helpers for CLI command implementations."""
