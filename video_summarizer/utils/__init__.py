"""Shared utilities: logging, error types and small helpers."""
