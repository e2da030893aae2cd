"""Shared helpers: command execution, filesystem, JSON and logging."""
