"""Shared time and calendar helpers."""
