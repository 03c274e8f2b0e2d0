"""Shared errors, configuration, models, and helpers."""
