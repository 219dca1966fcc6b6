"""Adapters for persistence and messaging."""
