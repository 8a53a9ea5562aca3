"""Enum discovery, formatting and lookup."""
