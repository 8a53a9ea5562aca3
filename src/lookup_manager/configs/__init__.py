"""Whitelisted settings lookup."""
