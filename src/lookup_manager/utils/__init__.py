"""Utility helpers for the lookup manager."""
