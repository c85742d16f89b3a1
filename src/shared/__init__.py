"""Helpers shared across the content and quiz packages."""
