"""Synthetic donation data for development and tests."""
