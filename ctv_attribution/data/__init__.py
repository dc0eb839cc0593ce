"""Bundled synthetic campaign fixtures."""
