"""Pandoc-based markdown rendering."""
