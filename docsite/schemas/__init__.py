"""Serialized page and site data."""
