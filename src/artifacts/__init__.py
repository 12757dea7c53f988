"""Catalog writing, relocation and cleanup."""
