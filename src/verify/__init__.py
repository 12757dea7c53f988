"""Determinism verification for catalog plans."""
