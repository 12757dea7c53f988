"""Dependency graph helpers for catalog partitions."""
