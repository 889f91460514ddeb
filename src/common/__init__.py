"""Shared helpers used across the DAL and row-editing packages."""
