"""DAL utility helpers."""
