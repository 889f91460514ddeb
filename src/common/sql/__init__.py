"""SQL dialect helpers."""
