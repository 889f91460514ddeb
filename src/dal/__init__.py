"""Data access layer: MySQL connection, raw executor and catalog inspection."""
