"""Data-access layer."""
