"""Business logic for account operations."""
