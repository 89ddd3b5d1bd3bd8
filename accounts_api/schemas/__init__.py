"""Pydantic request/response and query schemas."""
