"""Utilities for the permissions feature."""

from .queries import validate_schema_name

__all__ = ["validate_schema_name"]
