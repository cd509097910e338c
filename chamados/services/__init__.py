"""External service connectors."""

from .postgres import PostgresDatabase

__all__ = ["PostgresDatabase"]
