"""Data access helpers shared by the service layer."""

from .base import AsyncBaseRepository, EntityType, QueryBuilder

__all__ = ["AsyncBaseRepository", "EntityType", "QueryBuilder"]
