"""Persistence adapters."""

from .registry_sqlalchemy import SQLAlchemyRegistry

__all__ = ["SQLAlchemyRegistry"]
