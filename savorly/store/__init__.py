"""Persistence layer: the Store contract and its SQLAlchemy implementation."""

from .base import Store
from .sql import SQLStore

__all__ = ["Store", "SQLStore"]
