"""
Persistence layer: storage handle, ORM models and repositories.
"""
from .session import Database

__all__ = ["Database"]
