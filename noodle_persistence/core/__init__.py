"""
Core lifecycle: connection management and the persistence engine.
"""

from .connection import ConnectionManager
from .engine import NoodlePersistence

__all__ = ["ConnectionManager", "NoodlePersistence"]
