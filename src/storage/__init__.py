"""
Object storage backends.
"""

from .base import ObjectStore
from .local_store import LocalObjectStore, open_bucket
from .memory_store import InMemoryObjectStore

__all__ = [
    "ObjectStore",
    "LocalObjectStore",
    "InMemoryObjectStore",
    "open_bucket",
]
