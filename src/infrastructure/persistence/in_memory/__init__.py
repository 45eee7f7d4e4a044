"""
In-Memory Persistence

Thread-safe implementations of the matching repositories for single-process
deployments and tests.
"""

from .edge_store import InMemoryEdgeStore
from .user_directory import InMemoryUserDirectory

__all__ = ["InMemoryEdgeStore", "InMemoryUserDirectory"]
