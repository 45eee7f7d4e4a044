"""
Matching Repository Interfaces.

Data access contracts defined by the Domain Layer and implemented in
src/infrastructure/persistence.
"""

from src.domain.matching.repositories.edge_store import EdgeStoreProtocol
from src.domain.matching.repositories.user_directory import UserDirectoryProtocol

__all__ = ["EdgeStoreProtocol", "UserDirectoryProtocol"]
