"""
Persistence adapters.

DocumentStore encapsulates how the JSON document is read and written;
CollectionRepository exposes CRUD over one of its collections. Routers
depend on repositories rather than touching the JSON file.
"""

from .collection_repository import CollectionRepository, build_repositories
from .json_storage import COLLECTIONS, DocumentStore

__all__ = ["COLLECTIONS", "CollectionRepository", "DocumentStore", "build_repositories"]
