"""
Persistence module: document records, profile records and raw file storage.
"""
from persistence.base import (
    BlobStorage,
    DocumentNotFoundError,
    DocumentRepository,
    DownloadError,
    PersistenceError,
    PersistenceException,
    ProfileRepository,
    StoreBundle,
)
from persistence.factory import (
    create_store,
    create_store_from_settings,
    list_stores,
    register_store,
)
from persistence.implementations.memory import (
    InMemoryBlobStorage,
    InMemoryDocumentRepository,
    InMemoryProfileRepository,
)

__all__ = [
    "BlobStorage",
    "DocumentNotFoundError",
    "DocumentRepository",
    "DownloadError",
    "PersistenceError",
    "PersistenceException",
    "ProfileRepository",
    "StoreBundle",
    "create_store",
    "create_store_from_settings",
    "list_stores",
    "register_store",
    "InMemoryBlobStorage",
    "InMemoryDocumentRepository",
    "InMemoryProfileRepository",
]
