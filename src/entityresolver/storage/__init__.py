"""Entity document storage for entityresolver.

Stores persist one camelCase JSON document per entity name:
- InMemoryEntityStore: dict-backed, used by tests and embedding callers
- JsonDirectoryStore: ``<dir>/<Name>.json`` files (``.jhipster`` by default)
"""

from entityresolver.storage.stores import (
    EntityStore,
    InMemoryEntityStore,
    JsonDirectoryStore,
    store_lookup,
)

__all__ = ["EntityStore", "InMemoryEntityStore", "JsonDirectoryStore", "store_lookup"]
