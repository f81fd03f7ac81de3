"""Core module for entityresolver."""

from entityresolver.core.config import ResolverConfig
from entityresolver.core.engine import EntityResolver
from entityresolver.core.types import (
    DatabaseType,
    DtoMode,
    EntityDescriptor,
    EntityDocument,
    FieldSpec,
    FieldType,
    PaginationMode,
    RelationshipSpec,
    RelationshipType,
    ServiceMode,
)

__all__ = [
    "EntityResolver",
    "ResolverConfig",
    "DatabaseType",
    "DtoMode",
    "EntityDescriptor",
    "EntityDocument",
    "FieldSpec",
    "FieldType",
    "PaginationMode",
    "RelationshipSpec",
    "RelationshipType",
    "ServiceMode",
]
