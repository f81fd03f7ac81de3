"""entityresolver - metadata derivation for entity-modeling documents.

Takes a user-authored entity document (fields, validation rules,
relationships to other entities) and produces a fully resolved descriptor
with every name, flag and reciprocal relationship detail that template
renderers need. Omitted values are inferred, each inference is reported as
a warning, and unrepairable documents raise ``SchemaError``.

Example:
    from entityresolver import EntityResolver, InMemoryEntityStore, ResolverConfig

    store = InMemoryEntityStore(
        {
            "Order": {
                "fields": [{"fieldName": "total", "fieldType": "BigDecimal"}],
                "relationships": [
                    {
                        "relationshipName": "customer",
                        "otherEntityName": "customer",
                        "relationshipType": "many-to-one",
                    }
                ],
            }
        }
    )
    resolver = EntityResolver(store, ResolverConfig(base_name="shop"))

    result = resolver.resolve("Order")
    result.descriptor.entity_table_name  # "jhi_order"
    for warning in result.warnings:
        print(warning.message)
"""

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
from entityresolver.diagnostics import ResolutionWarning
from entityresolver.exceptions import (
    DuplicateFieldError,
    EntityResolverError,
    IncompatibleConfigurationError,
    InvalidEntityNameError,
    InvalidRelationshipTypeError,
    InvalidTableNameError,
    MissingAttributeError,
    SchemaError,
    StoreError,
    UnsupportedValidationRuleError,
)
from entityresolver.schema import (
    ChangelogClock,
    ResolutionResult,
    assemble_descriptor,
    build_storage_data,
    normalize_field,
    resolve_entity,
    resolve_relationship,
    validate_entity,
)
from entityresolver.storage import (
    EntityStore,
    InMemoryEntityStore,
    JsonDirectoryStore,
    store_lookup,
)

__version__ = "0.1.0"

__all__ = [
    # Main classes
    "EntityResolver",
    "ResolverConfig",
    "ResolutionResult",
    "ResolutionWarning",
    "ChangelogClock",
    # Types
    "EntityDocument",
    "EntityDescriptor",
    "FieldSpec",
    "RelationshipSpec",
    "FieldType",
    "RelationshipType",
    "DatabaseType",
    "DtoMode",
    "ServiceMode",
    "PaginationMode",
    # Stages
    "validate_entity",
    "normalize_field",
    "resolve_relationship",
    "assemble_descriptor",
    "resolve_entity",
    "build_storage_data",
    # Storage
    "EntityStore",
    "InMemoryEntityStore",
    "JsonDirectoryStore",
    "store_lookup",
    # Exceptions
    "EntityResolverError",
    "SchemaError",
    "StoreError",
    "MissingAttributeError",
    "InvalidEntityNameError",
    "InvalidTableNameError",
    "DuplicateFieldError",
    "UnsupportedValidationRuleError",
    "InvalidRelationshipTypeError",
    "IncompatibleConfigurationError",
]
