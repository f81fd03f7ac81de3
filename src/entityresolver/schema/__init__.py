"""Entity document validation and resolution stages."""

from entityresolver.schema.assembler import (
    ResolutionResult,
    assemble_descriptor,
    build_storage_data,
    resolve_entity,
)
from entityresolver.schema.fields import check_field, normalize_field
from entityresolver.schema.relationships import (
    OwnerContext,
    check_relationship,
    resolve_relationship,
)
from entityresolver.schema.validator import ChangelogClock, validate_entity

__all__ = [
    "ChangelogClock",
    "OwnerContext",
    "ResolutionResult",
    "assemble_descriptor",
    "build_storage_data",
    "check_field",
    "check_relationship",
    "normalize_field",
    "resolve_entity",
    "resolve_relationship",
    "validate_entity",
]
