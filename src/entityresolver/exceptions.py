"""Custom exceptions for entityresolver.

Every fatal condition surfaces as a ``SchemaError`` (or one of its
subclasses). Messages name the offending entity, field or relationship and
say what has to change for generation to proceed.
"""

from __future__ import annotations

import json
from typing import Any


def _stringify(data: Any) -> str:
    return json.dumps(data, indent=4, default=str)


class EntityResolverError(Exception):
    """Base exception for all entityresolver errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Return error as JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class StoreError(EntityResolverError):
    """A persisted entity document could not be read or written."""

    def __init__(self, entity_name: str, reason: str) -> None:
        message = f"The entity configuration file for '{entity_name}' could not be read: {reason}"
        super().__init__(message, {"entity_name": entity_name, "reason": reason})
        self.entity_name = entity_name
        self.reason = reason


class SchemaError(EntityResolverError):
    """The entity document cannot be repaired; resolution aborts."""

    def __init__(
        self,
        message: str,
        entity_name: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = {"entity_name": entity_name}
        ctx.update(context or {})
        super().__init__(message, ctx)
        self.entity_name = entity_name


class MissingAttributeError(SchemaError):
    """A required key is absent and has no safe default."""

    def __init__(
        self,
        key: str,
        entity_name: str,
        owner_kind: str | None = None,
        owner: dict[str, Any] | None = None,
    ) -> None:
        if owner_kind is None:
            message = f"{key} is missing in {entity_name}.json"
        else:
            message = (
                f"{key} is missing in {entity_name}.json for {owner_kind} {_stringify(owner)}"
            )
        super().__init__(message, entity_name, {"key": key, "owner_kind": owner_kind})
        self.key = key
        self.owner_kind = owner_kind


class InvalidEntityNameError(SchemaError):
    """Entity name breaks the naming rules."""

    def __init__(self, entity_name: str, reason: str) -> None:
        super().__init__(reason, entity_name, {"reason": reason})
        self.reason = reason


class InvalidTableNameError(SchemaError):
    """Table name breaks the naming or length rules."""

    def __init__(self, table_name: str, entity_name: str, reason: str) -> None:
        instructions = (
            f"You can specify a different table name in the {entity_name}.json file "
            "and then resolve the entity again."
        )
        super().__init__(
            f"{reason}\n{instructions}",
            entity_name,
            {"table_name": table_name, "reason": reason},
        )
        self.table_name = table_name
        self.reason = reason


class DuplicateFieldError(SchemaError):
    """Two fields share the same fieldName."""

    def __init__(self, field_name: str, entity_name: str) -> None:
        message = f"Field '{field_name}' is declared more than once in {entity_name}.json"
        super().__init__(message, entity_name, {"field_name": field_name})
        self.field_name = field_name


class UnsupportedValidationRuleError(SchemaError):
    """fieldValidateRules contains something outside the supported set."""

    def __init__(
        self,
        rule: Any,
        field: dict[str, Any],
        entity_name: str,
        supported: list[str],
    ) -> None:
        message = (
            f"fieldValidateRules contains unknown validation rule {rule} in {entity_name}.json "
            f"for field {_stringify(field)} [supported validation rules {','.join(supported)}]"
        )
        super().__init__(
            message,
            entity_name,
            {"rule": rule, "field_name": field.get("fieldName"), "supported_rules": supported},
        )
        self.rule = rule


class InvalidRelationshipTypeError(SchemaError):
    """Invalid relationship type specified."""

    VALID_TYPES = ["one-to-one", "one-to-many", "many-to-one", "many-to-many"]

    def __init__(self, relationship_type: Any, entity_name: str) -> None:
        message = (
            f"Invalid relationship type '{relationship_type}' in {entity_name}.json. "
            f"Valid types: {', '.join(self.VALID_TYPES)}"
        )
        super().__init__(
            message,
            entity_name,
            {"relationship_type": relationship_type, "valid_types": self.VALID_TYPES},
        )
        self.relationship_type = relationship_type


class IncompatibleConfigurationError(SchemaError):
    """Application-level options cannot be combined with entity generation."""

    pass
