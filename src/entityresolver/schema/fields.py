"""Field checks and derivation."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from entityresolver.core.types import (
    LEGACY_TEMPORAL_TYPES,
    SUPPORTED_VALIDATION_RULES,
    VALIDATION_RULE_COMPANIONS,
    FieldSpec,
    FieldType,
)
from entityresolver.diagnostics import Diagnostics, ResolutionWarning
from entityresolver.exceptions import (
    MissingAttributeError,
    SchemaError,
    UnsupportedValidationRuleError,
)
from entityresolver.naming import lower_first, snake_case, start_case, upper_first
from entityresolver.reserved import is_reserved_table_name

PRIMITIVE_FIELD_TYPES = frozenset(FieldType.values())


def check_field(raw: Mapping[str, Any], entity_name: str) -> None:
    """Raise ``SchemaError`` for any unrepairable problem in a raw field."""
    if not isinstance(raw, Mapping):
        raise SchemaError(f"A field in {entity_name}.json is not an object: {raw!r}", entity_name)
    field = dict(raw)
    if field.get("fieldName") is None:
        raise MissingAttributeError("fieldName", entity_name, "field", field)
    if field.get("fieldType") is None:
        raise MissingAttributeError("fieldType", entity_name, "field", field)

    rules = field.get("fieldValidateRules")
    if rules is None:
        return
    if not isinstance(rules, list):
        raise SchemaError(
            f"fieldValidateRules is not an array in {entity_name}.json "
            f"for field {field['fieldName']}",
            entity_name,
            {"field_name": field["fieldName"]},
        )
    for rule in rules:
        if not isinstance(rule, str) or rule not in VALIDATION_RULE_COMPANIONS:
            raise UnsupportedValidationRuleError(
                rule, field, entity_name, SUPPORTED_VALIDATION_RULES
            )
    for rule in rules:
        companion = VALIDATION_RULE_COMPANIONS[rule]
        if companion is not None and field.get(companion) is None:
            raise MissingAttributeError(companion, entity_name, "field", field)


def java_bean_method_name(field_name: str) -> str:
    """Accessor suffix; ``eMail`` keeps its case, ``email`` becomes ``Email``."""
    if len(field_name) > 1:
        first, second = field_name[0], field_name[1]
        if first == first.lower() and second == second.upper():
            return first.lower() + field_name[1:]
    return upper_first(field_name)


def database_column_name(
    field_name: str,
    *,
    column_prefix: str,
    prod_database_type: str | None,
    diagnostics: Diagnostics,
) -> str:
    underscored = snake_case(field_name)
    if not is_reserved_table_name(underscored, prod_database_type):
        return underscored
    if not column_prefix:
        diagnostics.warn(
            f"The field name '{underscored}' is regarded as a reserved keyword, but you have "
            "defined an empty jhiPrefix. This might lead to a non-working application.",
            key="fieldName",
            fallback=underscored,
        )
        return underscored
    return f"{column_prefix}_{underscored}"


def normalize_field(
    raw: FieldSpec | Mapping[str, Any],
    *,
    entity_name: str,
    column_prefix: str = "",
    prod_database_type: str | None = None,
) -> tuple[FieldSpec, list[ResolutionWarning]]:
    """Return a fully derived copy of ``raw`` and the warnings it produced.

    Values already present on the input are kept, so normalizing an already
    normalized field is a no-op.
    """
    if isinstance(raw, FieldSpec):
        field = raw
    else:
        check_field(raw, entity_name)
        try:
            field = FieldSpec.model_validate(dict(raw))
        except ValidationError as e:
            raise SchemaError(f"Invalid field in {entity_name}.json: {e}", entity_name) from e

    diagnostics = Diagnostics(entity_name)
    updates: dict[str, Any] = {}

    field_type = field.field_type
    if field_type in LEGACY_TEMPORAL_TYPES:
        field_type = FieldType.INSTANT.value
        updates["field_type"] = field_type

    rules = field.field_validate_rules
    if rules and field_type in (FieldType.BYTE_ARRAY, FieldType.BYTE_BUFFER):
        diagnostics.warn(
            f"Cannot use validation in {entity_name}.json for field {field.field_name}: "
            "Bean Validation does not work with LOB fields, so LOB validation is disabled",
            key="fieldValidateRules",
            fallback=[],
        )
        rules = []
        updates["field_validate_rules"] = rules

    is_enum = field_type not in PRIMITIVE_FIELD_TYPES
    updates["field_is_enum"] = is_enum
    if is_enum and field.enum_instance is None:
        updates["enum_instance"] = lower_first(field_type)

    name = field.field_name
    if field.field_name_capitalized is None:
        updates["field_name_capitalized"] = upper_first(name)
    if field.field_name_underscored is None:
        updates["field_name_underscored"] = snake_case(name)
    if field.field_name_as_database_column is None:
        updates["field_name_as_database_column"] = database_column_name(
            name,
            column_prefix=column_prefix,
            prod_database_type=prod_database_type,
            diagnostics=diagnostics,
        )
    if field.field_name_humanized is None:
        options = field.options or {}
        updates["field_name_humanized"] = options.get("fieldNameHumanized") or start_case(name)
    if field.field_in_java_bean_method is None:
        updates["field_in_java_bean_method"] = java_bean_method_name(name)

    pattern = field.field_validate_rules_pattern
    if field.field_validate_rules_pattern_java is None and pattern:
        updates["field_validate_rules_pattern_java"] = pattern.replace("\\", "\\\\").replace(
            '"', '\\"'
        )
    if field.field_validate_rules_pattern_angular is None and pattern:
        updates["field_validate_rules_pattern_angular"] = pattern.replace('"', "&#34;")
    if field.field_validate_rules_pattern_react is None and pattern:
        updates["field_validate_rules_pattern_react"] = pattern.replace("'", "\\'")

    updates["field_validate"] = bool(rules)

    return field.model_copy(update=updates), diagnostics.warnings
