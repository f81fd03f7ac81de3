"""Static checks over a raw entity document.

The validator is the only stage that sees the document exactly as it was
authored. It rejects anything that cannot be repaired and substitutes the
documented defaults (each with a warning) for root keys left out.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from pydantic import ValidationError

from entityresolver.core.config import ResolverConfig
from entityresolver.core.types import (
    REACTIVE_DATABASE_TYPES,
    DatabaseType,
    DtoMode,
    EntityDocument,
    PaginationMode,
    ServiceMode,
)
from entityresolver.diagnostics import Diagnostics, ResolutionWarning
from entityresolver.exceptions import (
    DuplicateFieldError,
    IncompatibleConfigurationError,
    InvalidEntityNameError,
    InvalidTableNameError,
    SchemaError,
)
from entityresolver.naming import table_name as to_table_name
from entityresolver.naming import upper_first
from entityresolver.reserved import is_reserved_class_name, is_reserved_table_name
from entityresolver.schema.fields import check_field
from entityresolver.schema.relationships import check_relationship

ENTITY_NAME_PATTERN = re.compile(r"[a-zA-Z0-9]*")
TABLE_NAME_PATTERN = re.compile(r"[a-zA-Z0-9_]*")
RESERVED_ENTITY_SUFFIX = "Detail"

# prod database -> (warning above, error above)
TABLE_NAME_LENGTH_LIMITS: dict[str, tuple[int, int]] = {
    "oracle": (14, 26),
}

CHANGELOG_DATE_FORMAT = "%Y%m%d%H%M%S"


class ChangelogClock:
    """Issues changelog dates that strictly increase, one second apart at least."""

    def __init__(self, now: Callable[[], datetime] | None = None) -> None:
        self._now = now or (lambda: datetime.now(UTC))
        self._last: datetime | None = None

    def next_date(self) -> str:
        current = self._now().replace(microsecond=0)
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(seconds=1)
        self._last = current
        return current.strftime(CHANGELOG_DATE_FORMAT)


def validate_entity_name(name: str, *, skip_server: bool = False) -> None:
    if not ENTITY_NAME_PATTERN.fullmatch(name):
        raise InvalidEntityNameError(name, "The entity name must be alphanumeric only")
    if name[:1].isdigit():
        raise InvalidEntityNameError(name, "The entity name cannot start with a number")
    if name == "":
        raise InvalidEntityNameError(name, "The entity name cannot be empty")
    if name.endswith(RESERVED_ENTITY_SUFFIX):
        raise InvalidEntityNameError(
            name, f"The entity name cannot end with '{RESERVED_ENTITY_SUFFIX}'"
        )
    if not skip_server and is_reserved_class_name(name):
        raise InvalidEntityNameError(
            name, "The entity name cannot contain a Java or application reserved keyword"
        )


def resolve_table_name(
    table_name: str,
    *,
    entity_name: str,
    prod_database_type: str | None,
    table_prefix: str,
    skip_check_length: bool,
    diagnostics: Diagnostics,
) -> str:
    """Return the table name to use, prefixing reserved words.

    Raises:
        InvalidTableNameError: empty name, special characters, or too long
            for the production database.
    """
    if not TABLE_NAME_PATTERN.fullmatch(table_name):
        raise InvalidTableNameError(
            table_name, entity_name, "The table name cannot contain special characters."
        )
    if table_name == "":
        raise InvalidTableNameError(table_name, entity_name, "The table name cannot be empty")

    if is_reserved_table_name(table_name, prod_database_type):
        if table_prefix:
            prefixed = f"{table_prefix}_{table_name.lower()}"
            diagnostics.warn(
                f"The table name cannot contain the '{table_name.upper()}' reserved keyword, "
                f"so it will be prefixed with '{table_prefix}_'.",
                key="entityTableName",
                fallback=prefixed,
            )
            return prefixed
        diagnostics.warn(
            f"The table name contains the '{table_name.upper()}' reserved keyword but you "
            "have defined an empty jhiPrefix so it won't be prefixed and thus the generated "
            "application might not work.",
            key="entityTableName",
            fallback=table_name,
        )
        return table_name

    limits = TABLE_NAME_LENGTH_LIMITS.get(prod_database_type or "")
    if limits is not None and not skip_check_length:
        warn_above, fail_above = limits
        if len(table_name) > fail_above:
            raise InvalidTableNameError(
                table_name,
                entity_name,
                f"The table name is too long for {prod_database_type}, try a shorter name.",
            )
        if len(table_name) > warn_above:
            diagnostics.warn(
                f"The table name is long for {prod_database_type}, long table names can cause "
                "issues when used to create constraint names and join table names.",
                key="entityTableName",
            )
    return table_name


def _check_application(config: ResolverConfig, database_type: str) -> None:
    if config.reactive and database_type not in REACTIVE_DATABASE_TYPES:
        raise IncompatibleConfigurationError(
            "The entity generator doesn't support reactive apps with databases of type "
            f"{database_type} at the moment"
        )
    if config.entity_suffix == config.dto_suffix:
        raise IncompatibleConfigurationError(
            "The entity cannot be generated as the entity suffix and DTO suffix are equals !"
        )


def validate_entity(
    raw: Mapping[str, Any],
    *,
    config: ResolverConfig | None = None,
    name: str | None = None,
    clock: ChangelogClock | None = None,
) -> tuple[EntityDocument, list[ResolutionWarning]]:
    """Validate a raw entity document and apply root defaults.

    Args:
        raw: Entity document as authored (camelCase keys)
        config: Application settings; defaults are used when omitted
        name: Entity name when the document itself does not carry one
        clock: Source of changelog dates for documents without one

    Returns:
        The validated document and the warnings emitted

    Raises:
        SchemaError: The document cannot be repaired
    """
    config = config or ResolverConfig()
    clock = clock or ChangelogClock()
    data = dict(raw)

    entity_name = upper_first(name or data.get("name") or "")
    diagnostics = Diagnostics(entity_name)

    database_type = data.get("databaseType") or config.database_type
    _check_application(config, database_type)
    validate_entity_name(entity_name, skip_server=config.skip_server)

    for key in ("fields", "relationships"):
        if not isinstance(data.get(key) or [], list):
            raise SchemaError(f"{key} is not an array in {entity_name}.json", entity_name)

    fields = []
    seen: set[str] = set()
    for field in data.get("fields") or []:
        check_field(field, entity_name)
        if field["fieldName"] in seen:
            raise DuplicateFieldError(field["fieldName"], entity_name)
        seen.add(field["fieldName"])
        fields.append(dict(field))

    relationships = []
    for relationship in data.get("relationships") or []:
        checked, warnings = check_relationship(relationship, entity_name)
        diagnostics.extend(warnings)
        relationships.append(checked)

    if data.get("changelogDate") is None:
        current = clock.next_date()
        diagnostics.warn(
            f"changelogDate is missing in {entity_name}.json, using {current} as fallback",
            key="changelogDate",
            fallback=current,
        )
        data["changelogDate"] = current
    for key, fallback in (
        ("dto", DtoMode.NO.value),
        ("service", ServiceMode.NO.value),
        ("jpaMetamodelFiltering", False),
        ("pagination", PaginationMode.NO.value),
    ):
        if data.get(key) is None:
            diagnostics.warn(
                f"{key} is missing in {entity_name}.json, using {fallback} as fallback",
                key=key,
                fallback=fallback,
            )
            data[key] = fallback

    if not (database_type == DatabaseType.SQL and data["service"] != ServiceMode.NO):
        data["jpaMetamodelFiltering"] = False

    jhi_prefix = data.get("jhiPrefix") or config.jhi_prefix
    skip_check_length = bool(
        data.get("skipCheckLengthOfIdentifier") or config.skip_check_length_of_identifier
    )
    table_name = data.get("entityTableName", data.get("tableName"))
    if table_name is None:
        table_name = to_table_name(entity_name)
        diagnostics.warn(
            f"entityTableName is missing in {entity_name}.json, using {table_name} as fallback",
            key="entityTableName",
            fallback=table_name,
        )
    table_name = resolve_table_name(
        str(table_name),
        entity_name=entity_name,
        prod_database_type=config.prod_database_type,
        table_prefix=to_table_name(jhi_prefix or ""),
        skip_check_length=skip_check_length,
        diagnostics=diagnostics,
    )

    if (
        not data.get("clientRootFolder")
        and not config.skip_ui_grouping
        and config.application_type == "microservice"
    ):
        data["clientRootFolder"] = data.get("microserviceName") or config.base_name

    data.pop("tableName", None)
    data.update(
        {
            "name": entity_name,
            "entityTableName": table_name,
            "databaseType": database_type,
            "fields": fields,
            "relationships": relationships,
        }
    )
    try:
        document = EntityDocument.model_validate(data)
    except ValidationError as e:
        raise SchemaError(
            f"{entity_name}.json is not a valid entity document: {e}", entity_name
        ) from e
    return document, diagnostics.warnings
