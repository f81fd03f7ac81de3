"""Relationship checks, reciprocal inference and naming.

Resolution consults the document of the target entity through a read-only
lookup callable. A target that does not exist yet is not an error: the
reciprocal side is simply left to the locally available data.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from entityresolver.core.types import DatabaseType, DtoMode, RelationshipSpec, RelationshipType
from entityresolver.diagnostics import Diagnostics, ResolutionWarning
from entityresolver.exceptions import (
    InvalidRelationshipTypeError,
    MissingAttributeError,
    SchemaError,
)
from entityresolver.naming import (
    kebab_case,
    lower_first,
    pluralize,
    start_case,
    table_name,
    upper_first,
    upper_first_camel_case,
)
from entityresolver.reserved import is_reserved_table_name

SiblingLookup = Callable[[str], Mapping[str, Any] | None]

USER_ENTITY = "user"

# Local type -> sibling type that may declare the reciprocal side.
RECIPROCAL_TYPES = {
    RelationshipType.MANY_TO_ONE: RelationshipType.ONE_TO_MANY,
    RelationshipType.MANY_TO_MANY: RelationshipType.MANY_TO_MANY,
}


@dataclass(frozen=True)
class OwnerContext:
    """What the resolver needs to know about the entity declaring a relationship."""

    entity_name: str
    dto: str = DtoMode.NO.value
    database_type: str = DatabaseType.SQL.value
    prod_database_type: str | None = None
    authentication_type: str = "jwt"
    table_prefix: str = ""
    angular_x_app_name: str = "JhipsterApp"
    client_root_folder: str | None = None
    entity_parent_path_addition: str = ""
    skip_ui_grouping: bool = False


def no_siblings(name: str) -> Mapping[str, Any] | None:
    return None


def primary_key_type(database_type: str) -> str:
    if database_type in (DatabaseType.MONGODB, DatabaseType.COUCHBASE, DatabaseType.NEO4J):
        return "String"
    if database_type == DatabaseType.CASSANDRA:
        return "UUID"
    return "Long"


def check_relationship(
    raw: Mapping[str, Any], entity_name: str
) -> tuple[dict[str, Any], list[ResolutionWarning]]:
    """Apply the static relationship rules to a raw record.

    Returns a new dict with the documented defaults filled in.

    Raises:
        MissingAttributeError: otherEntityName, relationshipType or a
            required ownerSide is absent.
        InvalidRelationshipTypeError: relationshipType is not one of the four types.
    """
    if not isinstance(raw, Mapping):
        raise SchemaError(
            f"A relationship in {entity_name}.json is not an object: {raw!r}", entity_name
        )
    relationship = dict(raw)
    diagnostics = Diagnostics(entity_name)

    if relationship.get("otherEntityName") is None:
        raise MissingAttributeError("otherEntityName", entity_name, "relationship", relationship)
    relationship_type = relationship.get("relationshipType")
    if relationship_type is None or relationship_type == "":
        raise MissingAttributeError("relationshipType", entity_name, "relationship", relationship)
    if relationship_type not in RelationshipType.values():
        raise InvalidRelationshipTypeError(relationship_type, entity_name)

    owner_side = relationship.get("ownerSide")
    if owner_side is None and relationship_type in (
        RelationshipType.ONE_TO_ONE,
        RelationshipType.MANY_TO_MANY,
    ):
        raise MissingAttributeError("ownerSide", entity_name, "relationship", relationship)

    if relationship.get("relationshipName") is None:
        fallback = relationship["otherEntityName"]
        diagnostics.warn(
            f"relationshipName is missing in {entity_name}.json for relationship to "
            f"{fallback}, using {fallback} as fallback",
            key="relationshipName",
            fallback=fallback,
        )
        relationship["relationshipName"] = fallback

    if relationship.get("otherEntityField") is None and (
        relationship_type == RelationshipType.MANY_TO_ONE
        or (
            relationship_type in (RelationshipType.MANY_TO_MANY, RelationshipType.ONE_TO_ONE)
            and owner_side is True
        )
    ):
        diagnostics.warn(
            f"otherEntityField is missing in {entity_name}.json for relationship "
            f"{relationship['relationshipName']}, using id as fallback",
            key="otherEntityField",
            fallback="id",
        )
        relationship["otherEntityField"] = "id"

    return relationship, diagnostics.warnings


class _Merge:
    """Working copy of a relationship; ``derive`` never overwrites a value."""

    def __init__(self, relationship: RelationshipSpec) -> None:
        self.values = relationship.model_dump()

    def __getitem__(self, key: str) -> Any:
        return self.values.get(key)

    def derive(self, key: str, compute: Callable[[], Any]) -> None:
        if self.values.get(key) is None:
            self.values[key] = compute()

    def build(self) -> RelationshipSpec:
        return RelationshipSpec.model_validate(self.values)


def _infer_reciprocal(
    rel: _Merge,
    sibling: Mapping[str, Any],
    owner: OwnerContext,
    diagnostics: Diagnostics,
) -> None:
    expected = RECIPROCAL_TYPES.get(rel["relationship_type"])
    if expected is None:
        return
    other_entity_name = rel["other_entity_name"]
    for other in sibling.get("relationships") or []:
        if not isinstance(other, Mapping):
            continue
        if upper_first(other.get("otherEntityName") or "") != upper_first(owner.entity_name):
            continue
        if not other.get("otherEntityRelationshipName"):
            diagnostics.warn(
                "Cannot compare relationship reference: otherEntityRelationshipName is "
                f"missing in {upper_first(other_entity_name)}.json for relationship "
                f"{other.get('relationshipName')}",
                key="otherEntityRelationshipName",
            )
            continue
        if other["otherEntityRelationshipName"] != rel["relationship_name"]:
            continue
        if other.get("relationshipType") != expected:
            continue
        name = other.get("relationshipName") or other["otherEntityName"]
        rel.derive("other_entity_relationship_name", lambda: name)
        rel.derive("other_entity_relationship_name_plural", lambda: pluralize(name))
        rel.derive("other_entity_relationship_name_capitalized", lambda: upper_first(name))
        rel.derive(
            "other_entity_relationship_name_capitalized_plural",
            lambda: pluralize(rel["other_entity_relationship_name_capitalized"]),
        )


def _other_entity_table_name(
    other_entity_name: str,
    sibling: Mapping[str, Any] | None,
    owner: OwnerContext,
    diagnostics: Diagnostics,
) -> str:
    prefix = owner.table_prefix
    if other_entity_name == USER_ENTITY:
        return f"{prefix}_user" if prefix else USER_ENTITY
    name = (sibling or {}).get("entityTableName") or table_name(other_entity_name)
    if not is_reserved_table_name(name, owner.prod_database_type):
        return name
    if not prefix:
        diagnostics.warn(
            f"The table name of '{other_entity_name}' contains the '{name.upper()}' reserved "
            "keyword but you have defined an empty jhiPrefix so it won't be prefixed and "
            "thus the generated application might not work",
            key="otherEntityTableName",
            fallback=name,
        )
        return name
    return f"{prefix}_{name.lower()}"


def _derive_module_naming(
    rel: _Merge, sibling: Mapping[str, Any] | None, owner: OwnerContext
) -> None:
    if rel["other_entity_module_name"] is not None:
        return
    if rel["other_entity_name_capitalized"] == "User":
        rel.values["other_entity_module_name"] = f"{owner.angular_x_app_name}SharedModule"
        rel.values["other_entity_module_path"] = "app/core"
        return

    rel.values["other_entity_module_name"] = (
        f"{owner.angular_x_app_name}{rel['other_entity_name_capitalized']}Module"
    )
    rel.values["other_entity_file_name"] = kebab_case(rel["other_entity_angular_name"])
    rel.derive("other_entity_folder_name", lambda: kebab_case(rel["other_entity_angular_name"]))
    folder = rel["other_entity_folder_name"]
    file_name = rel["other_entity_file_name"]
    other_root = (sibling or {}).get("clientRootFolder")

    if owner.skip_ui_grouping or not other_root:
        rel.values["other_entity_client_root_folder"] = ""
    else:
        rel.values["other_entity_client_root_folder"] = f"{other_root}/"

    parent = f"{owner.entity_parent_path_addition}/" if owner.entity_parent_path_addition else ""
    if other_root:
        if owner.client_root_folder == other_root:
            rel.values["other_entity_module_path"] = folder
        else:
            rel.values["other_entity_module_path"] = f"{parent}{other_root}/{folder}"
        rel.values["other_entity_model_name"] = f"{other_root}/{file_name}"
        rel.values["other_entity_path"] = f"{other_root}/{folder}"
    else:
        rel.values["other_entity_module_path"] = f"{parent}{folder}"
        rel.values["other_entity_model_name"] = file_name
        rel.values["other_entity_path"] = folder


def resolve_relationship(
    raw: RelationshipSpec | Mapping[str, Any],
    *,
    owner: OwnerContext,
    lookup: SiblingLookup = no_siblings,
) -> tuple[RelationshipSpec, list[ResolutionWarning]]:
    """Resolve one relationship of ``owner`` against its target's document.

    Args:
        raw: Relationship record, raw mapping or already parsed
        owner: Facts about the declaring entity
        lookup: Returns the target's raw document, or None if it does not exist

    Returns:
        The resolved relationship and the warnings produced on the way
    """
    diagnostics = Diagnostics(owner.entity_name)
    if isinstance(raw, RelationshipSpec):
        relationship = raw
    else:
        checked, warnings = check_relationship(raw, owner.entity_name)
        diagnostics.extend(warnings)
        try:
            relationship = RelationshipSpec.model_validate(checked)
        except ValidationError as e:
            raise SchemaError(
                f"Invalid relationship in {owner.entity_name}.json: {e}", owner.entity_name
            ) from e

    rel = _Merge(relationship)
    other_entity_name = rel["other_entity_name"]

    sibling = lookup(other_entity_name)
    if sibling is not None:
        sibling = dict(sibling)
        if sibling.get("microserviceName") and not sibling.get("clientRootFolder"):
            sibling["clientRootFolder"] = sibling["microserviceName"]
        if sibling.get("embedded"):
            rel.values["other_entity_is_embedded"] = True

    rel.derive(
        "other_entity_primary_key_type",
        lambda: "String"
        if other_entity_name == USER_ENTITY and owner.authentication_type == "oauth2"
        else primary_key_type(owner.database_type),
    )

    if sibling is not None:
        _infer_reciprocal(rel, sibling, owner, diagnostics)

    if rel["other_entity_relationship_name"] is None:
        fallback = lower_first(owner.entity_name)
        rel.values["other_entity_relationship_name"] = fallback
        if other_entity_name != USER_ENTITY:
            diagnostics.warn(
                f"otherEntityRelationshipName is missing in {owner.entity_name}.json for "
                f"relationship {rel['relationship_name']}, using {fallback} as fallback",
                key="otherEntityRelationshipName",
                fallback=fallback,
            )

    reciprocal = rel["other_entity_relationship_name"]
    rel.derive("other_entity_relationship_name_plural", lambda: pluralize(reciprocal))
    rel.derive("other_entity_relationship_name_capitalized", lambda: upper_first(reciprocal))
    rel.derive(
        "other_entity_relationship_name_capitalized_plural",
        lambda: pluralize(upper_first(reciprocal)),
    )

    name = rel["relationship_name"]
    options = rel["options"] or {}
    rel.derive("relationship_name_capitalized", lambda: upper_first(name))
    rel.derive(
        "relationship_name_capitalized_plural",
        lambda: pluralize(upper_first(name)) if len(name) > 1 else upper_first(pluralize(name)),
    )
    rel.derive(
        "relationship_name_humanized",
        lambda: options.get("relationshipNameHumanized") or start_case(name),
    )
    rel.derive("relationship_name_plural", lambda: pluralize(name))
    rel.derive("relationship_field_name", lambda: lower_first(name))
    rel.derive("relationship_field_name_plural", lambda: pluralize(lower_first(name)))

    if (
        owner.dto == DtoMode.MAPSTRUCT
        and sibling is not None
        and sibling.get("dto") != DtoMode.MAPSTRUCT
        and other_entity_name != USER_ENTITY
    ):
        diagnostics.warn(
            "This entity has the DTO option, and it has a relationship with entity "
            f'"{other_entity_name}" that doesn\'t have the DTO option. '
            "This will result in an error.",
            key="dto",
        )

    rel.derive(
        "other_entity_table_name",
        lambda: _other_entity_table_name(other_entity_name, sibling, owner, diagnostics),
    )
    rel.derive("other_entity_name_plural", lambda: pluralize(other_entity_name))
    rel.derive("other_entity_name_capitalized", lambda: upper_first(other_entity_name))
    if rel["other_entity_angular_name"] is None:
        if rel["other_entity_name_capitalized"] == "User":
            rel.values["other_entity_angular_name"] = "User"
        else:
            suffix = (sibling or {}).get("angularJSSuffix") or ""
            rel.values["other_entity_angular_name"] = upper_first(
                other_entity_name
            ) + upper_first_camel_case(suffix)
    rel.derive(
        "other_entity_name_capitalized_plural",
        lambda: pluralize(upper_first(other_entity_name)),
    )
    if rel["other_entity_field"] is not None:
        rel.derive("other_entity_field_capitalized", lambda: upper_first(rel["other_entity_field"]))
    rel.derive("other_entity_state_name", lambda: kebab_case(rel["other_entity_angular_name"]))
    _derive_module_naming(rel, sibling, owner)

    if sibling is not None:
        service = sibling.get("service")
        if owner.database_type == DatabaseType.SQL and service != "no":
            rel.values["jpa_metamodel_filtering"] = bool(sibling.get("jpaMetamodelFiltering"))
        else:
            rel.values["jpa_metamodel_filtering"] = False

    if relationship.is_required and relationship.relationship_required is None:
        if owner.entity_name.lower() == other_entity_name.lower():
            diagnostics.warn(
                "Required relationships to the same entity are not supported.",
                key="relationshipValidateRules",
            )
            rel.values["relationship_required"] = False
        else:
            rel.values["relationship_validate"] = True
            rel.values["relationship_required"] = True

    return rel.build(), diagnostics.warnings
