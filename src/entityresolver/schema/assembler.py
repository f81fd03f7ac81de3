"""Turn a validated entity document into the renderer-ready descriptor."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from entityresolver.core.config import ResolverConfig
from entityresolver.core.types import (
    REACTIVE_DATABASE_TYPES,
    DatabaseType,
    EntityDescriptor,
    EntityDocument,
    FieldSpec,
    FieldType,
    RelationshipSpec,
    RelationshipType,
    ServiceMode,
)
from entityresolver.diagnostics import ResolutionWarning
from entityresolver.naming import (
    angular_app_name,
    angular_x_app_name,
    camel_case,
    entity_folder_name,
    entity_parent_path_addition,
    kebab_case,
    lower_first,
    pluralize,
    start_case,
    table_name,
    upper_first,
    upper_first_camel_case,
)
from entityresolver.schema.fields import normalize_field
from entityresolver.schema.relationships import (
    USER_ENTITY,
    OwnerContext,
    SiblingLookup,
    no_siblings,
    primary_key_type,
    resolve_relationship,
)
from entityresolver.schema.validator import ChangelogClock, validate_entity

DATE_FIELD_TYPES = {
    FieldType.ZONED_DATE_TIME: "fields_contain_zoned_date_time",
    FieldType.INSTANT: "fields_contain_instant",
    FieldType.LOCAL_DATE: "fields_contain_local_date",
}

# Field types the React form renders without an availability guard.
REACT_PLAIN_FIELD_TYPES = frozenset(
    {FieldType.INSTANT, FieldType.ZONED_DATE_TIME, FieldType.BOOLEAN}
)

# Databases whose documents persist the pagination choice.
PAGINATED_DATABASE_TYPES = frozenset(
    {DatabaseType.SQL, DatabaseType.MONGODB, DatabaseType.COUCHBASE, DatabaseType.NEO4J}
)


@dataclass
class ResolutionResult:
    """Outcome of a successful resolution pass."""

    descriptor: EntityDescriptor
    warnings: list[ResolutionWarning] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "descriptor": self.descriptor.to_dict(),
            "warnings": [w.to_dict() for w in self.warnings],
        }


def _entity_naming(document: EntityDocument, config: ResolverConfig) -> dict[str, Any]:
    name = document.name
    suffix = document.angular_js_suffix or ""
    if suffix and not suffix.startswith("-"):
        suffix = f"-{suffix}"
    client_root = document.client_root_folder or ""
    entity_class = upper_first(name)
    entity_class_plural = pluralize(entity_class)
    api_url = kebab_case(pluralize(name))
    file_name = kebab_case(entity_class + upper_first(suffix))
    folder_name = entity_folder_name(client_root, file_name)
    angular_name = entity_class + upper_first_camel_case(suffix)
    state_name = kebab_case(angular_name)
    instance = lower_first(name)
    translation_key = camel_case(f"{client_root}-{instance}") if client_root else instance
    menu_key = camel_case(f"{client_root}-{state_name}" if client_root else state_name)

    return {
        "angular_js_suffix": suffix or None,
        "entity_name_capitalized": entity_class,
        "entity_class": entity_class,
        "entity_class_plural": entity_class_plural,
        "entity_class_humanized": document.entity_class_humanized or start_case(entity_class),
        "entity_class_plural_humanized": document.entity_class_plural_humanized
        or start_case(entity_class_plural),
        "entity_i18n_variant": document.entity_i18n_variant or "default",
        "entity_instance": instance,
        "entity_instance_plural": pluralize(instance),
        "entity_api_url": api_url,
        "entity_file_name": file_name,
        "entity_folder_name": folder_name,
        "entity_model_file_name": folder_name,
        "entity_parent_path_addition": entity_parent_path_addition(client_root),
        "entity_plural_file_name": api_url + suffix,
        "entity_service_file_name": file_name,
        "entity_angular_name": angular_name,
        "entity_react_name": angular_name,
        "entity_state_name": state_name,
        "entity_url": state_name,
        "entity_translation_key": translation_key,
        "entity_translation_key_menu": menu_key,
        "i18n_key_prefix": f"{angular_app_name(config.base_name)}.{translation_key}",
        "jhi_table_prefix": table_name(document.jhi_prefix or config.jhi_prefix or ""),
        "jhi_prefix_dashed": kebab_case(document.jhi_prefix or config.jhi_prefix or ""),
    }


def _field_flags(fields: list[FieldSpec], flags: dict[str, Any]) -> None:
    for f in fields:
        field_type = f.field_type
        if field_type not in REACT_PLAIN_FIELD_TYPES:
            flags["fields_is_react_av_field"] = True
        if f.javadoc:
            flags["have_field_with_javadoc"] = True
        if f.field_is_enum and f.enum_instance:
            flags["i18n_to_load"].append(f.enum_instance)

        if field_type in DATE_FIELD_TYPES:
            flags[DATE_FIELD_TYPES[field_type]] = True
            flags["fields_contain_date"] = True
        elif field_type == FieldType.DURATION:
            flags["fields_contain_duration"] = True
        elif field_type == FieldType.BIG_DECIMAL:
            flags["fields_contain_big_decimal"] = True
        elif field_type == FieldType.UUID:
            flags["fields_contain_uuid"] = True
        elif f.is_binary:
            flags["blob_fields"].append(f)
            flags["fields_contain_blob"] = True
            if f.field_type_blob_content == "image":
                flags["fields_contain_image_blob"] = True
            if f.field_type_blob_content != "text":
                flags["fields_contain_blob_or_image"] = True
            else:
                flags["fields_contain_text_blob"] = True

        if f.field_validate:
            flags["validation"] = True


def _relationship_flags(relationships: list[RelationshipSpec], flags: dict[str, Any]) -> None:
    for rel in relationships:
        rel_type = rel.relationship_type
        if rel_type == RelationshipType.MANY_TO_MANY and rel.owner_side:
            flags["fields_contain_owner_many_to_many"] = True
        elif rel_type == RelationshipType.ONE_TO_ONE and not rel.owner_side:
            flags["fields_contain_no_owner_one_to_one"] = True
        elif rel_type == RelationshipType.ONE_TO_ONE and rel.owner_side:
            flags["fields_contain_owner_one_to_one"] = True
        elif rel_type == RelationshipType.ONE_TO_MANY:
            flags["fields_contain_one_to_many"] = True
        elif rel_type == RelationshipType.MANY_TO_ONE:
            flags["fields_contain_many_to_one"] = True
        if rel.other_entity_is_embedded:
            flags["fields_contain_embedded"] = True
        if rel.relationship_required:
            flags["validation"] = True
        if rel.other_entity_name == USER_ENTITY:
            flags["has_user_field"] = True

        entity_type = rel.other_entity_name_capitalized
        if entity_type not in flags["different_types"]:
            flags["different_types"].append(entity_type)
        flags["different_relationships"].setdefault(entity_type, []).append(rel)


def _primary_key_type(
    relationships: list[RelationshipSpec], config: ResolverConfig, database_type: str
) -> str:
    if config.authentication_type == "oauth2" and any(
        rel.use_jpa_derived_identifier and rel.other_entity_name == USER_ENTITY
        for rel in relationships
    ):
        return "String"
    return primary_key_type(database_type)


def assemble_descriptor(
    document: EntityDocument,
    *,
    lookup: SiblingLookup = no_siblings,
    config: ResolverConfig | None = None,
) -> tuple[EntityDescriptor, list[ResolutionWarning]]:
    """Normalize every field and relationship of ``document`` and aggregate the flags.

    Fields and relationships are each visited exactly once.
    """
    config = config or ResolverConfig()
    warnings: list[ResolutionWarning] = []
    naming = _entity_naming(document, config)
    prefix = document.jhi_prefix or config.jhi_prefix or ""

    fields = []
    for raw_field in document.fields:
        normalized, field_warnings = normalize_field(
            raw_field,
            entity_name=document.name,
            column_prefix=table_name(prefix),
            prod_database_type=config.prod_database_type,
        )
        warnings.extend(field_warnings)
        fields.append(normalized)

    owner = OwnerContext(
        entity_name=document.name,
        dto=document.dto,
        database_type=document.database_type,
        prod_database_type=config.prod_database_type,
        authentication_type=config.authentication_type,
        table_prefix=naming["jhi_table_prefix"],
        angular_x_app_name=angular_x_app_name(config.base_name),
        client_root_folder=document.client_root_folder,
        entity_parent_path_addition=naming["entity_parent_path_addition"],
        skip_ui_grouping=config.skip_ui_grouping,
    )
    relationships = []
    for raw_relationship in document.relationships:
        resolved, rel_warnings = resolve_relationship(raw_relationship, owner=owner, lookup=lookup)
        warnings.extend(rel_warnings)
        relationships.append(resolved)

    flags: dict[str, Any] = {
        "i18n_to_load": [naming["entity_instance"]],
        "blob_fields": [],
        "different_types": [naming["entity_class"]],
        "different_relationships": {},
    }
    _field_flags(fields, flags)
    _relationship_flags(relationships, flags)

    has_user_field = flags.get("has_user_field", False)
    values = document.model_dump()
    values.update(naming)
    values.update(flags)
    values.update(
        {
            "fields": fields,
            "relationships": relationships,
            "primary_key_type": _primary_key_type(relationships, config, document.database_type),
            "save_user_snapshot": config.application_type == "microservice"
            and config.authentication_type == "oauth2"
            and has_user_field
            and document.dto == "no",
            "reactive_repositories": config.reactive
            and document.database_type in REACTIVE_DATABASE_TYPES,
            "skip_client": bool(
                document.skip_client
                or config.skip_client
                or config.application_type == "microservice"
            ),
        }
    )
    return EntityDescriptor.model_validate(values), warnings


def resolve_entity(
    raw: Mapping[str, Any],
    *,
    lookup: SiblingLookup = no_siblings,
    config: ResolverConfig | None = None,
    name: str | None = None,
    clock: ChangelogClock | None = None,
) -> ResolutionResult:
    """Validate and assemble one entity document.

    Any ``SchemaError`` propagates; no descriptor is produced in that case.
    """
    config = config or ResolverConfig()
    document, warnings = validate_entity(raw, config=config, name=name, clock=clock)
    descriptor, assembly_warnings = assemble_descriptor(document, lookup=lookup, config=config)
    return ResolutionResult(descriptor=descriptor, warnings=warnings + assembly_warnings)


def build_storage_data(
    document: EntityDocument,
    config: ResolverConfig | None = None,
    existing: Mapping[str, Any] | None = None,
    descriptor: EntityDescriptor | None = None,
) -> dict[str, Any]:
    """Return the persisted form of a validated document.

    Keys of ``existing`` not managed here are carried over. When ``descriptor``
    is given, the reciprocal names it resolved are written into relationships
    that lacked one.
    """
    config = config or ResolverConfig()
    relationships = [r.to_dict() for r in document.relationships]
    if descriptor is not None:
        for stored, resolved in zip(relationships, descriptor.relationships):
            stored.setdefault(
                "otherEntityRelationshipName", resolved.other_entity_relationship_name
            )

    data = dict(existing or {})
    data.pop("name", None)
    data.pop("tableName", None)
    data.update(
        {
            "fluentMethods": document.fluent_methods,
            "clientRootFolder": document.client_root_folder,
            "relationships": relationships,
            "fields": [f.to_dict() for f in document.fields],
            "changelogDate": document.changelog_date,
            "dto": document.dto,
            "searchEngine": document.search_engine,
            "service": document.service,
            "entityTableName": document.entity_table_name,
            "databaseType": document.database_type,
            "readOnly": document.read_only,
            "javadoc": document.javadoc,
        }
    )
    if document.database_type == DatabaseType.SQL and document.service != ServiceMode.NO:
        data["jpaMetamodelFiltering"] = document.jpa_metamodel_filtering
    else:
        data["jpaMetamodelFiltering"] = False
    if document.database_type in PAGINATED_DATABASE_TYPES:
        data["pagination"] = document.pagination
    else:
        data["pagination"] = "no"
    if document.angular_js_suffix:
        data["angularJSSuffix"] = document.angular_js_suffix
    if config.application_type in ("microservice", "uaa"):
        data["microserviceName"] = config.base_name
    return {key: value for key, value in data.items() if value is not None}
