"""Core types for entityresolver.

Entity documents are persisted as camelCase JSON; every record here
validates from and dumps to that shape (``to_dict``) while exposing
snake_case attributes in Python. Unknown keys are preserved so a document
survives a load/resolve/save round trip untouched.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FieldType(StrEnum):
    """Primitive field types. Any other fieldType names an enum."""

    STRING = "String"
    INTEGER = "Integer"
    LONG = "Long"
    FLOAT = "Float"
    DOUBLE = "Double"
    BIG_DECIMAL = "BigDecimal"
    LOCAL_DATE = "LocalDate"
    INSTANT = "Instant"
    ZONED_DATE_TIME = "ZonedDateTime"
    DURATION = "Duration"
    UUID = "UUID"
    BOOLEAN = "Boolean"
    BYTE_ARRAY = "byte[]"
    BYTE_BUFFER = "ByteBuffer"

    @classmethod
    def values(cls) -> list[str]:
        """Return all primitive field type values."""
        return [t.value for t in cls]


BINARY_FIELD_TYPES = frozenset({FieldType.BYTE_ARRAY, FieldType.BYTE_BUFFER})

# Migrated to Instant whenever a document is normalized.
LEGACY_TEMPORAL_TYPES = frozenset({"DateTime", "Date"})


class RelationshipType(StrEnum):
    """Relationship types between entities."""

    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_ONE = "many-to-one"
    MANY_TO_MANY = "many-to-many"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid relationship type values."""
        return [t.value for t in cls]


class DtoMode(StrEnum):
    NO = "no"
    MAPSTRUCT = "mapstruct"


class ServiceMode(StrEnum):
    NO = "no"
    SERVICE_CLASS = "serviceClass"
    SERVICE_IMPL = "serviceImpl"


class PaginationMode(StrEnum):
    NO = "no"
    PAGINATION = "pagination"
    INFINITE_SCROLL = "infinite-scroll"


class DatabaseType(StrEnum):
    """Application-level database families."""

    SQL = "sql"
    MONGODB = "mongodb"
    CASSANDRA = "cassandra"
    COUCHBASE = "couchbase"
    NEO4J = "neo4j"
    NO = "no"


REACTIVE_DATABASE_TYPES = frozenset(
    {DatabaseType.MONGODB, DatabaseType.CASSANDRA, DatabaseType.COUCHBASE, DatabaseType.NEO4J}
)

# Supported validation rules mapped to the companion key each one needs.
VALIDATION_RULE_COMPANIONS: dict[str, str | None] = {
    "required": None,
    "unique": None,
    "max": "fieldValidateRulesMax",
    "min": "fieldValidateRulesMin",
    "maxlength": "fieldValidateRulesMaxlength",
    "minlength": "fieldValidateRulesMinlength",
    "maxbytes": "fieldValidateRulesMaxbytes",
    "minbytes": "fieldValidateRulesMinbytes",
    "pattern": "fieldValidateRulesPattern",
}

SUPPORTED_VALIDATION_RULES = list(VALIDATION_RULE_COMPANIONS)


class DocumentRecord(BaseModel):
    """Base for persisted records: camelCase on the wire, immutable in memory."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the record in its persisted camelCase form."""
        return self.model_dump(by_alias=True, exclude_none=True)


class FieldSpec(DocumentRecord):
    """A field of an entity, raw or resolved."""

    field_name: str
    field_type: str
    field_validate_rules: list[str] | None = None
    field_validate_rules_max: Any = None
    field_validate_rules_min: Any = None
    field_validate_rules_maxlength: Any = None
    field_validate_rules_minlength: Any = None
    field_validate_rules_maxbytes: Any = None
    field_validate_rules_minbytes: Any = None
    field_validate_rules_pattern: str | None = None
    field_type_blob_content: str | None = None
    javadoc: str | None = None
    options: dict[str, Any] | None = None

    # Derived
    field_is_enum: bool | None = None
    enum_instance: str | None = None
    field_name_capitalized: str | None = None
    field_name_underscored: str | None = None
    field_name_as_database_column: str | None = None
    field_name_humanized: str | None = None
    field_in_java_bean_method: str | None = None
    field_validate_rules_pattern_java: str | None = None
    field_validate_rules_pattern_angular: str | None = None
    field_validate_rules_pattern_react: str | None = None
    field_validate: bool | None = None

    @property
    def is_binary(self) -> bool:
        return self.field_type in BINARY_FIELD_TYPES


class RelationshipSpec(DocumentRecord):
    """A relationship from one entity to another, raw or resolved."""

    relationship_name: str | None = None
    other_entity_name: str
    relationship_type: str
    owner_side: bool | None = None
    other_entity_field: str | None = None
    other_entity_relationship_name: str | None = None
    relationship_validate_rules: list[str] | str | None = None
    use_jpa_derived_identifier: bool | None = Field(
        default=None, alias="useJPADerivedIdentifier"
    )
    options: dict[str, Any] | None = None

    # Derived: this side
    relationship_name_capitalized: str | None = None
    relationship_name_capitalized_plural: str | None = None
    relationship_name_humanized: str | None = None
    relationship_name_plural: str | None = None
    relationship_field_name: str | None = None
    relationship_field_name_plural: str | None = None
    relationship_validate: bool | None = None
    relationship_required: bool | None = None

    # Derived: reciprocal side
    other_entity_relationship_name_plural: str | None = None
    other_entity_relationship_name_capitalized: str | None = None
    other_entity_relationship_name_capitalized_plural: str | None = None

    # Derived: target entity
    other_entity_name_plural: str | None = None
    other_entity_name_capitalized: str | None = None
    other_entity_name_capitalized_plural: str | None = None
    other_entity_table_name: str | None = None
    other_entity_angular_name: str | None = None
    other_entity_field_capitalized: str | None = None
    other_entity_state_name: str | None = None
    other_entity_module_name: str | None = None
    other_entity_module_path: str | None = None
    other_entity_file_name: str | None = None
    other_entity_folder_name: str | None = None
    other_entity_client_root_folder: str | None = None
    other_entity_model_name: str | None = None
    other_entity_path: str | None = None
    other_entity_primary_key_type: str | None = None
    other_entity_is_embedded: bool | None = None
    jpa_metamodel_filtering: bool | None = None

    @property
    def is_required(self) -> bool:
        rules = self.relationship_validate_rules or []
        return "required" in rules


class EntityDocument(DocumentRecord):
    """A validated entity document with root defaults applied."""

    name: str
    entity_table_name: str
    fields: list[FieldSpec] = Field(default_factory=list)
    relationships: list[RelationshipSpec] = Field(default_factory=list)
    database_type: str = DatabaseType.SQL.value
    changelog_date: str | None = None
    dto: str = DtoMode.NO.value
    service: str = ServiceMode.NO.value
    pagination: str = PaginationMode.NO.value
    jpa_metamodel_filtering: bool = False
    read_only: bool = False
    embedded: bool = False
    jhi_prefix: str | None = None
    skip_check_length_of_identifier: bool | None = None
    client_root_folder: str | None = None
    angular_js_suffix: str | None = Field(default=None, alias="angularJSSuffix")
    microservice_name: str | None = None
    search_engine: str | None = None
    fluent_methods: bool | None = None
    javadoc: str | None = None
    skip_client: bool | None = None
    entity_class_humanized: str | None = None
    entity_class_plural_humanized: str | None = None
    entity_i18n_variant: str | None = Field(default=None, alias="entityI18nVariant")


class EntityDescriptor(EntityDocument):
    """Renderer-ready form of an entity document."""

    # Entity naming
    entity_name_capitalized: str
    entity_class: str
    entity_class_plural: str
    entity_instance: str
    entity_instance_plural: str
    entity_api_url: str
    entity_file_name: str
    entity_folder_name: str
    entity_model_file_name: str
    entity_parent_path_addition: str
    entity_plural_file_name: str
    entity_service_file_name: str
    entity_angular_name: str
    entity_react_name: str
    entity_state_name: str
    entity_url: str
    entity_translation_key: str
    entity_translation_key_menu: str
    i18n_key_prefix: str = Field(alias="i18nKeyPrefix")
    i18n_to_load: list[str] = Field(default_factory=list, alias="i18nToLoad")
    jhi_table_prefix: str = ""
    jhi_prefix_dashed: str = ""

    # Field flags
    fields_contain_date: bool = False
    fields_contain_instant: bool = False
    fields_contain_zoned_date_time: bool = False
    fields_contain_local_date: bool = False
    fields_contain_duration: bool = False
    fields_contain_big_decimal: bool = False
    fields_contain_uuid: bool = Field(default=False, alias="fieldsContainUUID")
    fields_contain_blob: bool = False
    fields_contain_image_blob: bool = False
    fields_contain_text_blob: bool = False
    fields_contain_blob_or_image: bool = False
    fields_is_react_av_field: bool = False
    have_field_with_javadoc: bool = False
    validation: bool = False

    # Relationship flags
    fields_contain_owner_many_to_many: bool = False
    fields_contain_no_owner_one_to_one: bool = False
    fields_contain_owner_one_to_one: bool = False
    fields_contain_one_to_many: bool = False
    fields_contain_many_to_one: bool = False
    fields_contain_embedded: bool = False

    blob_fields: list[FieldSpec] = Field(default_factory=list)
    different_types: list[str] = Field(default_factory=list)
    different_relationships: dict[str, list[RelationshipSpec]] = Field(default_factory=dict)
    primary_key_type: str = "Long"
    has_user_field: bool = False
    save_user_snapshot: bool = False
    reactive_repositories: bool = False
