"""Tests for entity document validation."""

from datetime import UTC, datetime

import pytest

from entityresolver.core.config import ResolverConfig
from entityresolver.exceptions import (
    DuplicateFieldError,
    IncompatibleConfigurationError,
    InvalidEntityNameError,
    InvalidTableNameError,
    MissingAttributeError,
    SchemaError,
)
from entityresolver.schema.validator import ChangelogClock, validate_entity


class TestChangelogClock:
    """Tests for changelog date generation."""

    def test_format(self, clock):
        assert clock.next_date() == "20240115103000"

    def test_strictly_increasing(self, clock):
        dates = [clock.next_date() for _ in range(3)]
        assert dates == ["20240115103000", "20240115103001", "20240115103002"]

    def test_follows_real_time_when_ahead(self):
        times = iter(
            [
                datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC),
                datetime(2024, 1, 1, 0, 5, 0, tzinfo=UTC),
            ]
        )
        clock = ChangelogClock(now=lambda: next(times))
        assert clock.next_date() == "20240101000000"
        assert clock.next_date() == "20240101000500"


class TestEntityName:
    """Tests for entity name rules."""

    def test_detail_suffix(self):
        """Names ending in Detail are rejected before anything else is looked at."""
        with pytest.raises(SchemaError, match="Detail"):
            validate_entity({"fields": [{"fieldType": "String"}]}, name="OrderDetail")

    @pytest.mark.parametrize("name", ["Order-Line", "Order Line", "Ordér"])
    def test_non_alphanumeric(self, name):
        with pytest.raises(InvalidEntityNameError, match="alphanumeric"):
            validate_entity({}, name=name)

    def test_trailing_newline(self):
        with pytest.raises(InvalidEntityNameError, match="alphanumeric"):
            validate_entity({"name": "Order\n"})

    def test_leading_digit(self):
        with pytest.raises(InvalidEntityNameError, match="number"):
            validate_entity({}, name="1Order")

    def test_empty(self):
        with pytest.raises(InvalidEntityNameError, match="empty"):
            validate_entity({})

    def test_reserved_keyword(self):
        with pytest.raises(InvalidEntityNameError, match="reserved keyword"):
            validate_entity({}, name="Class")

    def test_reserved_keyword_allowed_without_server(self, clock):
        document, _ = validate_entity(
            {}, name="Class", config=ResolverConfig(skip_server=True), clock=clock
        )
        assert document.name == "Class"

    def test_name_from_document(self, clock):
        document, _ = validate_entity({"name": "book"}, clock=clock)
        assert document.name == "Book"


class TestFieldsAndRelationships:
    """Tests for the per-item checks run during validation."""

    def test_duplicate_field(self):
        with pytest.raises(DuplicateFieldError) as exc_info:
            validate_entity(
                {
                    "fields": [
                        {"fieldName": "title", "fieldType": "String"},
                        {"fieldName": "title", "fieldType": "Integer"},
                    ]
                },
                name="Book",
            )
        assert exc_info.value.field_name == "title"

    def test_field_rule_without_companion(self):
        with pytest.raises(SchemaError, match="price"):
            validate_entity(
                {
                    "fields": [
                        {
                            "fieldName": "price",
                            "fieldType": "Integer",
                            "fieldValidateRules": ["max"],
                        }
                    ]
                },
                name="Book",
            )

    def test_missing_other_entity_name(self):
        with pytest.raises(MissingAttributeError, match="otherEntityName"):
            validate_entity(
                {"relationships": [{"relationshipType": "many-to-one"}]}, name="Book"
            )

    def test_relationship_warnings_are_collected(self, clock):
        document, warnings = validate_entity(
            {"relationships": [{"otherEntityName": "author", "relationshipType": "many-to-one"}]},
            name="Book",
            clock=clock,
        )
        keys = [w.key for w in warnings]
        assert "relationshipName" in keys
        assert "otherEntityField" in keys
        assert document.relationships[0].relationship_name == "author"

    def test_fields_must_be_a_list(self):
        with pytest.raises(SchemaError, match="not an array"):
            validate_entity({"fields": "title"}, name="Book")

    def test_invalid_value_type(self):
        with pytest.raises(SchemaError, match="not a valid entity document"):
            validate_entity({"readOnly": "sometimes"}, name="Book")

    def test_field_entry_must_be_an_object(self):
        with pytest.raises(SchemaError, match="not an object") as exc_info:
            validate_entity({"name": "Order", "fields": ["title"]})
        assert exc_info.value.entity_name == "Order"

    def test_relationship_entry_must_be_an_object(self):
        with pytest.raises(SchemaError, match="not an object"):
            validate_entity({"name": "Order", "relationships": [None]})


class TestRootDefaults:
    """Tests for defaults substituted for missing root keys."""

    def test_all_defaults(self, clock):
        document, warnings = validate_entity({}, name="Book", clock=clock)
        assert [w.key for w in warnings] == [
            "changelogDate",
            "dto",
            "service",
            "jpaMetamodelFiltering",
            "pagination",
            "entityTableName",
        ]
        assert document.changelog_date == "20240115103000"
        assert document.dto == "no"
        assert document.service == "no"
        assert document.pagination == "no"
        assert document.jpa_metamodel_filtering is False
        assert document.entity_table_name == "book"

    def test_present_values_are_kept(self, clock, customer_document):
        document, warnings = validate_entity(customer_document, name="Customer", clock=clock)
        assert warnings == []
        assert document.changelog_date == "20240101000000"
        assert document.pagination == "pagination"

    def test_filtering_needs_a_service(self, clock):
        document, _ = validate_entity(
            {"service": "no", "jpaMetamodelFiltering": True}, name="Book", clock=clock
        )
        assert document.jpa_metamodel_filtering is False

    def test_filtering_with_service(self, clock):
        document, _ = validate_entity(
            {"service": "serviceImpl", "jpaMetamodelFiltering": True}, name="Book", clock=clock
        )
        assert document.jpa_metamodel_filtering is True

    def test_filtering_only_for_sql(self, clock):
        document, _ = validate_entity(
            {"databaseType": "mongodb", "service": "serviceImpl", "jpaMetamodelFiltering": True},
            name="Book",
            clock=clock,
        )
        assert document.jpa_metamodel_filtering is False

    def test_microservice_client_root_folder(self, clock):
        config = ResolverConfig(application_type="microservice", base_name="billing")
        document, _ = validate_entity({}, name="Invoice", config=config, clock=clock)
        assert document.client_root_folder == "billing"

    def test_microservice_without_ui_grouping(self, clock):
        config = ResolverConfig(
            application_type="microservice", base_name="billing", skip_ui_grouping=True
        )
        document, _ = validate_entity({}, name="Invoice", config=config, clock=clock)
        assert document.client_root_folder is None

    def test_unknown_keys_are_preserved(self, clock):
        document, _ = validate_entity({"customKey": [1, 2]}, name="Book", clock=clock)
        assert document.to_dict()["customKey"] == [1, 2]

    def test_input_is_not_mutated(self, clock):
        raw = {"fields": [{"fieldName": "title", "fieldType": "String"}]}
        validate_entity(raw, name="Book", clock=clock)
        assert raw == {"fields": [{"fieldName": "title", "fieldType": "String"}]}


class TestTableName:
    """Tests for table name resolution."""

    def test_reserved_name_with_prefix(self, clock):
        """GROUP with the jhi prefix resolves to jhi_group."""
        document, warnings = validate_entity(
            {"entityTableName": "GROUP"}, name="Team", clock=clock
        )
        assert document.entity_table_name == "jhi_group"
        assert "entityTableName" in [w.key for w in warnings]

    def test_reserved_name_without_prefix(self, clock, unprefixed_config):
        """GROUP with no prefix is kept as is and a warning is emitted."""
        document, warnings = validate_entity(
            {"entityTableName": "GROUP"}, name="Team", config=unprefixed_config, clock=clock
        )
        assert document.entity_table_name == "GROUP"
        table_warnings = [w for w in warnings if w.key == "entityTableName"]
        assert len(table_warnings) == 1
        assert "GROUP" in table_warnings[0].message

    def test_document_prefix_overrides_config(self, clock):
        document, _ = validate_entity(
            {"entityTableName": "group", "jhiPrefix": "app"}, name="Team", clock=clock
        )
        assert document.entity_table_name == "app_group"

    def test_default_table_name_is_prefixed_when_reserved(self, clock):
        document, _ = validate_entity({}, name="Order", clock=clock)
        assert document.entity_table_name == "jhi_order"

    def test_table_name_alias(self, clock):
        document, _ = validate_entity({"tableName": "book_table"}, name="Book", clock=clock)
        assert document.entity_table_name == "book_table"
        assert "tableName" not in document.to_dict()

    def test_special_characters(self):
        with pytest.raises(InvalidTableNameError, match="special characters"):
            validate_entity({"entityTableName": "book-table"}, name="Book")

    def test_trailing_newline(self):
        with pytest.raises(InvalidTableNameError, match="special characters"):
            validate_entity({"name": "Order", "entityTableName": "orders\n"})

    def test_empty(self):
        with pytest.raises(InvalidTableNameError, match="empty"):
            validate_entity({"entityTableName": ""}, name="Book")

    def test_too_long_for_oracle(self):
        config = ResolverConfig(prod_database_type="oracle")
        with pytest.raises(InvalidTableNameError, match="too long"):
            validate_entity({"entityTableName": "x" * 27}, name="Book", config=config)

    def test_long_for_oracle_warns(self, clock):
        config = ResolverConfig(prod_database_type="oracle")
        _, warnings = validate_entity(
            {"entityTableName": "x" * 20}, name="Book", config=config, clock=clock
        )
        assert any("long table names" in w.message for w in warnings)

    def test_length_check_can_be_skipped(self, clock):
        config = ResolverConfig(prod_database_type="oracle")
        document, _ = validate_entity(
            {"entityTableName": "x" * 27, "skipCheckLengthOfIdentifier": True},
            name="Book",
            config=config,
            clock=clock,
        )
        assert document.entity_table_name == "x" * 27


class TestApplicationChecks:
    """Tests for application-level incompatibilities."""

    def test_reactive_sql(self):
        with pytest.raises(IncompatibleConfigurationError, match="reactive"):
            validate_entity({}, name="Book", config=ResolverConfig(reactive=True))

    def test_reactive_mongodb(self, clock):
        config = ResolverConfig(reactive=True, database_type="mongodb")
        document, _ = validate_entity({}, name="Book", config=config, clock=clock)
        assert document.database_type == "mongodb"

    def test_entity_suffix_equal_to_dto_suffix(self):
        config = ResolverConfig(entity_suffix="DTO")
        with pytest.raises(IncompatibleConfigurationError, match="suffix"):
            validate_entity({}, name="Book", config=config)
