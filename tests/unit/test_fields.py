"""Tests for field checks and normalization."""

import pytest

from entityresolver.core.types import FieldSpec
from entityresolver.exceptions import (
    MissingAttributeError,
    SchemaError,
    UnsupportedValidationRuleError,
)
from entityresolver.schema.fields import check_field, java_bean_method_name, normalize_field


class TestCheckField:
    """Tests for the fatal field rules."""

    def test_missing_field_name(self):
        with pytest.raises(MissingAttributeError) as exc_info:
            check_field({"fieldType": "String"}, "Book")
        assert exc_info.value.key == "fieldName"
        assert "Book.json" in str(exc_info.value)

    def test_missing_field_type(self):
        with pytest.raises(MissingAttributeError) as exc_info:
            check_field({"fieldName": "title"}, "Book")
        assert exc_info.value.key == "fieldType"

    def test_max_without_companion(self):
        """A rule needing a companion value fails naming the entity and the field."""
        with pytest.raises(SchemaError) as exc_info:
            check_field(
                {"fieldName": "price", "fieldType": "Integer", "fieldValidateRules": ["max"]},
                "Book",
            )
        message = str(exc_info.value)
        assert "fieldValidateRulesMax" in message
        assert "Book" in message
        assert "price" in message

    def test_max_with_companion(self):
        check_field(
            {
                "fieldName": "price",
                "fieldType": "Integer",
                "fieldValidateRules": ["max"],
                "fieldValidateRulesMax": 100,
            },
            "Book",
        )

    def test_unknown_rule(self):
        with pytest.raises(UnsupportedValidationRuleError) as exc_info:
            check_field(
                {"fieldName": "title", "fieldType": "String", "fieldValidateRules": ["email"]},
                "Book",
            )
        assert exc_info.value.rule == "email"
        assert "supported validation rules" in str(exc_info.value)

    def test_rules_must_be_a_list(self):
        with pytest.raises(SchemaError, match="not an array"):
            check_field(
                {"fieldName": "title", "fieldType": "String", "fieldValidateRules": "required"},
                "Book",
            )

    def test_entry_must_be_an_object(self):
        with pytest.raises(SchemaError, match="not an object"):
            check_field("title", "Book")


class TestNormalizeField:
    """Tests for field derivation."""

    def test_string_field(self):
        field, warnings = normalize_field(
            {"fieldName": "firstName", "fieldType": "String"}, entity_name="Author"
        )
        assert warnings == []
        assert field.field_is_enum is False
        assert field.field_name_capitalized == "FirstName"
        assert field.field_name_underscored == "first_name"
        assert field.field_name_as_database_column == "first_name"
        assert field.field_name_humanized == "First Name"
        assert field.field_in_java_bean_method == "FirstName"
        assert field.field_validate is False

    def test_enum_field(self):
        field, _ = normalize_field(
            {"fieldName": "status", "fieldType": "OrderStatus"}, entity_name="Order"
        )
        assert field.field_is_enum is True
        assert field.enum_instance == "orderStatus"

    @pytest.mark.parametrize("legacy_type", ["DateTime", "Date"])
    def test_legacy_temporal_types_become_instant(self, legacy_type):
        field, _ = normalize_field(
            {"fieldName": "createdAt", "fieldType": legacy_type}, entity_name="Order"
        )
        assert field.field_type == "Instant"
        assert field.field_is_enum is False

    @pytest.mark.parametrize("binary_type", ["byte[]", "ByteBuffer"])
    def test_binary_field_drops_rules(self, binary_type):
        """Binary fields cannot carry validation: rules are cleared with one warning."""
        field, warnings = normalize_field(
            {
                "fieldName": "photo",
                "fieldType": binary_type,
                "fieldTypeBlobContent": "image",
                "fieldValidateRules": ["required"],
            },
            entity_name="Author",
        )
        assert field.field_validate is False
        assert field.field_validate_rules == []
        assert len(warnings) == 1
        assert warnings[0].key == "fieldValidateRules"
        assert "photo" in warnings[0].message

    def test_validated_field(self):
        field, _ = normalize_field(
            {"fieldName": "title", "fieldType": "String", "fieldValidateRules": ["required"]},
            entity_name="Book",
        )
        assert field.field_validate is True

    def test_humanized_name_from_options(self):
        field, _ = normalize_field(
            {
                "fieldName": "isbn",
                "fieldType": "String",
                "options": {"fieldNameHumanized": "ISBN"},
            },
            entity_name="Book",
        )
        assert field.field_name_humanized == "ISBN"

    def test_reserved_column_name_is_prefixed(self):
        field, warnings = normalize_field(
            {"fieldName": "group", "fieldType": "String"},
            entity_name="Team",
            column_prefix="jhi",
            prod_database_type="postgresql",
        )
        assert field.field_name_as_database_column == "jhi_group"
        assert warnings == []

    def test_reserved_column_name_without_prefix_warns(self):
        field, warnings = normalize_field(
            {"fieldName": "group", "fieldType": "String"},
            entity_name="Team",
            column_prefix="",
            prod_database_type="postgresql",
        )
        assert field.field_name_as_database_column == "group"
        assert len(warnings) == 1
        assert warnings[0].key == "fieldName"

    def test_pattern_variants(self):
        field, _ = normalize_field(
            {
                "fieldName": "code",
                "fieldType": "String",
                "fieldValidateRules": ["pattern"],
                "fieldValidateRulesPattern": "^[A-Z]'\\d\"$",
            },
            entity_name="Book",
        )
        assert field.field_validate_rules_pattern_java == "^[A-Z]'\\\\d\\\"$"
        assert field.field_validate_rules_pattern_angular == "^[A-Z]'\\d&#34;$"
        assert field.field_validate_rules_pattern_react == "^[A-Z]\\'\\d\"$"

    def test_existing_values_are_kept(self):
        field, _ = normalize_field(
            {"fieldName": "title", "fieldType": "String", "fieldNameHumanized": "Book title"},
            entity_name="Book",
        )
        assert field.field_name_humanized == "Book title"

    def test_input_is_not_mutated(self):
        raw = {"fieldName": "createdAt", "fieldType": "DateTime"}
        normalize_field(raw, entity_name="Book")
        assert raw == {"fieldName": "createdAt", "fieldType": "DateTime"}

    @pytest.mark.parametrize(
        "raw",
        [
            {"fieldName": "title", "fieldType": "String", "fieldValidateRules": ["required"]},
            {"fieldName": "status", "fieldType": "BookStatus"},
            {"fieldName": "cover", "fieldType": "byte[]", "fieldValidateRules": ["required"]},
            {"fieldName": "publishedAt", "fieldType": "DateTime"},
            {"fieldName": "group", "fieldType": "String"},
        ],
    )
    def test_idempotent(self, raw):
        """Normalizing a normalized field changes nothing."""
        once, _ = normalize_field(
            raw, entity_name="Book", column_prefix="", prod_database_type="postgresql"
        )
        twice, warnings = normalize_field(
            once, entity_name="Book", column_prefix="", prod_database_type="postgresql"
        )
        assert twice == once
        assert warnings == []

    def test_invalid_value_type(self):
        with pytest.raises(SchemaError, match="Invalid field") as exc_info:
            normalize_field({"fieldName": 5, "fieldType": "String"}, entity_name="Order")
        assert exc_info.value.entity_name == "Order"

    def test_accepts_parsed_spec(self):
        spec = FieldSpec(field_name="title", field_type="String")
        field, _ = normalize_field(spec, entity_name="Book")
        assert field.field_name_capitalized == "Title"
        assert spec.field_name_capitalized is None


class TestJavaBeanMethodName:
    """Tests for accessor names."""

    def test_regular_name(self):
        assert java_bean_method_name("email") == "Email"

    def test_second_letter_upper_case(self):
        assert java_bean_method_name("eMail") == "eMail"

    def test_single_letter(self):
        assert java_bean_method_name("x") == "X"
