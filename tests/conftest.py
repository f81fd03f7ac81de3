"""Shared test fixtures for entityresolver."""

from datetime import UTC, datetime
from typing import Any

import pytest

from entityresolver import ChangelogClock, InMemoryEntityStore, ResolverConfig

FIXED_NOW = datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)


@pytest.fixture
def clock() -> ChangelogClock:
    """Clock frozen at FIXED_NOW; successive dates still increase."""
    return ChangelogClock(now=lambda: FIXED_NOW)


@pytest.fixture
def config() -> ResolverConfig:
    """Default monolith configuration with the ``jhi`` prefix on PostgreSQL."""
    return ResolverConfig()


@pytest.fixture
def unprefixed_config() -> ResolverConfig:
    """Configuration with no reserved-name prefix."""
    return ResolverConfig(jhi_prefix="")


@pytest.fixture
def customer_document() -> dict[str, Any]:
    """Customer with a one-to-many back to Order."""
    return {
        "changelogDate": "20240101000000",
        "entityTableName": "customer",
        "dto": "no",
        "service": "serviceClass",
        "pagination": "pagination",
        "jpaMetamodelFiltering": True,
        "fields": [
            {"fieldName": "name", "fieldType": "String", "fieldValidateRules": ["required"]},
            {"fieldName": "email", "fieldType": "String"},
        ],
        "relationships": [
            {
                "relationshipName": "orders",
                "otherEntityName": "order",
                "relationshipType": "one-to-many",
                "otherEntityRelationshipName": "customer",
            }
        ],
    }


@pytest.fixture
def order_document() -> dict[str, Any]:
    """Order with a mix of field types and relationships."""
    return {
        "changelogDate": "20240102000000",
        "dto": "no",
        "service": "no",
        "pagination": "no",
        "jpaMetamodelFiltering": False,
        "fields": [
            {
                "fieldName": "reference",
                "fieldType": "String",
                "fieldValidateRules": ["required", "maxlength"],
                "fieldValidateRulesMaxlength": 20,
            },
            {"fieldName": "placedAt", "fieldType": "Instant"},
            {"fieldName": "total", "fieldType": "BigDecimal"},
            {"fieldName": "status", "fieldType": "OrderStatus"},
        ],
        "relationships": [
            {
                "relationshipName": "customer",
                "otherEntityName": "customer",
                "relationshipType": "many-to-one",
                "otherEntityField": "name",
            },
            {
                "relationshipName": "product",
                "otherEntityName": "product",
                "relationshipType": "many-to-many",
                "ownerSide": True,
                "otherEntityField": "title",
                "otherEntityRelationshipName": "order",
            },
        ],
    }


@pytest.fixture
def store(
    order_document: dict[str, Any], customer_document: dict[str, Any]
) -> InMemoryEntityStore:
    """In-memory store holding Order and Customer."""
    return InMemoryEntityStore({"Order": order_document, "Customer": customer_document})

