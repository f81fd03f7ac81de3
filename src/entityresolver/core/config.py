"""Application-level configuration consumed while resolving entities."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ResolverConfig(BaseModel):
    """Settings shared by every entity of one application.

    Entity documents may override ``jhi_prefix`` and
    ``skip_check_length_of_identifier`` individually.
    """

    base_name: str = Field(default="jhipster", description="Application base name")
    jhi_prefix: str | None = Field(default="jhi", description="Prefix for reserved names")
    database_type: str = Field(default="sql", description="Database family")
    prod_database_type: str = Field(
        default="postgresql", description="Production database, selects the keyword list"
    )
    authentication_type: str = "jwt"
    application_type: str = "monolith"
    reactive: bool = False
    skip_server: bool = False
    skip_client: bool = Field(default=False, description="No client code is generated")
    skip_ui_grouping: bool = False
    skip_check_length_of_identifier: bool = False
    entity_suffix: str = ""
    dto_suffix: str = "DTO"
    regenerate: bool = Field(
        default=False, description="Resolve without writing the document back"
    )

    model_config = {"frozen": True}
