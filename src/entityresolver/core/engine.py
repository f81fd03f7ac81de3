"""Entity resolver service: load, validate, assemble and persist."""

from __future__ import annotations

import logging

from entityresolver.core.config import ResolverConfig
from entityresolver.core.types import EntityDocument
from entityresolver.diagnostics import ResolutionWarning
from entityresolver.naming import upper_first
from entityresolver.schema.assembler import (
    ResolutionResult,
    assemble_descriptor,
    build_storage_data,
)
from entityresolver.schema.validator import ChangelogClock, validate_entity
from entityresolver.storage import EntityStore, InMemoryEntityStore, store_lookup

logger = logging.getLogger(__name__)


class EntityResolver:
    """Resolves entity documents held by a store.

    Sibling documents are read from the same store. The storage form of a
    resolved document is written back unless ``config.regenerate`` is set.

    Example:
        resolver = EntityResolver(JsonDirectoryStore(".jhipster"))
        result = resolver.resolve("Order")
        result.descriptor.entity_api_url  # "orders"
    """

    def __init__(
        self,
        store: EntityStore | None = None,
        config: ResolverConfig | None = None,
        clock: ChangelogClock | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            store: Where entity documents are loaded from and saved to
            config: Application settings
            clock: Source of changelog dates, shared across resolutions
        """
        self.store = store if store is not None else InMemoryEntityStore()
        self.config = config or ResolverConfig()
        self.clock = clock or ChangelogClock()

    def validate(self, name: str) -> tuple[EntityDocument, list[ResolutionWarning]]:
        """Validate the stored document for ``name`` without persisting anything.

        A missing document is validated as a new, empty entity.

        Raises:
            SchemaError: The document cannot be repaired
            StoreError: The stored document is unreadable
        """
        raw = self.store.load(name) or {}
        return validate_entity(raw, config=self.config, name=name, clock=self.clock)

    def resolve(self, name: str) -> ResolutionResult:
        """Resolve ``name`` into its descriptor.

        Raises:
            SchemaError: The document cannot be repaired; nothing is written
            StoreError: The stored document is unreadable
        """
        entity_name = upper_first(name)
        existing = self.store.load(entity_name)
        if existing is None:
            logger.info(f"Creating entity {entity_name}")
        else:
            logger.info(f"Updating entity {entity_name}")

        document, warnings = validate_entity(
            existing or {}, config=self.config, name=entity_name, clock=self.clock
        )
        descriptor, assembly_warnings = assemble_descriptor(
            document, lookup=store_lookup(self.store), config=self.config
        )

        if self.config.regenerate:
            logger.info(f"Regenerating {entity_name}, stored document left untouched")
        else:
            data = build_storage_data(
                document, self.config, existing=existing, descriptor=descriptor
            )
            self.store.save(entity_name, data)
        return ResolutionResult(descriptor=descriptor, warnings=warnings + assembly_warnings)
