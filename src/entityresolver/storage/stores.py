"""Entity store implementations and the sibling lookup adapter."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from entityresolver.exceptions import StoreError
from entityresolver.naming import upper_first
from entityresolver.schema.relationships import SiblingLookup

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = ".jhipster"


@runtime_checkable
class EntityStore(Protocol):
    """Keyed persistence of entity documents."""

    def load(self, name: str) -> dict[str, Any] | None:
        """Return the document stored under ``name``, or None if there is none."""
        ...

    def save(self, name: str, document: Mapping[str, Any]) -> None:
        """Store ``document`` under ``name``, replacing any previous one."""
        ...


class InMemoryEntityStore:
    """Dict-backed store. Documents are copied in and out."""

    def __init__(self, documents: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        for name, document in (documents or {}).items():
            self.save(name, document)

    def load(self, name: str) -> dict[str, Any] | None:
        document = self._documents.get(upper_first(name))
        return copy.deepcopy(document) if document is not None else None

    def save(self, name: str, document: Mapping[str, Any]) -> None:
        self._documents[upper_first(name)] = copy.deepcopy(dict(document))

    def names(self) -> list[str]:
        return sorted(self._documents)


class JsonDirectoryStore:
    """Store backed by one ``<Name>.json`` file per entity."""

    def __init__(self, path: str | Path = DEFAULT_CONFIG_DIR) -> None:
        self.path = Path(path)

    def file_for(self, name: str) -> Path:
        return self.path / f"{upper_first(name)}.json"

    def load(self, name: str) -> dict[str, Any] | None:
        """Read the document for ``name``.

        Raises:
            StoreError: The file exists but is not a JSON object
        """
        file = self.file_for(name)
        if not file.exists():
            return None
        try:
            document = json.loads(file.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(upper_first(name), str(e)) from e
        if not isinstance(document, dict):
            raise StoreError(upper_first(name), "the document is not a JSON object")
        return document

    def save(self, name: str, document: Mapping[str, Any]) -> None:
        self.path.mkdir(parents=True, exist_ok=True)
        file = self.file_for(name)
        file.write_text(json.dumps(dict(document), indent=4) + "\n", encoding="utf-8")
        logger.info(f"Wrote {file}")

    def names(self) -> list[str]:
        if not self.path.is_dir():
            return []
        return sorted(f.stem for f in self.path.glob("*.json"))


def store_lookup(store: EntityStore) -> SiblingLookup:
    """Adapt ``store`` to the read-only sibling lookup used during resolution.

    A sibling that cannot be read is treated as absent.
    """

    def lookup(name: str) -> Mapping[str, Any] | None:
        try:
            document = store.load(name)
        except StoreError as e:
            logger.warning(f"Ignoring unreadable sibling '{name}': {e.reason}")
            return None
        if document is None:
            logger.debug(f"No document for sibling '{name}'")
        return document

    return lookup
