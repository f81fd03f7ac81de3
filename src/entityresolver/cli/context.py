"""CLI context: config directory resolution and shared state."""

import os
from dataclasses import dataclass, field
from typing import Any

from entityresolver.core.config import ResolverConfig
from entityresolver.core.engine import EntityResolver
from entityresolver.storage import JsonDirectoryStore
from entityresolver.storage.stores import DEFAULT_CONFIG_DIR

CONFIG_DIR_ENVVAR = "ENTITYRESOLVER_CONFIG_DIR"


def get_config_dir(path: str | None) -> str:
    """Resolve the entity document directory.

    Priority:
    1. Explicit path argument
    2. ENTITYRESOLVER_CONFIG_DIR environment variable
    3. Default: .jhipster
    """
    if path:
        return path
    if env_path := os.getenv(CONFIG_DIR_ENVVAR):
        return env_path
    return DEFAULT_CONFIG_DIR


@dataclass
class CLIContext:
    """Shared context for CLI commands."""

    config_dir: str
    json_output: bool
    _store: JsonDirectoryStore | None = field(default=None, init=False, repr=False)

    def get_store(self) -> JsonDirectoryStore:
        if self._store is None:
            self._store = JsonDirectoryStore(self.config_dir)
        return self._store

    def get_resolver(self, **overrides: Any) -> EntityResolver:
        """Build a resolver over the config directory.

        Args:
            overrides: ResolverConfig fields; None values keep the default
        """
        settings = {key: value for key, value in overrides.items() if value is not None}
        return EntityResolver(self.get_store(), ResolverConfig(**settings))
