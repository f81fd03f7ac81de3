"""Non-fatal diagnostics emitted while resolving an entity."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionWarning:
    """A schema problem with a documented fallback."""

    message: str
    """Human-readable description naming the offending key and the fallback."""

    entity_name: str
    """Entity whose document triggered the warning."""

    key: str | None = None
    """Offending key, when the warning is about a single key."""

    fallback: Any = None
    """Value substituted for the missing or unusable one."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "entity_name": self.entity_name,
            "key": self.key,
            "fallback": self.fallback,
        }


@dataclass
class Diagnostics:
    """Ordered collector for warnings produced by one resolution stage."""

    entity_name: str
    warnings: list[ResolutionWarning] = field(default_factory=list)

    def warn(self, message: str, key: str | None = None, fallback: Any = None) -> None:
        warning = ResolutionWarning(
            message=message, entity_name=self.entity_name, key=key, fallback=fallback
        )
        logger.warning(f"[{self.entity_name}] {message}")
        self.warnings.append(warning)

    def extend(self, warnings: list[ResolutionWarning]) -> None:
        self.warnings.extend(warnings)
