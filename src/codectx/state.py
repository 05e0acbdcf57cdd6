"""Session state: the per-session enabled resource set."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from codectx.exceptions import StateError

if TYPE_CHECKING:
    from codectx.resources.registry import ResourceRegistry

logger = structlog.get_logger()


@dataclass
class CodebaseSession:
    """Owns one enabled set of resource names.

    The set is exclusively owned by the session. Callers mutating it from
    several places must serialize access themselves.

    Attributes:
        enabled_resources: Names of resources contributing to context.
    """

    enabled_resources: set[str] = field(default_factory=set)

    @classmethod
    def attach(
        cls,
        registry: ResourceRegistry,
        defaults: Iterable[str] = (),
    ) -> CodebaseSession:
        """Create a session seeded with wildcard-resolved default names.

        Args:
            registry: Registry used to resolve the defaults.
            defaults: Default names or ``prefix/*`` patterns.

        Returns:
            A new session.

        Raises:
            UnknownResourceError: If a default does not resolve.
        """
        session = cls()
        registry.enable(defaults, session)
        return session

    def fork(self) -> CodebaseSession:
        """Create a child session with a copy of the enabled set."""
        return CodebaseSession(enabled_resources=set(self.enabled_resources))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"enabled_resources": sorted(self.enabled_resources)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CodebaseSession:
        """Create from dictionary."""
        names = data.get("enabled_resources", [])
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            msg = "enabled_resources must be a list of strings"
            raise ValueError(msg)
        return cls(enabled_resources=set(names))

    def show(self) -> list[str]:
        """Render a one-line status summary."""
        names = ", ".join(sorted(self.enabled_resources)) or "None"
        return [f"Enabled Resources: {names}"]


class SessionStore:
    """Persists a session's enabled set as JSON between invocations.

    Example:
        >>> store = SessionStore(Path(".codectx/session.json"))
        >>> session = store.load() or CodebaseSession.attach(registry, defaults)
        >>> store.save(session)
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: JSON file holding the serialized session.
        """
        self.path = path

    def exists(self) -> bool:
        """Check whether a saved session is present."""
        return self.path.exists()

    def load(self, registry: ResourceRegistry | None = None) -> CodebaseSession | None:
        """Load the saved session.

        Args:
            registry: If given, names it no longer registers are dropped.

        Returns:
            The restored session, or None if nothing has been saved.

        Raises:
            StateError: If the file is not a valid session.
        """
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text())
            if not isinstance(data, dict):
                msg = "Session state must be a JSON object"
                raise ValueError(msg)
            session = CodebaseSession.from_dict(data)
        except (json.JSONDecodeError, ValueError) as e:
            msg = f"Invalid session file: {e}"
            raise StateError(msg, path=self.path) from e

        if registry is not None:
            registry.restore(session)
        logger.debug("Loaded session", path=str(self.path), enabled=len(session.enabled_resources))
        return session

    def save(self, session: CodebaseSession) -> None:
        """Write the session to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(session.to_dict(), indent=2))
        logger.debug("Saved session", path=str(self.path))
