"""Resource registry with per-session enabled-set mutation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from typing import TYPE_CHECKING

import structlog

from codectx.exceptions import UnknownResourceError
from codectx.resources.base import Resource, ResourceKind

if TYPE_CHECKING:
    from codectx.state import CodebaseSession

logger = structlog.get_logger()

WILDCARD_SUFFIX = "/*"


class ResourceRegistry:
    """Registry of named codebase resources.

    Populated once at startup and read-mostly afterwards. Enabled-set
    mutations take the owning session explicitly and are atomic: if any
    requested name fails to resolve, the session is left untouched.

    Example:
        >>> registry = ResourceRegistry()
        >>> registry.register("src/app", resource)
        >>> registry.resolve("src/*")
        ['src/app']
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._resources: dict[str, Resource] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._resources

    def __len__(self) -> int:
        return len(self._resources)

    def register(self, name: str, resource: Resource) -> None:
        """Register a resource under ``name``, replacing any previous entry.

        Args:
            name: Registry key.
            resource: Resource record. Its ``name`` is rewritten to ``name``.
        """
        if resource.name != name:
            resource = replace(resource, name=name)
        if name in self._resources:
            logger.debug("Overwriting resource", name=name)
        self._resources[name] = resource

    def get(self, name: str) -> Resource:
        """Get a resource by exact name.

        Raises:
            UnknownResourceError: If no resource is registered as ``name``.
        """
        if name not in self._resources:
            msg = f"Unknown resource: {name}"
            raise UnknownResourceError(msg, name=name)
        return self._resources[name]

    def resolve(self, pattern: str) -> list[str]:
        """Expand a resource name or ``prefix/*`` pattern.

        Args:
            pattern: Exact name, or a prefix terminated by ``/*``.

        Returns:
            Matching registered names, sorted.

        Raises:
            UnknownResourceError: If nothing matches.
        """
        if pattern.endswith(WILDCARD_SUFFIX):
            prefix = pattern[: -len(WILDCARD_SUFFIX)]
            matches = sorted(
                name
                for name in self._resources
                if name == prefix or name.startswith(prefix + "/")
            )
            if not matches:
                msg = f"No resources match pattern: {pattern}"
                raise UnknownResourceError(msg, name=pattern)
            return matches

        if pattern not in self._resources:
            msg = f"Unknown resource: {pattern}"
            raise UnknownResourceError(msg, name=pattern)
        return [pattern]

    def resolve_all(self, patterns: Iterable[str]) -> list[str]:
        """Resolve several patterns, failing on the first unknown one.

        Returns:
            Resolved names in first-seen order, without duplicates.
        """
        resolved: list[str] = []
        for pattern in patterns:
            resolved.extend(self.resolve(pattern))
        return list(dict.fromkeys(resolved))

    def list_available(self) -> list[str]:
        """Get every registered name, sorted."""
        return sorted(self._resources)

    def enable(self, names: Iterable[str], session: CodebaseSession) -> set[str]:
        """Add resolved names to the session's enabled set.

        Returns:
            The session's enabled set after the change.
        """
        resolved = self.resolve_all(names)
        session.enabled_resources.update(resolved)
        logger.debug("Enabled resources", names=resolved)
        return session.enabled_resources

    def disable(self, names: Iterable[str], session: CodebaseSession) -> set[str]:
        """Remove resolved names from the session's enabled set.

        Returns:
            The session's enabled set after the change.
        """
        resolved = self.resolve_all(names)
        session.enabled_resources.difference_update(resolved)
        logger.debug("Disabled resources", names=resolved)
        return session.enabled_resources

    def set_enabled(self, names: Iterable[str], session: CodebaseSession) -> set[str]:
        """Replace the session's enabled set with exactly the resolved names.

        Returns:
            The session's enabled set after the change.
        """
        resolved = self.resolve_all(names)
        session.enabled_resources.clear()
        session.enabled_resources.update(resolved)
        logger.debug("Set enabled resources", names=resolved)
        return session.enabled_resources

    def restore(self, session: CodebaseSession) -> set[str]:
        """Drop names from a restored session that are no longer registered.

        Returns:
            The names that were dropped.
        """
        stale = {name for name in session.enabled_resources if name not in self._resources}
        for name in sorted(stale):
            logger.warning("Dropping unknown resource from session", name=name)
        session.enabled_resources.difference_update(stale)
        return stale

    def get_enabled(self, session: CodebaseSession) -> set[str]:
        """Get a copy of the session's enabled names."""
        return set(session.enabled_resources)

    def get_enabled_resources(self, session: CodebaseSession) -> list[Resource]:
        """Dereference the session's enabled names, sorted by name.

        Names no longer registered are skipped.
        """
        return [
            self._resources[name]
            for name in sorted(session.enabled_resources)
            if name in self._resources
        ]

    def get_enabled_by_kind(
        self,
        session: CodebaseSession,
        kind: ResourceKind,
    ) -> list[Resource]:
        """Get the session's enabled resources of a single kind."""
        return [r for r in self.get_enabled_resources(session) if r.kind == kind]
