"""Codebase resources and their registry."""

from codectx.resources.base import FileEnumerator, Resource, ResourceKind
from codectx.resources.registry import ResourceRegistry

__all__ = ["FileEnumerator", "Resource", "ResourceKind", "ResourceRegistry"]
