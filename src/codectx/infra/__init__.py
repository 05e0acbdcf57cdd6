"""Infrastructure adapters."""

from codectx.infra.filesystem import ContentAccessor, LocalFileSystem

__all__ = ["ContentAccessor", "LocalFileSystem"]
