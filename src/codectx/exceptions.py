"""Custom exceptions for codectx."""

from pathlib import Path


class CodectxError(Exception):
    """Base exception for all codectx errors."""

    pass


class UnknownResourceError(CodectxError):
    """Raised when a name or pattern matches no registered resource."""

    def __init__(self, message: str, *, name: str = "") -> None:
        super().__init__(message)
        self.name = name


class FileEnumerationError(CodectxError):
    """Raised when a resource fails to enumerate its files."""

    def __init__(
        self,
        message: str,
        *,
        resource_name: str = "",
        path: str = "",
    ) -> None:
        super().__init__(message)
        self.resource_name = resource_name
        self.path = path


class ContentReadError(CodectxError):
    """Raised when file content cannot be read."""

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class ChunkParseError(CodectxError):
    """Raised when a source file cannot be split into symbol chunks."""

    def __init__(
        self,
        message: str,
        *,
        path: str = "",
        language: str = "",
    ) -> None:
        super().__init__(message)
        self.path = path
        self.language = language


class ConfigError(CodectxError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_path: Path | None = None,
        field: str = "",
    ) -> None:
        super().__init__(message)
        self.config_path = config_path
        self.field = field


class StateError(CodectxError):
    """Raised when persisted session state is invalid."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path
