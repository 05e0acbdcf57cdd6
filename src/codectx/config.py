"""Configuration schema for codectx."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from codectx.exceptions import ConfigError
from codectx.resources.base import Resource, ResourceKind
from codectx.resources.file_match import FileMatchItem, FileMatchResource
from codectx.resources.registry import ResourceRegistry

logger = structlog.get_logger()


class ResourceItemConfig(BaseModel):
    """A path matched by a resource.

    Attributes:
        path: File or directory, relative to the config root.
        include: Globs a file must match; empty means every file.
        ignore: Gitignore-style globs to exclude (block string or list).
    """

    path: str
    include: list[str] = Field(default_factory=list)
    ignore: str | list[str] = Field(default_factory=list)


class ResourceConfig(BaseModel):
    """Configuration for one named resource.

    Attributes:
        type: Which assembly phase the resource feeds.
        description: Optional human-readable summary.
        items: Paths the resource matches.
    """

    type: Literal["fileTree", "repoMap", "wholeFile"]
    description: str = ""
    items: list[ResourceItemConfig] = Field(default_factory=list)

    @property
    def kind(self) -> ResourceKind:
        """Get the resource kind tag."""
        return ResourceKind(self.type)


class DefaultsConfig(BaseModel):
    """Defaults applied when a session attaches.

    Attributes:
        resources: Names or ``prefix/*`` patterns enabled for new sessions.
    """

    resources: list[str] = Field(default_factory=list)


class CodebaseConfig(BaseModel):
    """Complete codectx configuration.

    Attributes:
        version: Config schema version.
        root: Directory resource paths are resolved against. Relative roots
            are resolved against the config file's directory by ``load``.
        resources: Resource definitions keyed by name.
        default: Session defaults.

    Example:
        >>> config = CodebaseConfig.from_yaml("resources: {src: {type: fileTree, items: [{path: src}]}}")
        >>> config.resources["src"].kind
        <ResourceKind.FILE_TREE: 'fileTree'>
    """

    version: str = "1.0"
    root: Path = Path(".")
    resources: dict[str, ResourceConfig] = Field(default_factory=dict)
    default: DefaultsConfig = Field(default_factory=DefaultsConfig)

    @field_validator("resources")
    @classmethod
    def validate_resource_names(cls, v: dict[str, ResourceConfig]) -> dict[str, ResourceConfig]:
        """Reject names that would collide with wildcard syntax."""
        for name in v:
            if not name or name.endswith("/*") or name.endswith("/"):
                msg = f"Invalid resource name: {name!r}"
                raise ValueError(msg)
        return v

    def to_yaml(self) -> str:
        """Serialize the config to YAML."""
        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    def save(self, path: Path) -> None:
        """Save the config to a YAML file."""
        path.write_text(self.to_yaml())

    @classmethod
    def from_yaml(cls, yaml_content: str, *, config_path: Path | None = None) -> CodebaseConfig:
        """Parse config from YAML content.

        Raises:
            ConfigError: If the YAML is invalid or fails validation.
        """
        try:
            data: Any = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            msg = f"Invalid YAML: {e}"
            raise ConfigError(msg, config_path=config_path) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            msg = "Config YAML must be a mapping"
            raise ConfigError(msg, config_path=config_path)

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            msg = f"Invalid config: {e}"
            raise ConfigError(msg, config_path=config_path) from e

    @classmethod
    def load(cls, path: Path) -> CodebaseConfig:
        """Load config from a YAML file.

        Raises:
            ConfigError: If the file is missing or invalid.
        """
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise ConfigError(msg, config_path=path)
        config = cls.from_yaml(path.read_text(), config_path=path)
        if not config.root.is_absolute():
            config.root = (path.parent / config.root).resolve()
        return config


def build_registry(config: CodebaseConfig) -> ResourceRegistry:
    """Create a registry with one file-matching resource per config entry."""
    registry = ResourceRegistry()
    for name, resource_config in config.resources.items():
        items = [
            FileMatchItem(path=item.path, include=item.include, ignore=item.ignore)
            for item in resource_config.items
        ]
        registry.register(
            name,
            Resource(
                name=name,
                kind=resource_config.kind,
                enumerator=FileMatchResource(config.root, items),
                description=resource_config.description,
            ),
        )
    logger.debug("Registry built", resources=len(registry))
    return registry
