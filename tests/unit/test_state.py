"""Tests for CodebaseSession and SessionStore."""

from pathlib import Path

import pytest

from codectx.exceptions import StateError, UnknownResourceError
from codectx.resources.registry import ResourceRegistry
from codectx.state import CodebaseSession, SessionStore


class TestCodebaseSession:
    """Tests for CodebaseSession."""

    def test_create(self) -> None:
        """Test creating an empty session."""
        session = CodebaseSession()

        assert session.enabled_resources == set()

    def test_attach_resolves_defaults(self, registry: ResourceRegistry) -> None:
        """Test that attach seeds the set from wildcard-resolved defaults."""
        session = CodebaseSession.attach(registry, ["src/*", "readme"])

        assert session.enabled_resources == {"src/foo", "src/bar", "src/bar/baz", "readme"}

    def test_attach_unknown_default_raises(self, registry: ResourceRegistry) -> None:
        """Test that an unresolvable default fails the attach."""
        with pytest.raises(UnknownResourceError):
            CodebaseSession.attach(registry, ["lib/*"])

    def test_fork_copies_enabled_set(self, registry: ResourceRegistry) -> None:
        """Test that a forked session does not share the parent's set."""
        parent = CodebaseSession.attach(registry, ["readme"])
        child = parent.fork()

        registry.enable(["other/baz"], child)
        registry.disable(["readme"], parent)

        assert child.enabled_resources == {"readme", "other/baz"}
        assert parent.enabled_resources == set()

    def test_to_dict(self) -> None:
        """Test that serialization produces a sorted list."""
        session = CodebaseSession(enabled_resources={"b", "a"})

        assert session.to_dict() == {"enabled_resources": ["a", "b"]}

    def test_from_dict(self) -> None:
        """Test restoring from a dict."""
        session = CodebaseSession.from_dict({"enabled_resources": ["a", "b"]})

        assert session.enabled_resources == {"a", "b"}

    def test_from_dict_rejects_non_list(self) -> None:
        """Test that malformed data is rejected."""
        with pytest.raises(ValueError):
            CodebaseSession.from_dict({"enabled_resources": "a"})

    def test_show(self) -> None:
        """Test the status summary."""
        assert CodebaseSession().show() == ["Enabled Resources: None"]
        session = CodebaseSession(enabled_resources={"src/b", "src/a"})
        assert session.show() == ["Enabled Resources: src/a, src/b"]


class TestSessionStore:
    """Tests for SessionStore."""

    def test_load_missing_returns_none(self, tmp_path: Path) -> None:
        """Test loading when nothing has been saved."""
        store = SessionStore(tmp_path / "session.json")

        assert store.exists() is False
        assert store.load() is None

    def test_save_and_load(self, tmp_path: Path) -> None:
        """Test persisting and restoring a session."""
        store = SessionStore(tmp_path / "state" / "session.json")
        store.save(CodebaseSession(enabled_resources={"src/foo", "readme"}))

        assert store.exists() is True
        loaded = store.load()
        assert loaded is not None
        assert loaded.enabled_resources == {"src/foo", "readme"}

    def test_load_corrupt_raises(self, tmp_path: Path) -> None:
        """Test that an invalid file raises StateError."""
        path = tmp_path / "session.json"
        path.write_text("{not json")

        with pytest.raises(StateError) as exc_info:
            SessionStore(path).load()
        assert exc_info.value.path == path

    def test_load_non_object_raises(self, tmp_path: Path) -> None:
        """Test that a JSON list is rejected."""
        path = tmp_path / "session.json"
        path.write_text('["src/foo"]')

        with pytest.raises(StateError):
            SessionStore(path).load()

    def test_load_drops_unregistered_names(
        self,
        tmp_path: Path,
        registry: ResourceRegistry,
    ) -> None:
        """Test that names removed from the registry do not survive a restore."""
        store = SessionStore(tmp_path / "session.json")
        store.save(CodebaseSession(enabled_resources={"readme", "gone"}))

        session = store.load(registry)

        assert session is not None
        assert session.enabled_resources == {"readme"}
        registry.enable(["src/foo"], session)
        assert registry.get_enabled(session) == {"readme", "src/foo"}
        registry.disable(["readme"], session)
        assert registry.get_enabled(session) == {"src/foo"}

    def test_load_without_registry_keeps_names(self, tmp_path: Path) -> None:
        """Test that a plain load returns the names as saved."""
        store = SessionStore(tmp_path / "session.json")
        store.save(CodebaseSession(enabled_resources={"gone"}))

        session = store.load()

        assert session is not None
        assert session.enabled_resources == {"gone"}


def test_registry_restore_reports_dropped(registry: ResourceRegistry) -> None:
    """Test that restore returns the stale names it removed."""
    session = CodebaseSession.from_dict({"enabled_resources": ["readme", "gone", "old/x"]})

    assert registry.restore(session) == {"gone", "old/x"}
    assert session.enabled_resources == {"readme"}
