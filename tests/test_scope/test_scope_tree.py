"""Tests for scope establishment, teardown and the current-scope accessors."""

import pytest

from horizon.bus import create_event_horizon
from horizon.errors import NoActiveScopeError, NotFoundError, NotInScopeError
from horizon.scope import (
    Scope,
    current_horizon,
    current_registry,
    current_scope,
    defines_horizon,
    emit_to_named_safe,
    get_existence_index,
    use_horizon,
)
from horizon.vocabulary import ScopeErrorCode


class TestEstablishment:
    """Tests for open/close pairing with the existence index."""

    def test_open_and_close_pair(self, index):
        scope = Scope("alpha", index=index)
        assert not index.exists("alpha")
        scope.open()
        scope.open()
        assert index.count("alpha") == 1

        scope.close()
        scope.close()
        assert not index.exists("alpha")

    def test_registry_derived_once(self, index):
        scope = Scope("alpha", index=index)
        registry = scope.registry
        scope.open()
        scope.close()
        scope.open()
        assert scope.registry is registry

    def test_two_scopes_same_name(self, index):
        """A name lives until every scope declaring it tears down."""
        first = Scope("alpha", index=index).open()
        second = Scope("alpha", index=index).open()
        first.close()
        assert index.exists("alpha")
        second.close()
        assert not index.exists("alpha")

    def test_context_manager_sets_current(self):
        assert current_scope() is None
        with Scope("app") as app:
            assert current_scope() is app
            assert get_existence_index().exists("app")
            with app.child("panel") as panel:
                assert current_scope() is panel
            assert current_scope() is app
        assert current_scope() is None
        assert not get_existence_index().exists("app")

    def test_cannot_enter_twice(self):
        scope = Scope()
        with scope:
            with pytest.raises(RuntimeError):
                scope.__enter__()

    def test_teardown_on_exception(self):
        with pytest.raises(ValueError):
            with Scope("app"):
                raise ValueError("boom")
        assert not get_existence_index().exists("app")
        assert current_scope() is None

    def test_parent_defaults_to_current(self):
        with Scope("app") as app:
            nested = Scope("panel")
            assert nested.parent is app
            assert "app" in nested.registry

    def test_isolated_ignores_current(self):
        with Scope("app"):
            detached = Scope(isolated=True)
            assert detached.parent is None
            assert "app" not in detached.registry

    def test_given_horizon_is_used(self):
        bus = create_event_horizon()
        scope = Scope("app", horizon=bus)
        assert scope.horizon is bus
        assert scope.horizon_for() is bus
        assert scope.horizon_for("app") is bus


class TestVisibility:
    """Tests for named lookups across the tree."""

    def test_not_in_scope_then_not_found_after_teardown(self, index):
        """Sibling binding is NOT_IN_SCOPE while alive, NOT_FOUND after."""
        root = Scope(index=index).open()
        s1 = root.child("alpha").open()
        s2 = root.child().open()

        with pytest.raises(NotInScopeError):
            s2.horizon_for("alpha")

        s1.close()
        with pytest.raises(NotFoundError):
            s2.horizon_for("alpha")

    def test_separate_trees(self):
        """A name in one root tree is out of scope in an unrelated tree."""
        alpha_root = Scope("alpha", isolated=True).open()
        other_root = Scope(isolated=True).open()
        assert other_root.emit_to_safe("alpha", "ping").error.code == ScopeErrorCode.NOT_IN_SCOPE

        alpha_root.close()
        assert other_root.emit_to_safe("alpha", "ping").error.code == ScopeErrorCode.NOT_FOUND

    def test_shadowing_limited_to_subtree(self, index):
        root = Scope("x", index=index).open()
        deep = root.child().child("x").open()
        beside = root.child().open()

        assert deep.horizon_for("x") is deep.horizon
        assert beside.horizon_for("x") is root.horizon
        assert root.horizon_for("x") is root.horizon

    def test_descendants_see_ancestors(self, index):
        root = Scope("app", index=index).open()
        leaf = root.child().child().child()
        assert leaf.horizon_for("app") is root.horizon

    def test_emit_to_named(self, index, run):
        root = Scope("app", index=index).open()
        leaf = root.child("leaf").open()
        seen = []
        root.on("ready", seen.append)

        leaf.emit_to("app", "ready", {"from": "leaf"})
        run(root.horizon.flush())
        assert seen == [{"from": "leaf"}]

    def test_on_named_and_safe(self, index, run):
        root = Scope("app", index=index).open()
        leaf = root.child().open()
        seen = []

        off = leaf.on_named("app", "t", seen.append)
        quiet_off = leaf.on_named_safe("missing", "t", seen.append)
        quiet_off()

        root.emit("t", 1)
        run(root.horizon.flush())
        off()
        assert seen == [1]
        assert root.horizon.listener_count("t") == 0

        with pytest.raises(NotFoundError):
            leaf.on_named("missing", "t", seen.append)


class TestAccessors:
    """Tests for module-level accessors bound to the current scope."""

    def test_current_horizon_outside_scope(self):
        with pytest.raises(NoActiveScopeError):
            current_horizon()
        with pytest.raises(NoActiveScopeError):
            use_horizon()
        assert current_registry() is None

    def test_current_horizon_inside_scope(self):
        with Scope() as outer:
            assert current_horizon() is outer.horizon
            with Scope("inner") as inner:
                assert current_horizon() is inner.horizon
                assert use_horizon("inner") is inner.horizon
                assert current_registry() is inner.registry

    def test_use_horizon_named_outside_scope(self):
        with pytest.raises(NotFoundError):
            use_horizon("alpha")

    def test_emit_to_named_safe(self, run):
        seen = []
        with Scope("app") as app:
            app.on("ping", seen.append)
            with Scope():
                assert emit_to_named_safe("app", "ping", 1).ok
            run(app.horizon.flush())
        assert seen == [1]

        result = emit_to_named_safe("app", "ping", 2)
        assert result.error.code == ScopeErrorCode.NOT_FOUND


class TestDefinesHorizon:
    """Tests for the defines-a-horizon shorthand."""

    def test_falsy_defines_nothing(self):
        assert defines_horizon(False) is None
        assert defines_horizon(None) is None

    def test_true_is_anonymous_or_uses_name(self):
        assert defines_horizon(True).name is None
        assert defines_horizon(True, name="panel").name == "panel"

    def test_string_names_scope(self):
        scope = defines_horizon("panel", log=True)
        assert scope.name == "panel"
        assert scope.horizon.label == "panel"
