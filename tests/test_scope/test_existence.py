"""Tests for the global existence index."""

from horizon.observability import get_metrics
from horizon.scope import ExistenceIndex, get_existence_index, reset_existence_index


class TestExistenceIndex:
    """Tests for reference-counted registration."""

    def test_register_and_unregister(self, index):
        index.register("alpha")
        assert index.exists("alpha")
        index.unregister("alpha")
        assert not index.exists("alpha")
        assert "alpha" not in index.names()

    def test_reference_counted(self, index):
        """A name stays alive until every registration is released."""
        index.register("alpha")
        index.register("alpha")
        assert index.count("alpha") == 2

        index.unregister("alpha")
        assert index.exists("alpha")
        index.unregister("alpha")
        assert not index.exists("alpha")

    def test_absent_and_empty_names_are_noops(self, index):
        index.unregister("ghost")
        index.register(None)
        index.register("")
        index.unregister(None)
        assert index.names() == frozenset()
        assert index.count("ghost") == 0

    def test_over_unregister_does_not_go_negative(self, index):
        index.register("alpha")
        index.unregister("alpha")
        index.unregister("alpha")
        index.register("alpha")
        assert index.count("alpha") == 1

    def test_live_names_gauge(self, index):
        index.register("a")
        index.register("a")
        index.register("b")
        assert get_metrics().live_names.value == 2
        index.unregister("a")
        assert get_metrics().live_names.value == 2
        index.unregister("a")
        assert get_metrics().live_names.value == 1


class TestGlobalIndex:
    """Tests for the process-wide instance."""

    def test_singleton(self):
        assert get_existence_index() is get_existence_index()
        assert isinstance(get_existence_index(), ExistenceIndex)

    def test_reset(self):
        get_existence_index().register("alpha")
        reset_existence_index()
        assert not get_existence_index().exists("alpha")
