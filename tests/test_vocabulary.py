"""Tests for vocabulary enums."""

from horizon.vocabulary import EffectPhase, OverflowPolicy, ScopeErrorCode


class TestScopeErrorCode:
    def test_lookup_tiers(self):
        assert ScopeErrorCode.NOT_FOUND.value == "NOT_FOUND"
        assert ScopeErrorCode.NOT_IN_SCOPE.value == "NOT_IN_SCOPE"
        assert ScopeErrorCode.NO_ACTIVE_SCOPE.value == "NO_ACTIVE_SCOPE"

    def test_string_comparison(self):
        """Codes compare equal to their wire strings."""
        assert ScopeErrorCode.HANDLER_ERROR == "HANDLER_ERROR"


class TestOverflowPolicy:
    def test_from_string(self):
        assert OverflowPolicy("DROP_OLDEST") is OverflowPolicy.DROP_OLDEST

    def test_all_policies(self):
        assert {p.value for p in OverflowPolicy} == {"ERROR", "DROP_NEWEST", "DROP_OLDEST"}


def test_effect_phases():
    assert [p.value for p in EffectPhase] == ["schedule", "run", "cleanup"]
