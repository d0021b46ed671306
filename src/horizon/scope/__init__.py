"""
Scope — Hierarchical name resolution for event horizons.

- Registry / derive / lookup: what is visible from a scope
- ExistenceIndex: what is bound anywhere in the process
- resolve / resolve_safe / resolve_current: classified lookups
- Scope: establishment, teardown and the current-scope accessors
- EffectBinding: cleanup-returning callbacks keyed on dependencies
"""

from horizon.scope.registry import Registry, EMPTY_REGISTRY, derive, lookup
from horizon.scope.existence import (
    ExistenceIndex,
    get_existence_index,
    reset_existence_index,
)
from horizon.scope.resolver import (
    EmitResult,
    ScopeErrorInfo,
    classify_missing,
    resolve,
    resolve_safe,
    resolve_current,
)
from horizon.scope.scope import (
    Scope,
    current_scope,
    current_registry,
    current_horizon,
    use_horizon,
    emit_to_named_safe,
    defines_horizon,
)
from horizon.scope.effects import EffectBinding, diff_snapshot, subscription

__all__ = [
    # Registry
    "Registry",
    "EMPTY_REGISTRY",
    "derive",
    "lookup",
    # Existence
    "ExistenceIndex",
    "get_existence_index",
    "reset_existence_index",
    # Resolver
    "EmitResult",
    "ScopeErrorInfo",
    "classify_missing",
    "resolve",
    "resolve_safe",
    "resolve_current",
    # Scope tree
    "Scope",
    "current_scope",
    "current_registry",
    "current_horizon",
    "use_horizon",
    "emit_to_named_safe",
    "defines_horizon",
    # Effects
    "EffectBinding",
    "diff_snapshot",
    "subscription",
]
