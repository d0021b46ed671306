"""
Vocabulary — Enumerated types shared across the bus and scope layers.
"""

from horizon.vocabulary.enums import (
    ScopeErrorCode,
    OverflowPolicy,
    EffectPhase,
)

__all__ = [
    "ScopeErrorCode",
    "OverflowPolicy",
    "EffectPhase",
]
