"""
Exports públicos do módulo fsm/rules.

Guards e invariantes para transições de fase.
"""

from fsm.rules.guards import (
    DEFAULT_GUARDS,
    Guard,
    GuardResult,
    evaluate_guards,
    guard_same_phase,
    guard_valid_phase,
)

__all__ = [
    "DEFAULT_GUARDS",
    "Guard",
    "GuardResult",
    "evaluate_guards",
    "guard_same_phase",
    "guard_valid_phase",
]
