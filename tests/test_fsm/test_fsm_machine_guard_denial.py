"""Cobertura adicional para guard denial na FSMStateMachine."""

from __future__ import annotations

import fsm.manager.machine as machine_module
from fsm.manager.machine import FSMStateMachine
from fsm.rules.guards import GuardResult
from fsm.states import ConnectionPhase


def test_transition_returns_failure_when_guard_blocks_valid_transition(
    monkeypatch,
) -> None:
    def _deny_guard(from_phase: ConnectionPhase, to_phase: ConnectionPhase) -> GuardResult:
        del from_phase, to_phase
        return GuardResult.deny("blocked_by_guard")

    monkeypatch.setattr(machine_module, "evaluate_guards", _deny_guard)

    machine = FSMStateMachine(initial_phase=ConnectionPhase.DISCONNECTED, name="conn-guard")
    result = machine.transition(target=ConnectionPhase.AWAITING_PAIRING, trigger="test")

    assert result.success is False
    assert result.error_reason == "blocked_by_guard"
    assert machine.current_phase == ConnectionPhase.DISCONNECTED
    assert machine.get_history_summary() == []
