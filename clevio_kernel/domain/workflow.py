"""
Canonical workflow types (``clevio_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for record lifecycles.  Advisory sessions and payroll
runs share the same shape, so Transition and Workflow are defined once and
the booking state machine interprets them.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.

Invariants enforced
-------------------
* Transitions reference only states in ``Workflow.states``.
* ``initial_state`` is a member of ``states``.
* ``terminal_states`` have no outgoing transitions.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Transition:
    """A valid state transition in a workflow."""
    from_state: str
    to_state: str
    action: str


@dataclass(frozen=True)
class Workflow:
    """A state machine definition for a record lifecycle.

    Contract: frozen; ``transitions`` reference only states in ``states``.
    """
    name: str
    description: str
    initial_state: str
    states: tuple[str, ...]
    transitions: tuple[Transition, ...]
    terminal_states: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.initial_state not in self.states:
            raise ValueError(f"{self.name}: initial state '{self.initial_state}' not in states")
        for t in self.transitions:
            if t.from_state not in self.states or t.to_state not in self.states:
                raise ValueError(f"{self.name}: transition {t.action} references unknown state")
            if t.from_state in self.terminal_states:
                raise ValueError(f"{self.name}: terminal state '{t.from_state}' has outgoing transition")

    def find(self, from_state: str, action: str) -> Transition | None:
        for t in self.transitions:
            if t.from_state == from_state and t.action == action:
                return t
        return None

    def actions_from(self, state: str) -> tuple[str, ...]:
        return tuple(t.action for t in self.transitions if t.from_state == state)


ADVISORY_SESSION_WORKFLOW = Workflow(
    name="advisory_session",
    description="Advisory session booking lifecycle",
    initial_state="scheduled",
    states=("scheduled", "completed", "cancelled"),
    transitions=(
        Transition("scheduled", "completed", "complete"),
        Transition("scheduled", "cancelled", "cancel"),
    ),
    terminal_states=("completed", "cancelled"),
)

PAYROLL_RUN_WORKFLOW = Workflow(
    name="payroll_run",
    description="Scheduled payroll run lifecycle",
    initial_state="scheduled",
    states=("scheduled", "completed", "cancelled"),
    transitions=(
        Transition("scheduled", "completed", "complete"),
        Transition("scheduled", "cancelled", "cancel"),
    ),
    terminal_states=("completed", "cancelled"),
)
