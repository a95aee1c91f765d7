"""
Validation run state machine.

States:
- INIT: Schemas compiled, nothing read yet
- VALIDATING_TOKENS: Walking tokens/
- VALIDATING_CONTRACTS: Walking contracts/
- CROSS_REFERENCING: Token <-> project consistency
- SUMMARIZING: Building the verdict
- DONE: Run complete
- FATAL: Run aborted (limit exceeded, schema failure)

Phases run strictly in order; FATAL is reachable from any active phase.
"""

from enum import Enum, auto
from typing import Optional


class RunPhase(Enum):
    """Validation run phases."""
    INIT = auto()
    VALIDATING_TOKENS = auto()
    VALIDATING_CONTRACTS = auto()
    CROSS_REFERENCING = auto()
    SUMMARIZING = auto()
    DONE = auto()
    FATAL = auto()


_TRANSITIONS = {
    RunPhase.INIT: [RunPhase.VALIDATING_TOKENS, RunPhase.FATAL],
    RunPhase.VALIDATING_TOKENS: [RunPhase.VALIDATING_CONTRACTS, RunPhase.FATAL],
    RunPhase.VALIDATING_CONTRACTS: [RunPhase.CROSS_REFERENCING, RunPhase.FATAL],
    RunPhase.CROSS_REFERENCING: [RunPhase.SUMMARIZING, RunPhase.FATAL],
    RunPhase.SUMMARIZING: [RunPhase.DONE, RunPhase.FATAL],
    RunPhase.DONE: [],
    RunPhase.FATAL: [],
}


class InvalidTransitionError(RuntimeError):
    """Phase change out of order."""
    pass


class RunStateMachine:
    """Tracks and enforces the phase order of one validation run."""

    def __init__(self):
        self._phase = RunPhase.INIT
        self._fatal_reason: Optional[str] = None

    @property
    def phase(self) -> RunPhase:
        return self._phase

    @property
    def fatal_reason(self) -> Optional[str]:
        return self._fatal_reason

    @property
    def finished(self) -> bool:
        return self._phase in (RunPhase.DONE, RunPhase.FATAL)

    def can_transition_to(self, target: RunPhase) -> bool:
        """Check if transition is allowed."""
        return target in _TRANSITIONS[self._phase]

    def transition_to(self, target: RunPhase) -> None:
        """
        Move to target phase.

        Raises:
            InvalidTransitionError: target does not follow the current phase
        """
        if not self.can_transition_to(target):
            raise InvalidTransitionError(f"Invalid transition: {self._phase.name} -> {target.name}")
        self._phase = target

    def abort(self, reason: str) -> None:
        """Enter FATAL from any unfinished phase."""
        self.transition_to(RunPhase.FATAL)
        self._fatal_reason = reason

    def to_dict(self) -> dict:
        return {
            "phase": self._phase.name,
            "fatal_reason": self._fatal_reason,
        }
