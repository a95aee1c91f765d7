"""
Tests for registry/state_machine.py and registry/index.py
"""

import unittest

from core.constants import ErrorCode, Severity
from core.models import ContractRef, Finding, TokenEntry
from registry.index import RegistryIndex, ValidationRun
from registry.state_machine import InvalidTransitionError, RunPhase, RunStateMachine

ADDRESS = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"

ORDER = [
    RunPhase.VALIDATING_TOKENS,
    RunPhase.VALIDATING_CONTRACTS,
    RunPhase.CROSS_REFERENCING,
    RunPhase.SUMMARIZING,
    RunPhase.DONE,
]


class TestRunStateMachine(unittest.TestCase):
    """Phase ordering."""

    def test_starts_in_init(self):
        sm = RunStateMachine()
        self.assertEqual(sm.phase, RunPhase.INIT)
        self.assertFalse(sm.finished)

    def test_linear_order(self):
        sm = RunStateMachine()
        for phase in ORDER:
            sm.transition_to(phase)
        self.assertTrue(sm.finished)
        self.assertEqual(sm.to_dict(), {"phase": "DONE", "fatal_reason": None})

    def test_skipping_rejected(self):
        sm = RunStateMachine()
        with self.assertRaises(InvalidTransitionError):
            sm.transition_to(RunPhase.CROSS_REFERENCING)
        self.assertEqual(sm.phase, RunPhase.INIT)

    def test_going_back_rejected(self):
        sm = RunStateMachine()
        sm.transition_to(RunPhase.VALIDATING_TOKENS)
        sm.transition_to(RunPhase.VALIDATING_CONTRACTS)
        self.assertFalse(sm.can_transition_to(RunPhase.VALIDATING_TOKENS))

    def test_abort_from_any_active_phase(self):
        for steps in range(len(ORDER)):
            with self.subTest(steps=steps):
                sm = RunStateMachine()
                for phase in ORDER[:steps]:
                    sm.transition_to(phase)
                sm.abort("limit exceeded")
                self.assertEqual(sm.phase, RunPhase.FATAL)
                self.assertEqual(sm.fatal_reason, "limit exceeded")
                self.assertTrue(sm.finished)

    def test_terminal_states(self):
        sm = RunStateMachine()
        sm.abort("boom")
        with self.assertRaises(InvalidTransitionError):
            sm.abort("again")
        self.assertEqual(sm.fatal_reason, "boom")


class TestRegistryIndex(unittest.TestCase):
    """Address index bookkeeping."""

    def _token(self, project=None):
        return TokenEntry(symbol="TKN", name="Token", address=ADDRESS, decimals=18, project=project)

    def test_register_token(self):
        index = RegistryIndex()
        index.register_token(self._token())
        self.assertTrue(index.has(ADDRESS))
        self.assertEqual(index.owner_of(ADDRESS), "token TKN")
        self.assertEqual(index.unique_count, 1)

    def test_first_contract_declaration_wins(self):
        index = RegistryIndex()
        index.register_contract(ADDRESS, ContractRef("alpha", "Router"))
        index.register_contract(ADDRESS, ContractRef("beta", "Router"))
        self.assertEqual(index.contracts[ADDRESS].project, "alpha")
        self.assertEqual(index.owner_of(ADDRESS), "contract alpha/Router")
        self.assertEqual(index.unique_count, 1)

    def test_token_and_contract_share_slot(self):
        index = RegistryIndex()
        index.register_token(self._token(project="alpha"))
        index.register_contract(ADDRESS, ContractRef("alpha", "Token"))
        self.assertEqual(index.unique_count, 1)
        self.assertEqual(index.owner_of(ADDRESS), "token TKN")
        self.assertIn(ADDRESS, index.contracts)

    def test_unknown_owner(self):
        self.assertIsNone(RegistryIndex().owner_of(ADDRESS))

    def test_runs_are_independent(self):
        first, second = ValidationRun(), ValidationRun()
        first.index.register_token(self._token())
        first.findings.append(Finding(ErrorCode.BAD_CHECKSUM, Severity.ERROR, "x"))
        first.findings.append(Finding(ErrorCode.LOGO_SIZE, Severity.WARNING, "y"))

        self.assertEqual(second.index.unique_count, 0)
        self.assertEqual(second.findings, [])
        self.assertEqual(first.error_count, 1)
        self.assertEqual(first.warning_count, 1)
        self.assertIsNot(first.state, second.state)


if __name__ == "__main__":
    unittest.main()
