"""
registry/index.py - Per-run registry index and findings accumulator.

One ValidationRun is created per orchestrator run and threaded through
every phase; nothing here is module state, so repeated or concurrent
runs in the same process never see each other's data.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from core.models import ContractRef, Finding, TokenEntry
from registry.state_machine import RunStateMachine


@dataclass
class RegistryIndex:
    """
    Addresses seen during one run.

    all_addresses covers tokens and contracts; tokens and contracts map
    each address back to where it was declared.
    """
    all_addresses: Set[str] = field(default_factory=set)
    tokens: Dict[str, TokenEntry] = field(default_factory=dict)
    contracts: Dict[str, ContractRef] = field(default_factory=dict)

    def has(self, address: str) -> bool:
        return address in self.all_addresses

    def owner_of(self, address: str) -> Optional[str]:
        """Describe which entry already claimed address (diagnostics)."""
        if address in self.tokens:
            return f"token {self.tokens[address].symbol}"
        if address in self.contracts:
            ref = self.contracts[address]
            return f"contract {ref.project}/{ref.contract_name}"
        return None

    def register_token(self, token: TokenEntry) -> None:
        self.all_addresses.add(token.address)
        self.tokens[token.address] = token

    def register_contract(self, address: str, ref: ContractRef) -> None:
        # First declaration wins; a colliding token keeps its entry so the
        # cross-reference phase can compare projects.
        self.all_addresses.add(address)
        self.contracts.setdefault(address, ref)

    @property
    def unique_count(self) -> int:
        return len(self.all_addresses)


@dataclass
class ValidationRun:
    """Mutable state of one run: phase, index, findings and counters."""
    state: RunStateMachine = field(default_factory=RunStateMachine)
    index: RegistryIndex = field(default_factory=RegistryIndex)
    findings: List[Finding] = field(default_factory=list)
    tokens_validated: int = 0
    projects_validated: int = 0
    contracts_validated: int = 0

    @property
    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.is_error)

    @property
    def warning_count(self) -> int:
        return sum(1 for f in self.findings if not f.is_error)
