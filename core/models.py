"""
Core data models for the registry validation gate.

FINDING CONTRACT
================
Every problem the pipeline detects is a Finding:
  - code: ErrorCode member
  - severity: ERROR (entry invalid) or WARNING (advisory)
  - message: human-readable text
  - subject: offending identifier (address, symbol, project slug, file)
  - phase: pipeline phase that recorded it (set by the orchestrator)
  - details: free-form diagnostics

Validators return a CheckResult (ordered errors + warnings). An entry is
valid iff its CheckResult has no errors.

ENTRY MODELS
============
TokenEntry / ContractProject / ContractDescriptor are built from JSON
that already passed the schema, so from_dict() only maps fields and
does not re-validate them.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.constants import ErrorCode, ExitCode, Severity, Verdict


# ============================================================================
# FINDINGS
# ============================================================================

@dataclass
class Finding:
    """A single validation finding."""
    code: ErrorCode
    severity: Severity
    message: str
    subject: Optional[str] = None
    phase: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "severity": self.severity.value,
            "message": self.message,
            "subject": self.subject,
            "phase": self.phase,
            "details": self.details,
        }


@dataclass
class CheckResult:
    """Errors and warnings produced by one validator call."""
    errors: List[Finding] = field(default_factory=list)
    warnings: List[Finding] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> Optional[Finding]:
        return self.errors[0] if self.errors else None

    def error(
        self,
        code: ErrorCode,
        message: str,
        subject: Optional[str] = None,
        **details: Any,
    ) -> "CheckResult":
        self.errors.append(Finding(code, Severity.ERROR, message, subject, details=details))
        return self

    def warn(
        self,
        code: ErrorCode,
        message: str,
        subject: Optional[str] = None,
        **details: Any,
    ) -> "CheckResult":
        self.warnings.append(Finding(code, Severity.WARNING, message, subject, details=details))
        return self

    def extend(self, other: "CheckResult") -> "CheckResult":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    @property
    def findings(self) -> List[Finding]:
        return [*self.errors, *self.warnings]


# ============================================================================
# LOGO
# ============================================================================

@dataclass
class LogoInfo:
    """Read-only description of a token logo asset."""
    exists: bool
    path: Optional[Path] = None
    size: Optional[int] = None
    format: Optional[str] = None  # sniffed from magic bytes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exists": self.exists,
            "path": str(self.path) if self.path else None,
            "size": self.size,
            "format": self.format,
        }


# ============================================================================
# REGISTRY ENTRIES
# ============================================================================

@dataclass
class RedFlag:
    """Community-reported risk signal attached to a token."""
    severity: str
    description: str
    evidence: Optional[str] = None
    reported_date: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RedFlag":
        return cls(
            severity=data["severity"],
            description=data["description"],
            evidence=data.get("evidence"),
            reported_date=data.get("reportedDate"),
        )


@dataclass
class TokenEntry:
    """Token metadata from tokens/{address}/{address}.json."""
    symbol: str
    name: str
    address: str
    decimals: int
    project: Optional[str] = None
    support: Optional[str] = None
    red_flags: List[RedFlag] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenEntry":
        return cls(
            symbol=data["symbol"],
            name=data["name"],
            address=data["address"],
            decimals=data["decimals"],
            project=data.get("project"),
            support=data.get("support"),
            red_flags=[RedFlag.from_dict(rf) for rf in data.get("redFlags", [])],
            raw=data,
        )


@dataclass
class ContractDescriptor:
    """One contract listed in a project's info.json."""
    name: str
    address: str
    type: str
    description: str

    @property
    def source_filename(self) -> str:
        return f"{self.name}.sol"

    @property
    def abi_filename(self) -> str:
        return f"{self.name}_abi.json"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContractDescriptor":
        return cls(
            name=data["name"],
            address=data["address"],
            type=data["type"],
            description=data["description"],
        )


@dataclass
class ContractProject:
    """Project metadata from contracts/{slug}/info.json."""
    slug: str
    name: str
    website: str
    description: str
    contracts: List[ContractDescriptor] = field(default_factory=list)
    contact: Optional[str] = None
    security: Optional[str] = None
    social: Dict[str, str] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, slug: str, data: Dict[str, Any]) -> "ContractProject":
        return cls(
            slug=slug,
            name=data["name"],
            website=data["website"],
            description=data["description"],
            contracts=[ContractDescriptor.from_dict(c) for c in data["contracts"]],
            contact=data.get("contact"),
            security=data.get("security"),
            social=dict(data.get("social", {})),
            raw=data,
        )


@dataclass(frozen=True)
class ContractRef:
    """Where a contract address was declared."""
    project: str
    contract_name: str


# ============================================================================
# RUN SUMMARY
# ============================================================================

@dataclass
class RunSummary:
    """Aggregate outcome of one validation run."""
    tokens_validated: int = 0
    projects_validated: int = 0
    contracts_validated: int = 0
    unique_addresses: int = 0
    findings: List[Finding] = field(default_factory=list)

    @property
    def errors(self) -> List[Finding]:
        return [f for f in self.findings if f.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[Finding]:
        return [f for f in self.findings if f.severity == Severity.WARNING]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def verdict(self) -> Verdict:
        if self.error_count:
            return Verdict.FAILED
        if self.warning_count:
            return Verdict.PASSED_WITH_WARNINGS
        return Verdict.PASSED

    @property
    def exit_code(self) -> ExitCode:
        if self.verdict == Verdict.FAILED:
            return ExitCode.VALIDATION_ERROR
        return ExitCode.SUCCESS

    def counts(self) -> Dict[str, int]:
        return {
            "tokens": self.tokens_validated,
            "projects": self.projects_validated,
            "contracts": self.contracts_validated,
            "unique_addresses": self.unique_addresses,
            "errors": self.error_count,
            "warnings": self.warning_count,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "verdict": self.verdict.value,
            "counts": self.counts(),
            "findings": [f.to_dict() for f in self.findings],
        }
