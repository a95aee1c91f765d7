"""
core - Shared types and utilities for the registry validation gate.

This package contains:
- constants.py: Error codes, severities, limits, field tables
- exceptions.py: Typed exceptions (entry-level and fatal)
- models.py: Findings, check results, registry entries, run summary
- logging.py: Structured JSON / console logging
"""

from core.constants import (
    ErrorCode,
    ExitCode,
    Severity,
    Verdict,
)
from core.exceptions import (
    FatalError,
    JSONLoadError,
    PathTraversalError,
    RateLimitExceededError,
    RegistryError,
    SchemaLoadError,
)
from core.logging import get_logger, log_finding, setup_logging
from core.models import (
    CheckResult,
    ContractDescriptor,
    ContractProject,
    ContractRef,
    Finding,
    LogoInfo,
    RedFlag,
    RunSummary,
    TokenEntry,
)

__all__ = [
    # Constants
    "ErrorCode",
    "ExitCode",
    "Severity",
    "Verdict",
    # Exceptions
    "RegistryError",
    "PathTraversalError",
    "JSONLoadError",
    "FatalError",
    "SchemaLoadError",
    "RateLimitExceededError",
    # Models
    "CheckResult",
    "ContractDescriptor",
    "ContractProject",
    "ContractRef",
    "Finding",
    "LogoInfo",
    "RedFlag",
    "RunSummary",
    "TokenEntry",
    # Logging
    "get_logger",
    "log_finding",
    "setup_logging",
]
