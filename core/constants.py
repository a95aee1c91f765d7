"""
Constants for the registry validation gate.

Contains enums, limits, and field tables shared by the validators and
the orchestrator.

LIMITS:
- Entry counts (tokens, projects, contracts per project) are hard caps;
  exceeding one aborts the run.
- File sizes bound every read performed by the pipeline.

All limits here are defaults. config/validation.yaml may override them.
"""

from enum import Enum
from typing import Final


# =============================================================================
# ERROR TAXONOMY
# =============================================================================

class ErrorCode(str, Enum):
    """
    Finding and exception codes.

    Every finding recorded by the pipeline carries exactly one of these.
    """
    # Path / file safety
    PATH_TRAVERSAL = "PATH_TRAVERSAL"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    UNSAFE_KEY = "UNSAFE_KEY"
    PARSE_ERROR = "PARSE_ERROR"
    READ_ERROR = "READ_ERROR"

    # Addresses
    BAD_CHECKSUM = "BAD_CHECKSUM"
    BAD_FORMAT = "BAD_FORMAT"
    ZERO_ADDRESS = "ZERO_ADDRESS"
    ADDRESS_MISMATCH = "ADDRESS_MISMATCH"
    DUPLICATE_ADDRESS = "DUPLICATE_ADDRESS"

    # URLs / emails
    INVALID_URL = "INVALID_URL"
    PRIVATE_NETWORK_URL = "PRIVATE_NETWORK_URL"
    INVALID_EMAIL = "INVALID_EMAIL"
    DISPOSABLE_DOMAIN = "DISPOSABLE_DOMAIN"

    # Logos
    MISSING_LOGO = "MISSING_LOGO"
    TOO_LARGE = "TOO_LARGE"
    FORMAT_MISMATCH = "FORMAT_MISMATCH"
    UNRECOGNIZED_FORMAT = "UNRECOGNIZED_FORMAT"

    # Contract content
    INVALID_ABI = "INVALID_ABI"
    INVALID_SOLIDITY = "INVALID_SOLIDITY"
    NAME_MISMATCH = "NAME_MISMATCH"
    DUPLICATE_CONTRACT_NAME = "DUPLICATE_CONTRACT_NAME"

    # Registry-wide
    SCHEMA_VIOLATION = "SCHEMA_VIOLATION"
    SCHEMA_LOAD_ERROR = "SCHEMA_LOAD_ERROR"
    CROSS_REFERENCE_ERROR = "CROSS_REFERENCE_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Advisory (warnings only)
    LOGO_SIZE = "LOGO_SIZE"
    UNUSUAL_DECIMALS = "UNUSUAL_DECIMALS"
    SECURITY_PATTERN = "SECURITY_PATTERN"
    MISSING_LICENSE = "MISSING_LICENSE"
    EMPTY_ABI = "EMPTY_ABI"
    FREE_EMAIL_DOMAIN = "FREE_EMAIL_DOMAIN"

    UNKNOWN = "UNKNOWN"


class Severity(str, Enum):
    """Finding severity."""
    ERROR = "ERROR"
    WARNING = "WARNING"


class Verdict(str, Enum):
    """Overall outcome of a validation run."""
    PASSED = "PASSED"
    PASSED_WITH_WARNINGS = "PASSED_WITH_WARNINGS"
    FAILED = "FAILED"


class ExitCode(int, Enum):
    """Process exit codes for the CLI."""
    SUCCESS = 0
    VALIDATION_ERROR = 1
    FATAL_ERROR = 2


# =============================================================================
# REGISTRY LAYOUT
# =============================================================================

TOKENS_DIR: Final[str] = "tokens"
CONTRACTS_DIR: Final[str] = "contracts"
PROJECT_INFO_FILE: Final[str] = "info.json"
SOLIDITY_SUFFIX: Final[str] = ".sol"
ABI_SUFFIX: Final[str] = "_abi.json"

TOKEN_SCHEMA_FILE: Final[str] = "token.schema.json"
CONTRACT_SCHEMA_FILE: Final[str] = "contract.schema.json"


# =============================================================================
# LIMITS (defaults, see config/validation.yaml)
# =============================================================================

MAX_TOKENS: Final[int] = 10_000
MAX_PROJECTS: Final[int] = 1_000
MAX_CONTRACTS_PER_PROJECT: Final[int] = 100

MAX_JSON_BYTES: Final[int] = 2 * 1024 * 1024  # 2 MiB, large ABIs included
MAX_SOURCE_BYTES: Final[int] = 2 * 1024 * 1024

LOGO_SIZE_WARNING: Final[int] = 100 * 1024  # 100 KiB
LOGO_SIZE_ERROR: Final[int] = 500 * 1024  # 500 KiB
LOGO_HEADER_BYTES: Final[int] = 12

RECOMMENDED_MAX_DECIMALS: Final[int] = 18
MAX_DECIMALS: Final[int] = 77

MAX_CONTRACT_NAME_LENGTH: Final[int] = 100


# =============================================================================
# FIELD TABLES
# =============================================================================

# support is an email field and is checked separately
TOKEN_URL_FIELDS: Final[tuple[str, ...]] = (
    "logoURI",
    "website",
    "github",
    "twitter",
    "telegram",
    "discord",
    "coingecko",
    "coinmarketcap",
)

PROJECT_URL_FIELDS: Final[tuple[str, ...]] = (
    "website",
    "social.github",
    "social.twitter",
    "social.telegram",
    "social.discord",
)

PROJECT_EMAIL_FIELDS: Final[tuple[str, ...]] = ("contact", "security")


# =============================================================================
# EMAIL DOMAINS
# =============================================================================

DISPOSABLE_EMAIL_DOMAINS: Final[frozenset[str]] = frozenset([
    "10minutemail.com",
    "33mail.com",
    "dispostable.com",
    "emailondeck.com",
    "fakeinbox.com",
    "getnada.com",
    "guerrillamail.com",
    "guerrillamail.net",
    "maildrop.cc",
    "mailinator.com",
    "mailnesia.com",
    "mintemail.com",
    "mohmal.com",
    "sharklasers.com",
    "spamgourmet.com",
    "temp-mail.org",
    "tempmail.com",
    "tempmailo.com",
    "throwawaymail.com",
    "trashmail.com",
    "yopmail.com",
])

FREE_EMAIL_DOMAINS: Final[frozenset[str]] = frozenset([
    "aol.com",
    "gmail.com",
    "gmx.com",
    "hotmail.com",
    "icloud.com",
    "mail.com",
    "outlook.com",
    "proton.me",
    "protonmail.com",
    "yahoo.com",
    "yandex.com",
])
