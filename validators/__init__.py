"""
validators/ - Per-entry validation primitives.

Modules:
- safe_path: path construction from untrusted identifiers
- safe_json: bounded reads, JSON parsing with unsafe-key rejection
- address: EIP-55 checksum and directory consistency
- urls: static SSRF screening
- email: contact email checks
- logo: logo discovery and magic-byte verification
- abi: ABI structure checks
- solidity: source content checks
"""

from validators.abi import validate_abi
from validators.address import (
    to_checksum_address,
    validate_address_directory,
    validate_eip55_checksum,
    validate_token_address,
)
from validators.email import validate_email
from validators.logo import (
    LogoFormat,
    find_logo_file,
    get_logo_info,
    validate_logo,
    validate_magic_bytes,
)
from validators.safe_json import safe_read_json, safe_read_text
from validators.safe_path import safe_path_join, validate_contract_name
from validators.solidity import validate_solidity_source
from validators.urls import validate_url, validate_urls

__all__ = [
    # Path / IO
    "safe_path_join",
    "validate_contract_name",
    "safe_read_json",
    "safe_read_text",
    # Addresses
    "to_checksum_address",
    "validate_eip55_checksum",
    "validate_address_directory",
    "validate_token_address",
    # URLs / emails
    "validate_url",
    "validate_urls",
    "validate_email",
    # Logos
    "LogoFormat",
    "find_logo_file",
    "get_logo_info",
    "validate_logo",
    "validate_magic_bytes",
    # Contract content
    "validate_abi",
    "validate_solidity_source",
]
