"""
validators/address.py - EIP-55 checksum and address/directory consistency.

EIP-55:
    hash = keccak256(lowercase hex without 0x)
    for each hex letter at position i: uppercase iff hash nibble i >= 8

A token lives in tokens/{address}/{address}.json, so the directory name,
the file stem and the JSON "address" field must all be the same
canonical checksummed string.
"""

import re
from pathlib import Path
from typing import Optional, Union

from eth_utils import keccak

from core.constants import ErrorCode
from core.exceptions import PathTraversalError
from core.models import CheckResult
from validators.safe_path import safe_path_join

ADDRESS_RE = re.compile(r"0x[0-9a-fA-F]{40}")
ZERO_ADDRESS = "0x" + "0" * 40


def is_valid_address(address: object) -> bool:
    """True for a 0x-prefixed 40-hex-digit string (any casing)."""
    return isinstance(address, str) and bool(ADDRESS_RE.fullmatch(address))


def to_checksum_address(address: str) -> str:
    """
    Return the EIP-55 casing of a well-formed address.

    Raises:
        ValueError: address is not 0x + 40 hex digits
    """
    if not is_valid_address(address):
        raise ValueError(f"Not a 20-byte hex address: {address!r}")

    lower = address[2:].lower()
    digest = keccak(text=lower).hex()

    return "0x" + "".join(
        ch.upper() if ch.isalpha() and int(digest[i], 16) >= 8 else ch
        for i, ch in enumerate(lower)
    )


def validate_eip55_checksum(address: object, context: Optional[str] = None) -> CheckResult:
    """
    Validate that address carries the canonical EIP-55 casing.

    Args:
        address: Candidate address
        context: Label used in messages (symbol, contract name, ...)

    Returns:
        CheckResult with BAD_FORMAT, ZERO_ADDRESS or BAD_CHECKSUM on failure
    """
    result = CheckResult()
    label = f"{context}: " if context else ""

    if not is_valid_address(address):
        return result.error(
            ErrorCode.BAD_FORMAT,
            f"{label}Invalid address format: {address!r} (expected 0x + 40 hex characters)",
            subject=str(address),
        )

    if address.lower() == ZERO_ADDRESS:
        return result.error(
            ErrorCode.ZERO_ADDRESS,
            f"{label}Zero address is not allowed",
            subject=address,
        )

    expected = to_checksum_address(address)
    if address != expected:
        return result.error(
            ErrorCode.BAD_CHECKSUM,
            f"{label}Invalid EIP-55 checksum: {address} (expected {expected})",
            subject=address,
            expected=expected,
        )

    return result


def validate_address_directory(dir_name: object, root: Union[str, Path]) -> CheckResult:
    """
    Validate a token directory name.

    The name must itself be a checksummed address and must resolve to a
    direct child of root.
    """
    result = validate_eip55_checksum(dir_name, context="token directory")
    if not result.valid:
        return result

    try:
        safe_path_join(root, dir_name)
    except PathTraversalError as e:
        result.error(ErrorCode.PATH_TRAVERSAL, e.message, subject=str(dir_name), **e.details)

    return result


def validate_token_address(json_address: object, dir_name: str, symbol: str) -> CheckResult:
    """
    Validate a token's declared address against its directory.

    Args:
        json_address: "address" field from the token JSON
        dir_name: Name of the directory holding the token
        symbol: Token symbol (diagnostics only)

    Returns:
        CheckResult; ADDRESS_MISMATCH names both values and the symbol
    """
    result = validate_eip55_checksum(json_address, context=symbol)
    if not result.valid:
        return result

    result.extend(validate_eip55_checksum(dir_name, context=f"{symbol} directory"))
    if not result.valid:
        return result

    if json_address != dir_name:
        result.error(
            ErrorCode.ADDRESS_MISMATCH,
            f"{symbol}: Address mismatch - JSON has {json_address} but directory is {dir_name}",
            subject=dir_name,
            json_address=json_address,
            directory=dir_name,
            symbol=symbol,
        )

    return result
