"""
validators/safe_path.py - Path construction from untrusted identifiers.

Addresses and contract names come straight from submitted files and
directory listings. Every filesystem path built from them goes through
safe_path_join(), which guarantees the result is a strict descendant of
the given root. Pure path arithmetic: nothing here touches the disk.
"""

import ntpath
import os
import re
from pathlib import Path
from typing import Union

from core.constants import ErrorCode, MAX_CONTRACT_NAME_LENGTH
from core.exceptions import PathTraversalError
from core.models import CheckResult

CONTRACT_NAME_RE = re.compile(r"[A-Z][A-Za-z0-9]*")

_SEPARATORS = ("/", "\\")


def _check_segment(segment: object) -> str:
    if not isinstance(segment, str):
        raise PathTraversalError(
            f"Path segment must be a string, got {type(segment).__name__}",
            details={"segment": repr(segment)},
        )
    if not segment:
        raise PathTraversalError("Empty path segment")
    if "\x00" in segment:
        raise PathTraversalError(
            "Path segment contains a null byte",
            details={"segment": segment.replace("\x00", "\\0")},
        )
    if any(sep in segment for sep in _SEPARATORS):
        raise PathTraversalError(
            f"Path segment contains a separator: {segment}",
            details={"segment": segment},
        )
    if segment in (".", ".."):
        raise PathTraversalError(
            f"Relative path segment not allowed: {segment}",
            details={"segment": segment},
        )
    # Drive-qualified segments ("C:evil") are absolute on Windows
    if os.path.isabs(segment) or ntpath.splitdrive(segment)[0]:
        raise PathTraversalError(
            f"Absolute path segment not allowed: {segment}",
            details={"segment": segment},
        )
    return segment


def safe_path_join(root: Union[str, Path], *segments: object) -> Path:
    """
    Join untrusted segments onto root.

    Args:
        root: Trusted base directory
        *segments: Untrusted path components (one directory/file name each)

    Returns:
        Absolute path strictly inside root

    Raises:
        PathTraversalError: a segment is malformed or the result escapes root
    """
    if not segments:
        raise PathTraversalError("No path segments given")

    base = os.path.normpath(os.path.abspath(os.fspath(root)))
    parts = [_check_segment(s) for s in segments]
    candidate = os.path.normpath(os.path.join(base, *parts))

    try:
        common = os.path.commonpath([base, candidate])
    except ValueError:
        # Different drives on Windows
        common = ""

    if common != base or candidate == base:
        raise PathTraversalError(
            f"Path escapes root directory: {os.path.join(*parts)}",
            details={"root": base, "path": candidate},
        )

    return Path(candidate)


def validate_contract_name(name: object) -> CheckResult:
    """
    Check that a contract name is safe to use as a filename stem.

    Names must be PascalCase alphanumeric, which also rules out any
    separator or dot sequence.
    """
    result = CheckResult()

    if not isinstance(name, str) or not name:
        return result.error(
            ErrorCode.BAD_FORMAT,
            "Contract name must be a non-empty string",
            subject=repr(name),
        )

    if len(name) > MAX_CONTRACT_NAME_LENGTH:
        return result.error(
            ErrorCode.BAD_FORMAT,
            f"Contract name too long ({len(name)} chars, max {MAX_CONTRACT_NAME_LENGTH})",
            subject=name[:MAX_CONTRACT_NAME_LENGTH],
        )

    if not CONTRACT_NAME_RE.fullmatch(name):
        return result.error(
            ErrorCode.BAD_FORMAT,
            f"Invalid contract name: {name!r} (must be PascalCase alphanumeric)",
            subject=name,
        )

    return result
