"""
validators/logo.py - Token logo discovery and magic-byte verification.

SIGNATURE TABLE (single source of truth):
    PNG   89 50 4E 47 0D 0A 1A 0A at offset 0
    JPEG  FF D8 FF at offset 0
    WebP  "RIFF" at offset 0 and "WEBP" at offset 8

EXTENSION TABLE:
    .png -> PNG, .jpg/.jpeg -> JPEG, .webp -> WebP

Discovery tries extensions in EXTENSION_PRIORITY order; the first
existing file wins. A symlinked candidate counts as existing so that it
is rejected rather than skipped; its target is never read.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from core.constants import (
    ErrorCode,
    LOGO_HEADER_BYTES,
    LOGO_SIZE_ERROR,
    LOGO_SIZE_WARNING,
)
from core.exceptions import PathTraversalError
from core.models import CheckResult, LogoInfo
from validators.safe_path import safe_path_join


class LogoFormat(str, Enum):
    """Image formats accepted for logos."""
    PNG = "png"
    JPEG = "jpg"
    WEBP = "webp"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    LogoFormat.PNG: "PNG",
    LogoFormat.JPEG: "JPEG",
    LogoFormat.WEBP: "WebP",
}

# format -> ((offset, bytes), ...); every part must match
SIGNATURES: Dict[LogoFormat, Tuple[Tuple[int, bytes], ...]] = {
    LogoFormat.PNG: ((0, b"\x89PNG\r\n\x1a\n"),),
    LogoFormat.JPEG: ((0, b"\xff\xd8\xff"),),
    LogoFormat.WEBP: ((0, b"RIFF"), (8, b"WEBP")),
}

EXTENSION_FORMATS: Dict[str, LogoFormat] = {
    ".png": LogoFormat.PNG,
    ".jpg": LogoFormat.JPEG,
    ".jpeg": LogoFormat.JPEG,
    ".webp": LogoFormat.WEBP,
}

EXTENSION_PRIORITY: Tuple[str, ...] = (".png", ".jpg", ".jpeg", ".webp")


@dataclass
class MagicByteResult:
    """Outcome of comparing a file header with its extension."""
    valid: bool
    detected_format: Optional[LogoFormat] = None
    declared_format: Optional[LogoFormat] = None
    error: Optional[str] = None
    code: Optional[ErrorCode] = None


def detect_format(header: bytes) -> Optional[LogoFormat]:
    """Identify the image format from leading bytes, or None."""
    for fmt, parts in SIGNATURES.items():
        if all(header[offset:offset + len(sig)] == sig for offset, sig in parts):
            return fmt
    return None


def validate_magic_bytes(buffer: bytes, extension: str) -> MagicByteResult:
    """
    Check that buffer's signature agrees with extension.

    Args:
        buffer: At least the first 12 bytes of the file
        extension: File extension including the dot (".png")
    """
    ext = extension.lower()
    declared = EXTENSION_FORMATS.get(ext)
    detected = detect_format(buffer)

    if detected is None:
        return MagicByteResult(
            valid=False,
            declared_format=declared,
            error=f"Unrecognized image format for {ext} file",
            code=ErrorCode.UNRECOGNIZED_FORMAT,
        )

    if detected != declared:
        return MagicByteResult(
            valid=False,
            detected_format=detected,
            declared_format=declared,
            error=f"File is {detected.label} but has {ext} extension",
            code=ErrorCode.FORMAT_MISMATCH,
        )

    return MagicByteResult(valid=True, detected_format=detected, declared_format=declared)


def find_logo_file(token_dir: Union[str, Path], address: str) -> Optional[Tuple[Path, str]]:
    """
    Locate a token's logo.

    Returns:
        (path, extension) of the first existing candidate, or None
    """
    for ext in EXTENSION_PRIORITY:
        try:
            candidate = safe_path_join(token_dir, f"{address}{ext}")
        except PathTraversalError:
            return None
        if candidate.is_symlink() or candidate.is_file():
            return candidate, ext
    return None


def _read_header(path: Path) -> bytes:
    with open(path, "rb") as f:
        return f.read(LOGO_HEADER_BYTES)


def validate_logo(
    token_dir: Union[str, Path],
    address: str,
    symbol: str,
    size_warning: int = LOGO_SIZE_WARNING,
    size_error: int = LOGO_SIZE_ERROR,
) -> CheckResult:
    """
    Validate a token's logo asset.

    Args:
        token_dir: Directory holding the token
        address: Checksummed token address (logo file stem)
        symbol: Token symbol (diagnostics)
        size_warning: Size above which a warning is recorded
        size_error: Size above which the logo is rejected

    Returns:
        CheckResult (MISSING_LOGO, TOO_LARGE, FORMAT_MISMATCH,
        UNRECOGNIZED_FORMAT, READ_ERROR, PATH_TRAVERSAL; LOGO_SIZE warning)
    """
    result = CheckResult()

    found = find_logo_file(token_dir, address)
    if found is None:
        expected = ", ".join(f"{address}{ext}" for ext in EXTENSION_PRIORITY)
        return result.error(
            ErrorCode.MISSING_LOGO,
            f"{symbol}: Missing required logo file. Expected one of: {expected}",
            subject=address,
            expected=[f"{address}{ext}" for ext in EXTENSION_PRIORITY],
        )

    logo_path, extension = found

    if logo_path.is_symlink():
        return result.error(
            ErrorCode.PATH_TRAVERSAL,
            f"{symbol}: Symbolic links are not allowed: {logo_path.name}",
            subject=address,
        )

    try:
        size = logo_path.stat().st_size
    except OSError as e:
        return result.error(
            ErrorCode.READ_ERROR,
            f"{symbol}: Cannot read logo file: {e.strerror or e}",
            subject=address,
        )

    if size > size_error:
        return result.error(
            ErrorCode.TOO_LARGE,
            f"{symbol}: Logo file too large ({size / 1024:.1f}KB). Maximum: {size_error / 1024:.0f}KB",
            subject=address,
            size=size,
            max_size=size_error,
        )

    if size > size_warning:
        result.warn(
            ErrorCode.LOGO_SIZE,
            f"{symbol}: Logo file is large ({size / 1024:.1f}KB). Recommended: <{size_warning / 1024:.0f}KB",
            subject=address,
            size=size,
        )

    try:
        header = _read_header(logo_path)
    except OSError as e:
        return result.error(
            ErrorCode.READ_ERROR,
            f"{symbol}: Cannot read logo file header: {e.strerror or e}",
            subject=address,
        )

    magic = validate_magic_bytes(header, extension)
    if not magic.valid:
        result.error(
            magic.code,
            f"{symbol}: {magic.error}",
            subject=address,
            detected_format=magic.detected_format.value if magic.detected_format else None,
            declared_format=magic.declared_format.value if magic.declared_format else None,
        )

    return result


def get_logo_info(token_dir: Union[str, Path], address: str) -> LogoInfo:
    """Describe a token's logo without recording any finding."""
    found = find_logo_file(token_dir, address)
    if found is None:
        return LogoInfo(exists=False)

    logo_path, _ = found
    if logo_path.is_symlink():
        return LogoInfo(exists=True, path=logo_path)
    try:
        size = logo_path.stat().st_size
        detected = detect_format(_read_header(logo_path))
    except OSError:
        return LogoInfo(exists=False)

    return LogoInfo(
        exists=True,
        path=logo_path,
        size=size,
        format=detected.value if detected else None,
    )
