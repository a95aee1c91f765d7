"""
validators/safe_json.py - Bounded file reads and JSON parsing.

CONTRACT:
- The size ceiling is checked with stat() before reading, and again on
  the bytes actually read (a file can grow between the two).
- Keys that would redefine a base-object property are rejected:
  __proto__, constructor, prototype, and any dunder key.
- NaN / Infinity literals are not JSON and are rejected.
- Symbolic links are never followed: reading one raises
  PathTraversalError (PATH_TRAVERSAL).
- Every other failure raises JSONLoadError with one of
  PAYLOAD_TOO_LARGE, UNSAFE_KEY, PARSE_ERROR, READ_ERROR.
  No other exception type escapes.
"""

import json
import os
from pathlib import Path
from typing import Any, List, Tuple, Union

from core.constants import ErrorCode, MAX_JSON_BYTES, MAX_SOURCE_BYTES
from core.exceptions import JSONLoadError, PathTraversalError

UNSAFE_KEYS = frozenset({"__proto__", "constructor", "prototype"})


def is_unsafe_key(key: str) -> bool:
    """True if key could shadow base-object behaviour."""
    if key in UNSAFE_KEYS:
        return True
    return len(key) > 4 and key.startswith("__") and key.endswith("__")


def _reject_unsafe_keys(pairs: List[Tuple[str, Any]]) -> dict:
    for key, _ in pairs:
        if is_unsafe_key(key):
            raise JSONLoadError(
                f"Unsafe key in JSON object: {key!r}",
                ErrorCode.UNSAFE_KEY,
                details={"key": key},
            )
    return dict(pairs)


def _reject_constant(name: str) -> Any:
    raise JSONLoadError(
        f"Non-standard JSON constant: {name}",
        ErrorCode.PARSE_ERROR,
        details={"constant": name},
    )


def reject_symlink(path: Path) -> None:
    """Raise PathTraversalError if path is a symbolic link."""
    if path.is_symlink():
        raise PathTraversalError(
            f"Symbolic links are not allowed: {path.name}",
            details={"path": str(path)},
        )


def _open_nofollow(path: str, flags: int) -> int:
    return os.open(path, flags | getattr(os, "O_NOFOLLOW", 0))


def read_bounded(path: Union[str, Path], max_bytes: int) -> bytes:
    """
    Read a whole file, refusing anything over max_bytes.

    Raises:
        PathTraversalError: path is a symbolic link
        JSONLoadError: PAYLOAD_TOO_LARGE or READ_ERROR
    """
    path = Path(path)
    reject_symlink(path)
    try:
        size = path.stat().st_size
    except OSError as e:
        raise JSONLoadError(
            f"Cannot read {path.name}: {e.strerror or e}",
            ErrorCode.READ_ERROR,
            details={"path": str(path)},
        ) from e

    if size > max_bytes:
        raise JSONLoadError(
            f"{path.name} is too large ({size} bytes, max {max_bytes})",
            ErrorCode.PAYLOAD_TOO_LARGE,
            details={"path": str(path), "size": size, "max_bytes": max_bytes},
        )

    try:
        with open(path, "rb", opener=_open_nofollow) as f:
            data = f.read(max_bytes + 1)
    except OSError as e:
        raise JSONLoadError(
            f"Cannot read {path.name}: {e.strerror or e}",
            ErrorCode.READ_ERROR,
            details={"path": str(path)},
        ) from e

    if len(data) > max_bytes:
        raise JSONLoadError(
            f"{path.name} grew past {max_bytes} bytes while reading",
            ErrorCode.PAYLOAD_TOO_LARGE,
            details={"path": str(path), "max_bytes": max_bytes},
        )

    return data


def _decode(path: Path, data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise JSONLoadError(
            f"{path.name} is not valid UTF-8: {e.reason}",
            ErrorCode.PARSE_ERROR,
            details={"path": str(path), "position": e.start},
        ) from e


def parse_json(text: str, source: str = "<string>") -> Any:
    """
    Parse JSON text with unsafe-key and constant rejection.

    Raises:
        JSONLoadError: PARSE_ERROR or UNSAFE_KEY
    """
    try:
        return json.loads(
            text,
            object_pairs_hook=_reject_unsafe_keys,
            parse_constant=_reject_constant,
        )
    except JSONLoadError as e:
        e.details.setdefault("path", source)
        raise
    except RecursionError as e:
        raise JSONLoadError(
            f"{source}: JSON nesting too deep",
            ErrorCode.PARSE_ERROR,
            details={"path": source},
        ) from e
    except json.JSONDecodeError as e:
        raise JSONLoadError(
            f"{source}: invalid JSON at line {e.lineno} column {e.colno}: {e.msg}",
            ErrorCode.PARSE_ERROR,
            details={"path": source, "line": e.lineno, "column": e.colno},
        ) from e


def safe_read_json(path: Union[str, Path], max_bytes: int = MAX_JSON_BYTES) -> Any:
    """
    Read and parse a JSON file safely.

    Args:
        path: File to read
        max_bytes: Size ceiling

    Returns:
        Parsed value (dicts are plain dicts)

    Raises:
        JSONLoadError: see module docstring
    """
    path = Path(path)
    data = read_bounded(path, max_bytes)
    return parse_json(_decode(path, data), source=path.name)


def safe_read_text(path: Union[str, Path], max_bytes: int = MAX_SOURCE_BYTES) -> str:
    """Read a UTF-8 text file under the same size and error rules."""
    path = Path(path)
    return _decode(path, read_bounded(path, max_bytes))
