"""
validators/solidity.py - Content checks on contract source files.

Hard requirements:
- a `pragma solidity` directive
- a contract/interface/library declaration named like the file

Advisory (warnings only, for human review):
- missing SPDX license identifier
- selfdestruct / suicide, delegatecall, tx.origin
"""

import re
from typing import List, Tuple

from core.constants import ErrorCode
from core.models import CheckResult

SPDX_RE = re.compile(r"SPDX-License-Identifier:\s*\S+")
PRAGMA_RE = re.compile(r"\bpragma\s+solidity\b[^;]*;")
DECLARATION_RE = re.compile(
    r"\b(?:abstract\s+)?(contract|interface|library)\s+([A-Za-z_$][A-Za-z0-9_$]*)"
)

# (regex, label, advice)
SECURITY_PATTERNS: Tuple[Tuple[re.Pattern, str, str], ...] = (
    (re.compile(r"\bselfdestruct\s*\("), "selfdestruct", "contract can be destroyed"),
    (re.compile(r"\bsuicide\s*\("), "suicide", "deprecated selfdestruct alias"),
    (re.compile(r"\.delegatecall\s*[({]"), "delegatecall", "executes external code in this contract's context"),
    (re.compile(r"\btx\.origin\b"), "tx.origin", "unsafe for authorization"),
)

_COMMENT_OR_STRING_RE = re.compile(
    r'//[^\n]*|/\*.*?\*/|"(?:\\.|[^"\\\n])*"|\'(?:\\.|[^\'\\\n])*\'',
    re.DOTALL,
)


def strip_comments(source: str) -> str:
    """
    Blank out comments and string literals, keeping line structure.

    Newlines inside block comments are preserved so line numbers still
    match the original file.
    """
    def _blank(match: re.Match) -> str:
        text = match.group(0)
        if text.startswith(("//", "/*")):
            return re.sub(r"[^\n]", " ", text)
        quote = text[0]
        return quote + " " * (len(text) - 2) + quote

    return _COMMENT_OR_STRING_RE.sub(_blank, source)


def find_declarations(source: str) -> List[Tuple[str, str]]:
    """Return (kind, name) for every declaration in comment-free source."""
    return DECLARATION_RE.findall(source)


def validate_solidity_source(source: str, contract_name: str) -> CheckResult:
    """
    Validate Solidity source text.

    Args:
        source: File contents
        contract_name: Name the file must declare

    Returns:
        CheckResult (INVALID_SOLIDITY, NAME_MISMATCH;
        MISSING_LICENSE and SECURITY_PATTERN warnings)
    """
    result = CheckResult()
    subject = f"{contract_name}.sol"

    if not source.strip():
        return result.error(
            ErrorCode.INVALID_SOLIDITY,
            f"{subject}: Source file is empty",
            subject=subject,
        )

    # SPDX lives in a comment, so check the raw text
    if not SPDX_RE.search(source):
        result.warn(
            ErrorCode.MISSING_LICENSE,
            f"{subject}: Missing SPDX-License-Identifier",
            subject=subject,
        )

    code = strip_comments(source)

    if not PRAGMA_RE.search(code):
        return result.error(
            ErrorCode.INVALID_SOLIDITY,
            f"{subject}: Missing 'pragma solidity' directive",
            subject=subject,
        )

    declarations = find_declarations(code)
    if not declarations:
        return result.error(
            ErrorCode.INVALID_SOLIDITY,
            f"{subject}: No contract, interface or library declaration found",
            subject=subject,
        )

    names = [name for _, name in declarations]
    if contract_name not in names:
        return result.error(
            ErrorCode.NAME_MISMATCH,
            f"{subject}: Expected declaration of {contract_name}, found {', '.join(names)}",
            subject=subject,
            expected=contract_name,
            found=names,
        )

    for line_no, line in enumerate(code.splitlines(), 1):
        for pattern, label, advice in SECURITY_PATTERNS:
            for _ in pattern.finditer(line):
                result.warn(
                    ErrorCode.SECURITY_PATTERN,
                    f"{subject}:{line_no}: uses {label} ({advice})",
                    subject=subject,
                    pattern=label,
                    line=line_no,
                )

    return result
