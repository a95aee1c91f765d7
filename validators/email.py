"""
validators/email.py - Contact email checks.

Syntactic validation plus a disposable-domain denylist. Free webmail
domains are accepted with a warning.
"""

import re
from typing import Iterable, Optional

from core.constants import DISPOSABLE_EMAIL_DOMAINS, FREE_EMAIL_DOMAINS, ErrorCode
from core.models import CheckResult

MAX_EMAIL_LENGTH = 254

EMAIL_RE = re.compile(
    r"(?P<local>[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*)"
    r"@(?P<domain>(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63})"
)


def _matches_domain(domain: str, denylist: Iterable[str]) -> Optional[str]:
    for blocked in denylist:
        if domain == blocked or domain.endswith("." + blocked):
            return blocked
    return None


def validate_email(
    email: object,
    context: str = "email",
    disposable_domains: Optional[frozenset[str]] = None,
) -> CheckResult:
    """
    Validate an email address.

    Args:
        email: Candidate address
        context: Field label for messages (e.g. "support email")
        disposable_domains: Denylist override (default: built-in list)

    Returns:
        CheckResult with INVALID_EMAIL or DISPOSABLE_DOMAIN on failure
    """
    result = CheckResult()
    denylist = DISPOSABLE_EMAIL_DOMAINS if disposable_domains is None else disposable_domains

    if not isinstance(email, str) or len(email) > MAX_EMAIL_LENGTH:
        return result.error(
            ErrorCode.INVALID_EMAIL,
            f"Invalid {context}: {email!r}",
            subject=context,
        )

    match = EMAIL_RE.fullmatch(email)
    if not match or len(match.group("local")) > 64:
        return result.error(
            ErrorCode.INVALID_EMAIL,
            f"Invalid {context}: {email}",
            subject=context,
        )

    domain = match.group("domain").lower()

    blocked = _matches_domain(domain, denylist)
    if blocked:
        return result.error(
            ErrorCode.DISPOSABLE_DOMAIN,
            f"Disposable email domain not allowed for {context}: {domain}",
            subject=context,
            domain=domain,
        )

    if domain in FREE_EMAIL_DOMAINS:
        result.warn(
            ErrorCode.FREE_EMAIL_DOMAIN,
            f"{context} uses a free email provider ({domain}); a project domain is preferred",
            subject=context,
            domain=domain,
        )

    return result
