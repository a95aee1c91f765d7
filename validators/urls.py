"""
validators/urls.py - Static SSRF screening of declared URLs.

Rules per URL:
1. Parsable, scheme exactly https, has a hostname, no user:pass@.
2. Hostname is not localhost / *.localhost.
3. IP literals (IPv4 or IPv6) must not be loopback, private,
   link-local, unspecified or unique-local.
4. Numeric hosts written in non-canonical notation (2130706433,
   0x7f000001, 0177.0.0.1, 127.1) are decoded; they are always rejected,
   as PRIVATE_NETWORK_URL if the decoded target is internal.

LIMITATION: purely string-level. No DNS lookup is performed, so a
public-looking hostname that resolves to a private address at request
time is not caught. URLs are never fetched by this pipeline.
"""

import ipaddress
import re
from typing import Any, Iterable, Mapping, Optional, Union
from urllib.parse import urlsplit

from core.constants import ErrorCode
from core.models import CheckResult, Finding, Severity

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

PRIVATE_IPV4_NETWORKS = tuple(
    ipaddress.ip_network(net)
    for net in (
        "0.0.0.0/8",
        "10.0.0.0/8",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "172.16.0.0/12",
        "192.168.0.0/16",
    )
)

PRIVATE_IPV6_NETWORKS = tuple(
    ipaddress.ip_network(net)
    for net in (
        "::1/128",
        "::/128",
        "fc00::/7",
        "fe80::/10",
    )
)

# Low 32 bits carry an IPv4 address (IPv4-compatible, NAT64 well-known prefix)
IPV4_EMBEDDING_NETWORKS = tuple(
    ipaddress.ip_network(net)
    for net in (
        "::/96",
        "64:ff9b::/96",
    )
)

LOCALHOST_NAMES = frozenset({"localhost", "localhost.localdomain", "ip6-localhost", "ip6-loopback"})

_NUMERIC_PART_RE = re.compile(r"(0x[0-9a-f]*|[0-9]+)", re.IGNORECASE)
_CANONICAL_OCTET_RE = re.compile(r"(0|[1-9][0-9]{0,2})")


def is_private_ip(ip: IPAddress) -> bool:
    """True if ip belongs to a loopback, private or link-local range."""
    if isinstance(ip, ipaddress.IPv6Address):
        if ip.ipv4_mapped is not None:
            return is_private_ip(ip.ipv4_mapped)
        if any(ip in net for net in PRIVATE_IPV6_NETWORKS):
            return True
        if any(ip in net for net in IPV4_EMBEDDING_NETWORKS):
            return is_private_ip(ipaddress.IPv4Address(int(ip) & 0xFFFFFFFF))
        return False
    return any(ip in net for net in PRIVATE_IPV4_NETWORKS)


def _parse_numeric_part(part: str) -> int:
    lowered = part.lower()
    if lowered.startswith("0x"):
        return int(lowered[2:] or "0", 16)
    if len(part) > 1 and part.startswith("0"):
        return int(part, 8)
    return int(part, 10)


def decode_numeric_host(hostname: str) -> Optional[ipaddress.IPv4Address]:
    """
    Decode an inet_aton-style numeric host.

    Accepts 1-4 dot-separated parts, each decimal, octal (leading 0) or
    hex (0x). Returns None if hostname is not numeric in this sense or
    the value does not fit in 32 bits.
    """
    parts = hostname.rstrip(".").split(".")
    if not 1 <= len(parts) <= 4 or not all(_NUMERIC_PART_RE.fullmatch(p) for p in parts):
        return None

    try:
        values = [_parse_numeric_part(p) for p in parts]
    except ValueError:
        # e.g. "08" is not valid octal
        return None

    # Last part fills all remaining bytes
    *head, last = values
    if any(v > 0xFF for v in head) or last >= 1 << (8 * (4 - len(head))):
        return None

    number = 0
    for v in head:
        number = (number << 8) | v
    number = (number << (8 * (4 - len(head)))) | last
    return ipaddress.IPv4Address(number)


def _is_canonical_ipv4(hostname: str) -> bool:
    parts = hostname.split(".")
    return len(parts) == 4 and all(
        _CANONICAL_OCTET_RE.fullmatch(p) and int(p) <= 255 for p in parts
    )


def _check_hostname(hostname: str, field: str, url: str) -> Optional[Finding]:
    host = hostname.lower().rstrip(".")

    if host in LOCALHOST_NAMES or host.endswith(".localhost"):
        return Finding(
            ErrorCode.PRIVATE_NETWORK_URL,
            Severity.ERROR,
            f"{field}: URL points to localhost: {url}",
            subject=field,
            details={"url": url, "host": host},
        )

    # IPv6 literal ([...] already stripped by urlsplit)
    if ":" in host:
        try:
            ip = ipaddress.IPv6Address(host.split("%", 1)[0])
        except ValueError:
            return Finding(
                ErrorCode.INVALID_URL,
                Severity.ERROR,
                f"{field}: Invalid IPv6 host in URL: {url}",
                subject=field,
                details={"url": url, "host": host},
            )
        if is_private_ip(ip):
            return Finding(
                ErrorCode.PRIVATE_NETWORK_URL,
                Severity.ERROR,
                f"{field}: URL points to a private network address: {url}",
                subject=field,
                details={"url": url, "host": host},
            )
        return None

    decoded = decode_numeric_host(host)
    if decoded is None:
        return None

    if is_private_ip(decoded):
        return Finding(
            ErrorCode.PRIVATE_NETWORK_URL,
            Severity.ERROR,
            f"{field}: URL points to a private network address ({decoded}): {url}",
            subject=field,
            details={"url": url, "host": host, "resolved_ip": str(decoded)},
        )

    if not _is_canonical_ipv4(host):
        return Finding(
            ErrorCode.INVALID_URL,
            Severity.ERROR,
            f"{field}: Obfuscated IP notation in URL ({host} = {decoded}): {url}",
            subject=field,
            details={"url": url, "host": host, "resolved_ip": str(decoded)},
        )

    return None


def validate_url(value: Any, field: str) -> Optional[Finding]:
    """
    Validate one URL value.

    Returns:
        None if the URL is acceptable, else an error Finding
    """
    def invalid(reason: str) -> Finding:
        return Finding(
            ErrorCode.INVALID_URL,
            Severity.ERROR,
            f"{field}: {reason}",
            subject=field,
            details={"url": value if isinstance(value, str) else repr(value)},
        )

    if not isinstance(value, str):
        return invalid(f"URL must be a string, got {type(value).__name__}")

    if any(ch.isspace() or ord(ch) < 0x20 for ch in value):
        return invalid(f"URL contains whitespace or control characters: {value!r}")

    try:
        parts = urlsplit(value)
        hostname = parts.hostname
        # Accessing port validates it
        parts.port
    except ValueError as e:
        return invalid(f"Malformed URL ({e}): {value}")

    if parts.scheme.lower() != "https":
        return invalid(f"URL must use https (got {parts.scheme or 'no scheme'}): {value}")

    if not hostname:
        return invalid(f"URL has no hostname: {value}")

    if parts.username is not None or parts.password is not None:
        return invalid(f"URL must not contain credentials: {value}")

    return _check_hostname(hostname, field, value)


def _lookup(entry: Mapping[str, Any], dotted: str) -> Any:
    current: Any = entry
    for key in dotted.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def validate_urls(entry: Mapping[str, Any], fields: Iterable[str]) -> CheckResult:
    """
    Validate every declared URL field of an entry.

    Args:
        entry: Parsed token or project JSON
        fields: Field names; dotted paths reach into nested objects

    Returns:
        CheckResult with one error per offending field
    """
    result = CheckResult()
    for field in fields:
        value = _lookup(entry, field)
        if value is None or value == "":
            continue
        finding = validate_url(value, field)
        if finding is not None:
            result.errors.append(finding)
    return result
