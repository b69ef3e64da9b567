import ipaddress
import re

UNKNOWN_CLIENT = "unknown"

_IPV4_WITH_PORT = re.compile(r"^(\d{1,3}(?:\.\d{1,3}){3}):\d+$")
_BRACKETED_IPV6 = re.compile(r"^\[([^\]]+)\](?::\d+)?$")


def normalize_ip(value: str | None) -> str:
    """Canonicalise an address so the same client always maps to one key.

    Ports, IPv6 brackets and zone ids are dropped, IPv4-mapped IPv6
    addresses are unwrapped and IPv6 is compressed. Values that are not
    addresses are kept, trimmed and lowercased.
    """
    candidate = (value or "").strip()
    if not candidate:
        return UNKNOWN_CLIENT

    if match := _BRACKETED_IPV6.match(candidate):
        candidate = match.group(1)
    elif match := _IPV4_WITH_PORT.match(candidate):
        candidate = match.group(1)

    candidate = candidate.split("%", 1)[0]

    try:
        address = ipaddress.ip_address(candidate)
    except ValueError:
        return candidate.lower()

    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped:
        address = address.ipv4_mapped

    return address.compressed.lower()


def get_client_key(forwarded_for: str | None, peer_host: str | None) -> str:
    """First X-Forwarded-For hop wins, then the socket peer, then ``unknown``."""
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return normalize_ip(first_hop)

    return normalize_ip(peer_host)
