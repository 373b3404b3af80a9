from collections.abc import Mapping

from .constants import UNKNOWN_ADDRESS

IPV4_MAPPED_PREFIX = "::ffff:"


def resolve_client_address(headers: Mapping[str, str], client_host: str | None = None) -> str:
    """Return the real client address behind any reverse proxy.

    Uses the first X-Forwarded-For hop, then X-Real-IP, then the socket peer.
    IPv4-mapped IPv6 addresses are reduced to their IPv4 form.
    """
    address = headers.get("x-forwarded-for") or headers.get("x-real-ip") or client_host or ""
    if "," in address:
        address = address.split(",", 1)[0]
    address = address.strip()
    if address.lower().startswith(IPV4_MAPPED_PREFIX):
        address = address[len(IPV4_MAPPED_PREFIX):]
    return address or UNKNOWN_ADDRESS
