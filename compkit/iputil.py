"""Helpers for finding local and remote IP addresses and checking ports."""

from __future__ import annotations

import ipaddress
import socket
from collections.abc import Iterator, Mapping, Sequence
from typing import Union

X_FORWARDED_FOR = "X-Forwarded-For"
X_REAL_IP = "X-Real-IP"
X_CLIENT_IP = "x-client-ip"

LOOPBACK = "127.0.0.1"

HeaderValue = Union[str, Sequence[str]]


def _candidate_addresses() -> Iterator[str]:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            # A UDP connect sends nothing; it only picks the outgoing interface.
            sock.connect(("10.254.254.254", 1))
            yield sock.getsockname()[0]
    except OSError:
        pass
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        infos = []
    for info in infos:
        yield info[4][0]


def get_local_ip() -> str:
    """Return a non-loopback IPv4 address of this host, or 127.0.0.1."""
    for candidate in _candidate_addresses():
        try:
            address = ipaddress.ip_address(candidate)
        except ValueError:
            continue
        if address.version == 4 and not address.is_loopback and not address.is_unspecified:
            return str(address)
    return LOOPBACK


def _header(headers: Mapping[str, HeaderValue], name: str) -> str:
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() != wanted:
            continue
        if isinstance(value, str):
            return value
        return value[0] if value else ""
    return ""


def _split_host(address: str) -> str:
    """Return the host part of ``host:port``; raise ValueError if malformed."""
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address {address!r}")
        if address[end + 1:end + 2] != ":":
            raise ValueError(f"missing port in address {address!r}")
        host, port = address[1:end], address[end + 2:]
        if "[" in host or "]" in host:
            raise ValueError(f"unexpected bracket in address {address!r}")
    else:
        colon = address.rfind(":")
        if colon < 0:
            raise ValueError(f"missing port in address {address!r}")
        host, port = address[:colon], address[colon + 1:]
        if ":" in host:
            raise ValueError(f"too many colons in address {address!r}")
        if "[" in host or "]" in host:
            raise ValueError(f"unexpected bracket in address {address!r}")
    if "[" in port or "]" in port:
        raise ValueError(f"unexpected bracket in address {address!r}")
    return host


def remote_ip(remote_addr: str, headers: Mapping[str, HeaderValue] | None = None) -> str:
    """Return the client address of a request.

    The client-ip, real-ip and forwarded-for headers are consulted in that
    order; otherwise the host part of ``remote_addr`` is used ("" when it is
    not a valid ``host:port``). ``::1`` is reported as ``127.0.0.1``.
    """
    headers = headers or {}
    for name in (X_CLIENT_IP, X_REAL_IP, X_FORWARDED_FOR):
        value = _header(headers, name)
        if value:
            result = value
            break
    else:
        try:
            result = _split_host(remote_addr)
        except ValueError:
            result = ""
    if result == "::1":
        result = LOOPBACK
    return result


def is_valid_port(port: int) -> bool:
    """Return True for a usable port; 0 is not a valid port."""
    return 0 < port < 65535