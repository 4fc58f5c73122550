"""Host identification helpers."""

from __future__ import annotations

import socket


def hostname(port: int) -> str:
    """Return a unique ``hostname_port`` string for this host."""
    return f"{socket.gethostname()}_{port}"


def free_tcp_port() -> int:
    """Return a TCP port that is currently free on this host."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("", 0))
        return sock.getsockname()[1]


def found_ip() -> str:
    """Return the single external IPv4 address of this host.

    Loopback (127.*) and 172.* addresses are ignored. Raises LookupError
    when none or more than one address remains.
    """
    infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    ips: list[str] = []
    for *_, sockaddr in infos:
        ip = sockaddr[0]
        parts = ip.split(".")
        if len(parts) == 4 and parts[0] not in ("127", "172") and ip not in ips:
            ips.append(ip)
    if len(ips) > 1:
        raise LookupError("Multiple ip found please set one")
    if not ips:
        raise LookupError("No ip found please set one")
    return ips[0]