from typing import Any
import psutil
import socket

from core.models import ABSENT
from helpers.probe import SystemProbe


def _laddr_ip_port(laddr: Any) -> tuple[str | None, int | None]:
    """
    laddr can be:
      - a tuple: (ip, port)
      - a namedtuple with .ip and .port
      - an empty tuple for unbound sockets
    """
    if not laddr:
        return None, None
    ip = getattr(laddr, "ip", None)
    port = getattr(laddr, "port", None)
    if ip is not None and port is not None:
        return ip, port
    # fall back to tuple indexing
    try:
        return laddr[0], laddr[1]
    except (IndexError, TypeError):
        return None, None


def get_listening_ports(probe: SystemProbe) -> list[dict[str, Any]] | Any:
    """
    TCP listening sockets (status == CONN_LISTEN), one entry per socket,
    so a service bound on both IPv4 and IPv6 counts twice.

    psutil.net_connections() may raise AccessDenied unless run as root; the
    probe turns that into ABSENT instead of crashing the audit.
    """
    conns = probe.sample(psutil.net_connections, kind="inet")
    if conns is ABSENT:
        return ABSENT

    listeners: list[dict[str, Any]] = []
    for c in conns:
        if c.type != socket.SOCK_STREAM or c.status != psutil.CONN_LISTEN:
            continue
        ip, port = _laddr_ip_port(c.laddr)
        if port is None:
            continue
        listeners.append({"ip": ip, "port": port, "pid": c.pid})

    return listeners
