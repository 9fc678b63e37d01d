"""
    Host identity facts for the report footer and the uptime banner.
"""
from __future__ import annotations

import platform
import socket
from datetime import datetime
from typing import Any

import psutil

from core.models import ABSENT, HostSummary
from helpers.probe import SystemProbe
from shared.hardware import get_disk_info, get_memory_info


def get_os_pretty_name(probe: SystemProbe) -> str:
    name = probe.file_field("/etc/os-release", r'^PRETTY_NAME="?([^"]*)"?\s*$')
    if isinstance(name, str) and name:
        return name
    return platform.system() or "unknown"


def get_host_summary(probe: SystemProbe) -> HostSummary:
    """Retrieve basic system information; anything unreadable is 'unknown'."""
    cores = probe.sample(psutil.cpu_count)
    memory = get_memory_info(probe)
    disk = get_disk_info(probe)

    return HostSummary(
        hostname=socket.gethostname() or "unknown",
        kernel=platform.release() or "unknown",
        os_name=get_os_pretty_name(probe),
        cpu_cores="unknown" if cores in (ABSENT, None) else str(cores),
        total_memory="unknown" if memory is ABSENT else memory["total"],
        total_disk="unknown" if disk is ABSENT else disk["total"],
    )


def format_uptime(seconds: float) -> str:
    """Same shape as `uptime -p`: 'up 2 days, 3 hours, 4 minutes'."""
    minutes = int(seconds // 60)
    parts = []
    for unit, size in (("week", 7 * 24 * 60), ("day", 24 * 60), ("hour", 60), ("minute", 1)):
        count, minutes = divmod(minutes, size)
        if count:
            parts.append(f"{count} {unit}{'s' if count != 1 else ''}")
    return "up " + (", ".join(parts) if parts else "0 minutes")


def get_uptime(probe: SystemProbe, now: datetime | None = None) -> dict[str, Any] | Any:
    boot = probe.sample(psutil.boot_time)
    if boot is ABSENT:
        return ABSENT
    now = now or datetime.now()
    since = datetime.fromtimestamp(boot)
    return {
        "uptime": format_uptime((now - since).total_seconds()),
        "since": since.strftime("%Y-%m-%d %H:%M:%S"),
    }
