from __future__ import annotations

import math
from typing import Any

import psutil

from core.models import ABSENT
from helpers.probe import SystemProbe


def bytes2human(n: float) -> str:
    """
    1073741824 -> '1.0G', the way `free -h` / `df -h` print sizes.
    """
    symbols = ("K", "M", "G", "T", "P", "E")
    prefix = {s: 1 << (i + 1) * 10 for i, s in enumerate(symbols)}
    for s in reversed(symbols):
        if n >= prefix[s]:
            return f"{n / prefix[s]:.1f}{s}"
    return f"{int(n)}B"


def get_cpu_info(probe: SystemProbe) -> dict[str, Any]:
    """
    CPU activity over a one second sample.

    Any value psutil cannot provide is ABSENT; "usage" is what the CPU check
    classifies, the rest is context for the message.
    """
    times = probe.sample(psutil.cpu_times_percent, interval=1)
    load = probe.sample(psutil.getloadavg)
    cores = probe.sample(psutil.cpu_count)

    if times is ABSENT:
        usage = idle = ABSENT
    else:
        idle = int(times.idle)
        usage = int(100 - times.idle)

    return {
        "usage": usage,
        "idle": idle,
        "load": ABSENT if load is ABSENT else f"{load[0]:.2f}",
        "cores": ABSENT if cores in (ABSENT, None) else cores,
    }


def get_memory_info(probe: SystemProbe) -> dict[str, Any] | Any:
    vm = probe.sample(psutil.virtual_memory)
    if vm is ABSENT or not vm.total:
        return ABSENT
    return {
        "percent": round(vm.used / vm.total * 100),
        "total": bytes2human(vm.total),
        "used": bytes2human(vm.used),
        "available": bytes2human(vm.available),
    }


def _df_percent(used: int, free: int) -> int:
    """Use% as df prints it: used over used + available, rounded up."""
    if used + free <= 0:
        return 0
    return math.ceil(used * 100 / (used + free))


def get_disk_info(probe: SystemProbe) -> dict[str, Any] | Any:
    """Usage of the filesystem holding the probe root."""
    du = probe.sample(psutil.disk_usage, str(probe.root))
    if du is ABSENT:
        return ABSENT
    return {
        "percent": _df_percent(du.used, du.free),
        "total": bytes2human(du.total),
        "used": bytes2human(du.used),
        "available": bytes2human(du.free),
    }
