"""
    The audit: a fixed, ordered registry of checks.

    Each check pairs a collector (probe -> facts) with a rule
    (facts -> verdict). Collectors only ever see the probe, never another
    check's result, so the order below is presentation order and nothing more.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from collectors.linux import linux_security as linux
from core import rules
from core.rules import Outcome
from helpers.probe import SystemProbe
from shared.hardware import get_cpu_info, get_disk_info, get_memory_info
from shared.network import get_listening_ports


@dataclass(frozen=True)
class Check:
    name: str
    collect: Callable[[SystemProbe], Any]
    evaluate: Callable[[Any], Outcome]


def _service(package: str, unit: str | None = None) -> Callable[[SystemProbe], dict[str, Any]]:
    def collect(probe: SystemProbe) -> dict[str, Any]:
        installed = linux.package_installed(probe, package)
        # liveness is only worth asking about once the package is there
        active = linux.unit_active(probe, unit or package) if installed is True else False
        return {"installed": installed, "active": active}
    return collect


def _firewall(probe: SystemProbe) -> dict[str, Any]:
    installed = linux.package_installed(probe, "ufw")
    active = linux.firewall_active(probe) if installed is True else False
    return {"installed": installed, "active": active}


CHECKS: tuple[Check, ...] = (
    Check("System Restart", linux.reboot_required, rules.system_restart),
    Check("SSH Root Login", lambda p: linux.ssh_directive(p, "PermitRootLogin"), rules.ssh_root_login),
    Check("SSH Password Auth", lambda p: linux.ssh_directive(p, "PasswordAuthentication"), rules.ssh_password_auth),
    Check("SSH Port", lambda p: linux.ssh_directive(p, "Port"), rules.ssh_port),
    Check("Firewall Status", _firewall, rules.firewall),
    Check("Unattended Upgrades", _service("unattended-upgrades"), rules.unattended_upgrades),
    Check("Fail2ban", _service("fail2ban"), rules.fail2ban),
    Check("Failed Logins", linux.failed_logins, rules.failed_logins),
    Check("System Updates", linux.pending_updates, rules.system_updates),
    Check("Running Services", linux.running_services, rules.running_services),
    Check("Open Ports", get_listening_ports, rules.open_ports),
    Check("Disk Usage", get_disk_info, rules.disk_usage),
    Check("Memory Usage", get_memory_info, rules.memory_usage),
    Check("CPU Usage", get_cpu_info, rules.cpu_usage),
    Check("Sudo Logging", linux.sudo_logging_configured, rules.sudo_logging),
    Check("Password Policy", linux.password_min_length, rules.password_policy),
    Check("SUID Files", linux.suspicious_suid_files, rules.suid_files),
)
