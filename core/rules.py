"""
    Check rules: facts in, (Verdict, message) out.

    Rules are pure. They never touch the host and never raise; a missing or
    unreadable source is reported as a WARN/FAIL that names the source.
"""
from __future__ import annotations

from typing import Any

from core.models import ABSENT, UNPARSEABLE, Verdict
from core.thresholds import classify

PASS, WARN, FAIL = Verdict.PASS, Verdict.WARN, Verdict.FAIL

Outcome = tuple[Verdict, str]


def _missing(value: Any) -> bool:
    return value is ABSENT or value is UNPARSEABLE


# -----------------------------
# Pattern presence
# -----------------------------
def system_restart(reboot_required: bool) -> Outcome:
    if reboot_required:
        return WARN, "System requires a restart to apply updates"
    return PASS, "No restart required"


def ssh_root_login(value: Any) -> Outcome:
    if value is ABSENT:
        return FAIL, "Could not read /etc/ssh/sshd_config - root login status is unknown"
    if value == "no":
        return PASS, "Root login is properly disabled in SSH configuration"
    if value in ("prohibit-password", "without-password"):
        return WARN, "Root login is allowed with keys only - consider disabling it entirely in /etc/ssh/sshd_config"
    return FAIL, "Root login is currently allowed - this is a security risk. Disable it in /etc/ssh/sshd_config"


def ssh_password_auth(value: Any) -> Outcome:
    if value is ABSENT:
        return FAIL, "Could not read /etc/ssh/sshd_config - password authentication status is unknown"
    if value == "no":
        return PASS, "Password authentication is disabled, key-based auth only"
    return FAIL, "Password authentication is enabled - consider using key-based authentication only"


def ssh_port(value: Any) -> Outcome:
    if value is ABSENT:
        return WARN, "Could not read /etc/ssh/sshd_config - assuming default port 22"
    port = value or "22"
    if port == "22":
        return WARN, "Using default port 22 - consider changing to a non-standard port for security by obscurity"
    return PASS, f"Using non-default port {port} which helps prevent automated attacks"


def sudo_logging(configured: Any) -> Outcome:
    if configured is ABSENT:
        return FAIL, "Could not read /etc/sudoers - sudo logging cannot be verified"
    if configured:
        return PASS, "Sudo commands are being logged for audit purposes"
    return FAIL, "Sudo commands are not being logged - reduces audit capability"


def password_policy(min_length: Any) -> Outcome:
    if min_length is ABSENT:
        return FAIL, "No password policy configured - system accepts weak passwords"
    if min_length is UNPARSEABLE:
        return FAIL, "Password policy minlen in /etc/security/pwquality.conf is not a number"
    if min_length is not None and min_length >= 12:
        return PASS, "Strong password policy is enforced"
    return FAIL, "Weak password policy - passwords may be too simple"


# -----------------------------
# Existence + liveness
# -----------------------------
def firewall(facts: dict[str, Any]) -> Outcome:
    installed, active = facts["installed"], facts["active"]
    if _missing(installed):
        return FAIL, "Could not query the package database - firewall status is unknown"
    if not installed:
        return FAIL, "UFW firewall is not installed - your system is exposed to network attacks"
    if active is True:
        return PASS, "UFW firewall is active and protecting your system"
    if _missing(active):
        return WARN, "UFW is installed but its status could not be read - run the audit as root"
    return WARN, "UFW firewall is installed but not active - your system is exposed to network attacks"


def unattended_upgrades(facts: dict[str, Any]) -> Outcome:
    installed, active = facts["installed"], facts["active"]
    if _missing(installed):
        return FAIL, "Could not query the package database - automatic updates status is unknown"
    if not installed:
        return FAIL, "Automatic security updates are not configured - system may miss critical updates"
    if active is True:
        return PASS, "Automatic security updates are configured"
    if _missing(active):
        return WARN, "unattended-upgrades is installed but its service state could not be read - systemctl is not available"
    return WARN, "unattended-upgrades is installed but its service is not running"


def fail2ban(facts: dict[str, Any]) -> Outcome:
    installed, active = facts["installed"], facts["active"]
    if _missing(installed):
        return FAIL, "Could not query the package database - brute force protection status is unknown"
    if not installed:
        return FAIL, "No brute force protection installed - system is vulnerable to login attacks"
    if active is True:
        return PASS, "Brute force protection is active and running"
    if _missing(active):
        return WARN, "Fail2ban is installed but its service state could not be read - systemctl is not available"
    return WARN, "Fail2ban is installed but not running - brute force protection is disabled"


# -----------------------------
# Threshold ladders
# -----------------------------
def failed_logins(count: Any) -> Outcome:
    # no auth log means nothing was logged: count as zero
    if count is ABSENT:
        count = 0
    verdict = classify("Failed Logins", count)
    if verdict is PASS:
        return verdict, f"Only {count} failed login attempts detected - this is within normal range"
    if verdict is WARN:
        return verdict, f"{count} failed login attempts detected - might indicate breach attempts"
    return verdict, f"{count} failed login attempts detected - possible brute force attack in progress"


def system_updates(count: Any) -> Outcome:
    if count is ABSENT:
        return WARN, "Could not query pending updates - apt-get is not available"
    if count is UNPARSEABLE:
        return WARN, "Could not determine the number of pending updates from apt-get output"
    if classify("System Updates", count) is PASS:
        return PASS, "All system packages are up to date"
    return FAIL, f"{count} security updates available - system is vulnerable to known exploits"


def running_services(count: Any) -> Outcome:
    if _missing(count):
        return WARN, "Could not list running services - systemctl is not available"
    verdict = classify("Running Services", count)
    if verdict is PASS:
        return verdict, f"Running minimal services ({count}) - good for security"
    if verdict is WARN:
        return verdict, f"{count} services running - consider reducing attack surface"
    return verdict, f"Too many services running ({count}) - increases attack surface"


def open_ports(listeners: Any) -> Outcome:
    if _missing(listeners):
        return WARN, "Could not enumerate listening sockets - run the audit as root"
    count = len(listeners)
    verdict = classify("Open Ports", count)
    if verdict is PASS:
        return verdict, f"Minimal ports open ({count}) - good security posture"
    if verdict is WARN:
        return verdict, f"{count} ports open - consider closing unnecessary ports"
    return verdict, f"Too many open ports ({count}) - significant attack surface"


def _usage_detail(facts: dict[str, Any]) -> str:
    return (f"{facts['percent']}% used - Used: {facts['used']} of {facts['total']}, "
            f"Available: {facts['available']}")


def disk_usage(facts: Any) -> Outcome:
    if _missing(facts):
        return WARN, "Could not read filesystem usage for /"
    verdict = classify("Disk Usage", facts["percent"])
    label = {
        PASS: "Healthy disk space available",
        WARN: "Disk space usage is moderate",
        FAIL: "Critical disk space usage",
    }[verdict]
    return verdict, f"{label} ({_usage_detail(facts)})"


def memory_usage(facts: Any) -> Outcome:
    if _missing(facts):
        return WARN, "Could not read memory usage"
    verdict = classify("Memory Usage", facts["percent"])
    label = {PASS: "Healthy", WARN: "Moderate", FAIL: "Critical"}[verdict]
    return verdict, f"{label} memory usage ({_usage_detail(facts)})"


def cpu_usage(facts: dict[str, Any]) -> Outcome:
    usage = facts["usage"]
    if _missing(usage):
        return WARN, "Could not sample CPU usage"
    verdict = classify("CPU Usage", usage)
    label = {PASS: "Healthy", WARN: "Moderate", FAIL: "Critical"}[verdict]
    load = "unknown" if _missing(facts["load"]) else facts["load"]
    cores = "unknown" if _missing(facts["cores"]) else facts["cores"]
    return verdict, (f"{label} CPU usage ({usage}% used - Active: {usage}%, Idle: {facts['idle']}%, "
                     f"Load: {load}, Cores: {cores})")


def suid_files(found: Any) -> Outcome:
    if _missing(found):
        return WARN, "Could not scan the filesystem for SUID files"
    if classify("SUID Files", len(found)) is PASS:
        return PASS, "No suspicious SUID files found - good security practice"
    return FAIL, f"Found {len(found)} suspicious SUID files - potential privilege escalation risk"
