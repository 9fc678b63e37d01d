from __future__ import annotations

import re
from typing import Any

from core.models import ABSENT, UNPARSEABLE
from helpers.probe import SystemProbe

SSHD_DIR = "/etc/ssh"
SSHD_CONFIG = f"{SSHD_DIR}/sshd_config"
# sshd itself refuses to nest Include deeper than this
SSHD_INCLUDE_DEPTH = 16
SUDOERS = "/etc/sudoers"
PWQUALITY_CONF = "/etc/security/pwquality.conf"
AUTH_LOG = "/var/log/auth.log"
REBOOT_MARKER = "/var/run/reboot-required"

# SUID binaries under these prefixes are expected on a stock install.
SUID_ALLOWED_PREFIXES = ("/usr/bin", "/bin", "/sbin")


# -----------------------------
# 1) Configuration files
# -----------------------------
def _sshd_lines(probe: SystemProbe, path: str, depth: int = 0):
    """
    Global (non-Match) directive lines of an sshd config file, with Include
    files expanded in place. Relative Include paths are under /etc/ssh, and
    a Match block runs to the end of the file it appears in.
    """
    text = probe.read_text(path)
    if text is ABSENT:
        return
    for line in text.splitlines():
        s = line.strip()
        if not s or s.startswith("#"):
            continue
        tokens = s.split()
        keyword = tokens[0].lower()
        if keyword == "match":
            return
        if keyword == "include" and depth < SSHD_INCLUDE_DEPTH:
            for pattern in tokens[1:]:
                if not pattern.startswith("/"):
                    pattern = f"{SSHD_DIR}/{pattern}"
                for included in probe.glob(pattern):
                    yield from _sshd_lines(probe, included, depth + 1)
            continue
        yield tokens


def ssh_directive(probe: SystemProbe, keyword: str) -> str | None | Any:
    """
    Value of an sshd_config keyword, lowercased.

    sshd keywords are case-insensitive and the first occurrence wins,
    including occurrences in Include'd files. None means the directive is
    not set; ABSENT means sshd_config itself could not be read.
    """
    if probe.read_text(SSHD_CONFIG) is ABSENT:
        return ABSENT
    wanted = keyword.lower()
    for tokens in _sshd_lines(probe, SSHD_CONFIG):
        if tokens[0].lower() == wanted and len(tokens) > 1:
            return tokens[1].lower()
    return None


def reboot_required(probe: SystemProbe) -> bool:
    return probe.file_exists(REBOOT_MARKER)


def sudo_logging_configured(probe: SystemProbe) -> bool | Any:
    return probe.file_contains(SUDOERS, r"^Defaults.*logfile")


def password_min_length(probe: SystemProbe) -> int | None | Any:
    """minlen from pwquality.conf: int, None if unset, ABSENT if no file."""
    raw = probe.file_field(PWQUALITY_CONF, r"^\s*minlen\s*=\s*(\S+)")
    if raw is None or raw is ABSENT:
        return raw
    try:
        return int(raw)
    except ValueError:
        return UNPARSEABLE


def failed_logins(probe: SystemProbe) -> int | Any:
    return probe.file_count(AUTH_LOG, r"Failed password")


# -----------------------------
# 2) Packages and services
# -----------------------------
def _dpkg_installed(rc: int, stdout: str) -> bool:
    # dpkg-query exits 1 for packages it has never heard of
    return rc == 0 and "install ok installed" in stdout


def package_installed(probe: SystemProbe, package: str) -> bool | Any:
    return probe.command_output(["dpkg-query", "-W", "--showformat=${Status}", package], _dpkg_installed)


def _is_active(rc: int, stdout: str) -> bool:
    return stdout.strip() == "active"


def unit_active(probe: SystemProbe, unit: str) -> bool | Any:
    return probe.command_output(["systemctl", "is-active", unit], _is_active)


def _ufw_status(rc: int, stdout: str) -> bool | None:
    # "ufw status" needs root; a non-zero exit means we could not ask
    if rc != 0:
        return None
    if re.search(r"^Status:\s*active\b", stdout, re.MULTILINE):
        return True
    if re.search(r"^Status:\s*inactive\b", stdout, re.MULTILINE):
        return False
    return None


def firewall_active(probe: SystemProbe) -> bool | Any:
    return probe.command_output(["ufw", "status"], _ufw_status)


def _upgraded_count(rc: int, stdout: str) -> int | None:
    # apt-get -s upgrade ends with e.g. "3 upgraded, 0 newly installed, ..."
    if rc != 0:
        return None
    m = re.search(r"^(\d+) upgraded", stdout, re.MULTILINE)
    return int(m.group(1)) if m else None


def pending_updates(probe: SystemProbe) -> int | Any:
    return probe.counter(["apt-get", "-s", "upgrade"], _upgraded_count, timeout_s=120)


def _running_units(rc: int, stdout: str) -> int | None:
    if rc != 0:
        return None
    return sum(1 for line in stdout.splitlines()
               if re.search(r"\bloaded\s+active\s+running\b", line))


def running_services(probe: SystemProbe) -> int | Any:
    cmd = ["systemctl", "list-units", "--type=service", "--state=running", "--no-legend", "--plain"]
    return probe.counter(cmd, _running_units)


# -----------------------------
# 3) Filesystem scan
# -----------------------------
def suspicious_suid_files(probe: SystemProbe) -> list[str] | Any:
    """
    SUID files outside the standard binary directories.

    find exits 1 whenever it hits an unreadable directory, which is normal
    for a non-root run, so its output is still used when it printed anything.
    """
    root = str(probe.root).rstrip("/")

    def extract(rc: int, stdout: str) -> list[str] | None:
        if rc != 0 and not stdout:
            return None
        found = []
        for line in stdout.splitlines():
            rel = line[len(root):] if root and line.startswith(root) else line
            if not rel.startswith(SUID_ALLOWED_PREFIXES):
                found.append(rel)
        return found

    cmd = [
        "find", str(probe.path("/")),
        "(", "-path", str(probe.path("/proc")), "-o", "-path", str(probe.path("/sys")), ")", "-prune",
        "-o", "-type", "f", "-perm", "-4000", "-print",
    ]
    return probe.command_output(cmd, extract, timeout_s=300)
