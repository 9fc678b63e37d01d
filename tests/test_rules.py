"""Tests for the pure check rules."""

from __future__ import annotations

import pytest

from core import rules
from core.models import ABSENT, UNPARSEABLE, Verdict

PASS, WARN, FAIL = Verdict.PASS, Verdict.WARN, Verdict.FAIL


def usage(percent: int) -> dict:
    return {"percent": percent, "total": "10.0G", "used": "5.0G", "available": "5.0G"}


# ── Failed logins ────────────────────────────────────────────────────────────


class TestFailedLogins:
    def test_nine_is_pass(self) -> None:
        verdict, message = rules.failed_logins(9)
        assert verdict is PASS
        assert "9 failed login attempts" in message

    def test_ten_is_warn(self) -> None:
        assert rules.failed_logins(10)[0] is WARN

    def test_fifty_is_fail(self) -> None:
        verdict, message = rules.failed_logins(50)
        assert verdict is FAIL
        assert "brute force" in message

    def test_missing_auth_log_counts_as_zero(self) -> None:
        verdict, message = rules.failed_logins(ABSENT)
        assert verdict is PASS
        assert "0 failed login attempts" in message


# ── SSH ──────────────────────────────────────────────────────────────────────


class TestSSH:
    def test_root_login_disabled(self) -> None:
        assert rules.ssh_root_login("no")[0] is PASS

    @pytest.mark.parametrize("value", ["yes", None, "", "maybe"])
    def test_root_login_not_disabled_fails(self, value) -> None:
        assert rules.ssh_root_login(value)[0] is FAIL

    def test_root_login_keys_only_warns(self) -> None:
        assert rules.ssh_root_login("prohibit-password")[0] is WARN
        assert rules.ssh_root_login("without-password")[0] is WARN

    def test_unreadable_config_fails(self) -> None:
        verdict, message = rules.ssh_root_login(ABSENT)
        assert verdict is FAIL
        assert "/etc/ssh/sshd_config" in message

    def test_password_auth(self) -> None:
        assert rules.ssh_password_auth("no")[0] is PASS
        assert rules.ssh_password_auth("yes")[0] is FAIL
        assert rules.ssh_password_auth(None)[0] is FAIL
        assert rules.ssh_password_auth(ABSENT)[0] is FAIL

    def test_default_port_warns(self) -> None:
        assert rules.ssh_port("22")[0] is WARN
        assert rules.ssh_port(None)[0] is WARN
        assert rules.ssh_port(ABSENT)[0] is WARN

    def test_custom_port_passes(self) -> None:
        verdict, message = rules.ssh_port("2222")
        assert verdict is PASS
        assert "2222" in message


# ── Other configuration rules ────────────────────────────────────────────────


class TestConfigurationRules:
    def test_restart(self) -> None:
        assert rules.system_restart(True)[0] is WARN
        assert rules.system_restart(False)[0] is PASS

    def test_sudo_logging(self) -> None:
        assert rules.sudo_logging(True)[0] is PASS
        assert rules.sudo_logging(False)[0] is FAIL
        assert rules.sudo_logging(ABSENT)[0] is FAIL

    @pytest.mark.parametrize("minlen,expected", [
        (12, PASS),
        (16, PASS),
        (11, FAIL),
        (None, FAIL),
        (UNPARSEABLE, FAIL),
        (ABSENT, FAIL),
    ])
    def test_password_policy(self, minlen, expected) -> None:
        assert rules.password_policy(minlen)[0] is expected

    def test_missing_policy_file_message(self) -> None:
        assert "No password policy configured" in rules.password_policy(ABSENT)[1]


# ── Existence + liveness ─────────────────────────────────────────────────────


class TestServiceRules:
    @pytest.mark.parametrize("rule", [rules.firewall, rules.unattended_upgrades, rules.fail2ban])
    def test_ladder(self, rule) -> None:
        assert rule({"installed": False, "active": False})[0] is FAIL
        assert rule({"installed": True, "active": False})[0] is WARN
        assert rule({"installed": True, "active": True})[0] is PASS

    @pytest.mark.parametrize("rule", [rules.firewall, rules.unattended_upgrades, rules.fail2ban])
    def test_package_database_unavailable(self, rule) -> None:
        assert rule({"installed": ABSENT, "active": False})[0] is FAIL

    def test_firewall_status_unreadable(self) -> None:
        verdict, message = rules.firewall({"installed": True, "active": UNPARSEABLE})
        assert verdict is WARN
        assert "root" in message

    def test_inactive_fail2ban_message(self) -> None:
        assert "not running" in rules.fail2ban({"installed": True, "active": False})[1]

    @pytest.mark.parametrize("rule", [rules.unattended_upgrades, rules.fail2ban])
    def test_unknown_service_state_is_not_reported_as_stopped(self, rule) -> None:
        verdict, message = rule({"installed": True, "active": ABSENT})
        assert verdict is WARN
        assert "could not be read" in message
        assert "not running" not in message


# ── Counters ─────────────────────────────────────────────────────────────────


class TestCounters:
    def test_updates(self) -> None:
        assert rules.system_updates(0)[0] is PASS
        verdict, message = rules.system_updates(3)
        assert verdict is FAIL
        assert message.startswith("3 security updates")

    @pytest.mark.parametrize("value", [ABSENT, UNPARSEABLE])
    def test_updates_unknown_is_not_pass(self, value) -> None:
        assert rules.system_updates(value)[0] is WARN

    def test_services(self) -> None:
        assert rules.running_services(19)[0] is PASS
        assert rules.running_services(20)[0] is WARN
        assert rules.running_services(40)[0] is FAIL
        assert rules.running_services(UNPARSEABLE)[0] is WARN

    def test_ports(self) -> None:
        assert rules.open_ports([{}] * 9)[0] is PASS
        assert rules.open_ports([{}] * 10)[0] is WARN
        assert rules.open_ports([{}] * 20)[0] is FAIL
        assert rules.open_ports(ABSENT)[0] is WARN

    def test_suid(self) -> None:
        assert rules.suid_files([])[0] is PASS
        verdict, message = rules.suid_files(["/opt/x", "/tmp/y"])
        assert verdict is FAIL
        assert "Found 2" in message
        assert rules.suid_files(ABSENT)[0] is WARN


# ── Resource usage ───────────────────────────────────────────────────────────


class TestResourceUsage:
    @pytest.mark.parametrize("percent,expected", [(49, PASS), (50, WARN), (79, WARN), (80, FAIL)])
    def test_disk(self, percent, expected) -> None:
        verdict, message = rules.disk_usage(usage(percent))
        assert verdict is expected
        assert f"{percent}% used - Used: 5.0G of 10.0G, Available: 5.0G" in message

    @pytest.mark.parametrize("percent,expected", [(49, PASS), (50, WARN), (80, FAIL)])
    def test_memory(self, percent, expected) -> None:
        assert rules.memory_usage(usage(percent))[0] is expected

    def test_unknown_usage_warns(self) -> None:
        assert rules.disk_usage(ABSENT)[0] is WARN
        assert rules.memory_usage(ABSENT)[0] is WARN

    def test_cpu(self) -> None:
        verdict, message = rules.cpu_usage({"usage": 12, "idle": 88, "load": "0.50", "cores": 4})
        assert verdict is PASS
        assert "Idle: 88%" in message
        assert "Cores: 4" in message
        assert rules.cpu_usage({"usage": 80, "idle": 20, "load": "3.00", "cores": 4})[0] is FAIL

    def test_cpu_unknown(self) -> None:
        facts = {"usage": ABSENT, "idle": ABSENT, "load": ABSENT, "cores": ABSENT}
        assert rules.cpu_usage(facts)[0] is WARN

    def test_cpu_partial_facts(self) -> None:
        verdict, message = rules.cpu_usage({"usage": 60, "idle": 40, "load": ABSENT, "cores": ABSENT})
        assert verdict is WARN
        assert "Load: unknown" in message
