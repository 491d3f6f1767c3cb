"""
Unit tests for pester_shim.core.hosts.
"""

import pytest

from pester_shim.core import hosts
from pester_shim.core.hosts import (
    PowerShellHost,
    get_unavailability_reason,
    host_candidates,
    resolve_host,
)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    monkeypatch.delenv("PESTER_SHIM_POWERSHELL", raising=False)
    monkeypatch.delenv("PESTER_SHIM_TOOL_PATH", raising=False)


class TestCandidates:
    def test_defaults(self):
        assert host_candidates() == ["pwsh", "powershell"]

    def test_preferred(self):
        assert host_candidates("powershell.exe") == ["powershell.exe"]

    def test_env_override_wins(self, monkeypatch):
        monkeypatch.setenv("PESTER_SHIM_POWERSHELL", "/opt/pwsh")
        assert host_candidates("powershell") == ["/opt/pwsh"]


class TestResolveHost:
    def test_falls_back_to_windows_powershell(self, monkeypatch):
        found = {"powershell": "C:/Windows/powershell.exe"}
        monkeypatch.setattr(hosts.shutil, "which", lambda binary, path=None: found.get(binary))
        host = resolve_host()
        assert host == PowerShellHost(binary="powershell", executable="C:/Windows/powershell.exe")

    def test_none_found(self, monkeypatch):
        monkeypatch.setattr(hosts.shutil, "which", lambda binary, path=None: None)
        assert resolve_host() is None
        reason = get_unavailability_reason()
        assert "'pwsh'" in reason and "'powershell'" in reason

    def test_tool_path_is_searched(self, monkeypatch, tmp_path):
        seen = {}

        def fake_which(binary, path=None):
            seen[binary] = path
            return f"{path}/{binary}"

        monkeypatch.setattr(hosts.shutil, "which", fake_which)
        monkeypatch.setenv("PESTER_SHIM_TOOL_PATH", str(tmp_path))
        host = resolve_host()
        assert host.executable == f"{tmp_path}/pwsh"
        assert seen["pwsh"] == str(tmp_path)

    def test_available_host_has_no_reason(self, monkeypatch):
        monkeypatch.setattr(hosts.shutil, "which", lambda binary, path=None: "/usr/bin/pwsh")
        assert get_unavailability_reason() is None


class TestCommand:
    def test_command_with_and_without_profile(self):
        host = PowerShellHost(binary="pwsh", executable="/usr/bin/pwsh")
        assert host.command("Get-Date") == [
            "/usr/bin/pwsh", "-NoProfile", "-NonInteractive", "-Command", "Get-Date"
        ]
        assert "-NoProfile" not in host.command("Get-Date", no_profile=False)
