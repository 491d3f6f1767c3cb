"""
Root pytest configuration and shared fixtures.

Provides fake runner backends for both Pester generations so nothing here
needs PowerShell installed.
"""

import logging
from typing import List, Optional

import pytest

from pester_shim.cli.logging import set_request_id
from pester_shim.cli.registry import set_context
from pester_shim.config import set_config
from pester_shim.core.invocation import Invocation
from pester_shim.core.runners import RunnerBackend, reset_active_runner
from pester_shim.core.versions import ResolvedRunner, RunnerVersion


class FakeBackend(RunnerBackend):
    """Runner backend that records calls instead of starting PowerShell."""

    def __init__(self, versions: Optional[List[str]] = None, exit_code: int = 0):
        self.runners = sorted(
            (
                ResolvedRunner(module_name="Pester", version=RunnerVersion.parse(v))
                for v in (versions or [])
            ),
            key=lambda runner: runner.version,
            reverse=True,
        )
        self.exit_code = exit_code
        self.load_calls: List[Optional[RunnerVersion]] = []
        self.invocations: List[Invocation] = []

    def load(self, minimum_version=None):
        self.load_calls.append(minimum_version)
        for runner in self.runners:
            if minimum_version is None or runner.version >= minimum_version:
                return runner
        return None

    def invoke(self, runner, invocation):
        self.invocations.append(invocation)
        return self.exit_code

    def list_available(self):
        return list(self.runners)

    @property
    def install_hint(self) -> str:
        return "Install-Module Pester -Scope CurrentUser -Force"


@pytest.fixture(autouse=True)
def clean_process_state():
    """Reset the process-wide runner, config, CLI context, request id and log handlers."""
    reset_active_runner()
    set_config(None)
    set_context(None)
    set_request_id("")
    yield
    reset_active_runner()
    set_config(None)
    set_context(None)
    set_request_id("")
    shim_logger = logging.getLogger("pester_shim")
    shim_logger.handlers.clear()
    shim_logger.setLevel(logging.NOTSET)


@pytest.fixture
def make_backend():
    """Factory for FakeBackend instances."""

    def _make(*versions: str, exit_code: int = 0) -> FakeBackend:
        return FakeBackend(list(versions), exit_code=exit_code)

    return _make


@pytest.fixture
def pester4(make_backend):
    return make_backend("4.10.1")


@pytest.fixture
def pester5(make_backend):
    return make_backend("5.2.0")
