"""
Unit tests for pester_shim.core.request.

Tests cover:
- InvocationRequest validation and line number parsing
- OutputVerbosity parsing
- Verbosity to legacy show-level mapping
- Selection mode precedence
"""

import pytest

from pester_shim.core.request import (
    InvocationRequest,
    OutputVerbosity,
    SelectionMode,
    ShowLevel,
    select_mode,
    show_level_for,
)
from pester_shim.core.versions import ResolvedRunner, RunnerVersion


def _runner(version: str) -> ResolvedRunner:
    return ResolvedRunner("Pester", RunnerVersion.parse(version))


class TestInvocationRequest:
    def test_requires_script_path(self):
        with pytest.raises(ValueError):
            InvocationRequest(script_path="")
        with pytest.raises(ValueError):
            InvocationRequest(script_path="   ")

    def test_defaults(self):
        request = InvocationRequest(script_path="t.ps1")
        assert request.output == OutputVerbosity.NORMAL
        assert request.run_all is False
        assert request.line is None

    def test_output_string_is_parsed(self):
        request = InvocationRequest(script_path="t.ps1", output="minimal")
        assert request.output == OutputVerbosity.MINIMAL

    def test_is_immutable(self):
        request = InvocationRequest(script_path="t.ps1")
        with pytest.raises(Exception):  # FrozenInstanceError
            request.script_path = "other.ps1"

    @pytest.mark.parametrize(
        "raw, expected",
        [("14", 14), ("0", 0), (" 7 ", 7), ("", None), ("abc", None), ("-3", None), (None, None)],
    )
    def test_line(self, raw, expected):
        assert InvocationRequest(script_path="t.ps1", line_number=raw).line == expected


class TestOutputVerbosity:
    def test_parse_case_insensitive(self):
        assert OutputVerbosity.parse("FROMPREFERENCE") == OutputVerbosity.FROM_PREFERENCE
        assert OutputVerbosity.parse("None") == OutputVerbosity.NONE

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown output verbosity"):
            OutputVerbosity.parse("loud")


class TestShowLevel:
    def test_mapping(self):
        assert show_level_for(OutputVerbosity.NONE) == ShowLevel.NONE
        assert show_level_for(OutputVerbosity.MINIMAL) == ShowLevel.FAILURES_ONLY

    @pytest.mark.parametrize(
        "output",
        [
            OutputVerbosity.NORMAL,
            OutputVerbosity.DETAILED,
            OutputVerbosity.DIAGNOSTIC,
            OutputVerbosity.FROM_PREFERENCE,
        ],
    )
    def test_everything_else_shows_all(self, output):
        assert show_level_for(output) == ShowLevel.SHOW_ALL


class TestSelectMode:
    """Selection precedence: all, line, name, unfiltered."""

    def test_all_wins_over_everything(self):
        request = InvocationRequest(
            script_path="t.ps1", run_all=True, line_number="14", test_name="Foo"
        )
        assert select_mode(request, _runner("5.2.0")) == SelectionMode.ALL
        assert select_mode(request, _runner("3.0.0")) == SelectionMode.ALL

    def test_line_when_supported(self):
        request = InvocationRequest(script_path="t.ps1", line_number="14", test_name="Foo")
        assert select_mode(request, _runner("4.6.0")) == SelectionMode.BY_LINE
        assert select_mode(request, _runner("5.2.0")) == SelectionMode.BY_LINE

    def test_line_ignored_before_4_6(self):
        request = InvocationRequest(script_path="t.ps1", line_number="14", test_name="Foo")
        assert select_mode(request, _runner("4.5.0")) == SelectionMode.BY_NAME

    def test_invalid_line_falls_to_name(self):
        request = InvocationRequest(script_path="t.ps1", line_number="x", test_name="Foo")
        assert select_mode(request, _runner("5.2.0")) == SelectionMode.BY_NAME

    def test_unfiltered_fallback(self):
        request = InvocationRequest(script_path="t.ps1", line_number="14")
        assert select_mode(request, _runner("4.0.0")) == SelectionMode.UNFILTERED
        assert select_mode(InvocationRequest(script_path="t.ps1"), _runner("5.2.0")) == (
            SelectionMode.UNFILTERED
        )
