"""
Invocation requests and test selection.

An editor hands over a script path plus at most one way of narrowing the
run (everything, a line, a test name). The precedence between those is
fixed here so every request resolves to exactly one SelectionMode.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from pester_shim.core.versions import ResolvedRunner


_LINE_NUMBER_PATTERN = re.compile(r"\d+")


class OutputVerbosity(str, Enum):
    """Output verbosity requested by the editor."""

    NONE = "None"
    MINIMAL = "Minimal"
    NORMAL = "Normal"
    DETAILED = "Detailed"
    DIAGNOSTIC = "Diagnostic"
    # Leave the verbosity to the user's PesterPreference
    FROM_PREFERENCE = "FromPreference"

    @classmethod
    def parse(cls, value: str) -> "OutputVerbosity":
        """Case-insensitive lookup by value.

        Raises:
            ValueError: If value is not a known verbosity.
        """
        lowered = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == lowered:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown output verbosity: {value!r}. Valid values: {valid}")


class ShowLevel(str, Enum):
    """Values of the legacy Invoke-Pester -Show parameter."""

    NONE = "None"
    FAILURES_ONLY = "Fails"
    SHOW_ALL = "All"


class SelectionMode(str, Enum):
    """How the tests of a script are narrowed down."""

    ALL = "all"
    BY_LINE = "by_line"
    BY_NAME = "by_name"
    UNFILTERED = "unfiltered"


def show_level_for(output: OutputVerbosity) -> ShowLevel:
    """Translate the requested verbosity into a legacy -Show value."""
    if output == OutputVerbosity.NONE:
        return ShowLevel.NONE
    if output == OutputVerbosity.MINIMAL:
        return ShowLevel.FAILURES_ONLY
    return ShowLevel.SHOW_ALL


@dataclass(frozen=True)
class InvocationRequest:
    """
    A single request from the editor.

    Attributes:
        script_path: Test script to run (required, non-empty)
        test_name: Name of the Describe/It block the editor clicked on
        line_number: Raw line number; only used when it holds an integer
        run_all: Run every test in the script
        output: Requested output verbosity. The CLI always requires it; library
            callers that leave it out get Normal, the runner's own default
        output_path: Export results to this file (new-generation runners only)
        minimum_version5: Prefer Pester 5 or later when several are installed
    """
    script_path: str
    test_name: Optional[str] = None
    line_number: Optional[str] = None
    run_all: bool = False
    output: OutputVerbosity = OutputVerbosity.NORMAL
    output_path: Optional[str] = None
    minimum_version5: bool = False

    def __post_init__(self):
        if not self.script_path or not str(self.script_path).strip():
            raise ValueError("script_path is required")
        if not isinstance(self.output, OutputVerbosity):
            object.__setattr__(self, "output", OutputVerbosity.parse(self.output))

    @property
    def line(self) -> Optional[int]:
        """The line number as an integer, or None when absent or invalid."""
        if self.line_number is None:
            return None
        match = _LINE_NUMBER_PATTERN.fullmatch(str(self.line_number).strip())
        if not match:
            return None
        return int(match.group(0))


def select_mode(request: InvocationRequest, runner: "ResolvedRunner") -> SelectionMode:
    """
    Pick the selection mode for a request. First match wins:

    1. run_all
    2. a valid line number, if the runner can filter by line
    3. a non-empty test name
    4. unfiltered fallback
    """
    if request.run_all:
        return SelectionMode.ALL
    if request.line is not None and runner.capabilities.line_filter:
        return SelectionMode.BY_LINE
    if request.test_name:
        return SelectionMode.BY_NAME
    return SelectionMode.UNFILTERED
