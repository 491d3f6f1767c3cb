"""pester-shim - version-adaptive Pester invocation for editor integrations."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("pester-shim")
except PackageNotFoundError:
    # Package not installed (development mode without editable install)
    __version__ = "0.1.0"

from pester_shim.core.dispatcher import DispatchResult, Dispatcher
from pester_shim.core.request import InvocationRequest, OutputVerbosity, SelectionMode

__all__ = [
    "__version__",
    "DispatchResult",
    "Dispatcher",
    "InvocationRequest",
    "OutputVerbosity",
    "SelectionMode",
]
