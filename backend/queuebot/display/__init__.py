"""Queue display rendering and synchronization."""

from .controls import JoinLeaveView, control_for
from .document import QueueDocumentBuilder, RenderContext, RenderedDocument
from .durations import DurationFormatter
from .platform import Lookup, LookupStatus, PlatformClient
from .ranks import classify
from .registry import DisplayTargetRegistry
from .synchronizer import DisplaySynchronizer, RefreshResult
from .validator import QueueValidator

__all__ = [
    "DisplaySynchronizer",
    "DisplayTargetRegistry",
    "DurationFormatter",
    "JoinLeaveView",
    "Lookup",
    "LookupStatus",
    "PlatformClient",
    "QueueDocumentBuilder",
    "QueueValidator",
    "RefreshResult",
    "RenderContext",
    "RenderedDocument",
    "classify",
    "control_for",
]
