"""
Oracle Result Dataclasses

Shared data structures for oracle interactions.
"""

import time
from dataclasses import dataclass, field
from typing import Optional

from ..solver.outcome import Outcome


@dataclass(frozen=True)
class InteractionHandle:
    """
    Opaque reference to one open puzzle surface.

    The oracle may replace the handle after every submission; callers
    always continue with the handle returned by the latest submit().
    """
    serial: int
    opened_at: float = field(default_factory=time.perf_counter)


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of one submitted move."""
    outcome: Outcome
    handle: Optional[InteractionHandle] = None  # Renewed handle, None if the surface is gone
    message: Optional[str] = None
