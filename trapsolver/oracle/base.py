"""
Oracle Base Interface

Abstract base class defining the contract of the external puzzle oracle.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..solver.move import Move
from .result import InteractionHandle, SubmitResult


class OracleError(Exception):
    """Base exception for oracle errors."""
    pass


class OracleUnavailable(OracleError):
    """No puzzle instance could be opened."""
    pass


class OracleTimeout(OracleError):
    """The oracle did not answer within the bounded wait."""
    pass


class Oracle(ABC):
    """
    Abstract base class for puzzle oracles.

    The oracle alone knows the true grid and path; it only ever reports
    per-move outcomes. Implementations must honour the timeouts they are
    given, either returning INTERACTION_LOST or raising OracleTimeout.
    """

    @abstractmethod
    def open(self, timeout_sec: float) -> Optional[InteractionHandle]:
        """
        Begin a puzzle attempt.

        Args:
            timeout_sec: Maximum time to wait for the puzzle surface

        Returns:
            Handle for the attempt, or None if nothing could be opened
        """
        pass

    @abstractmethod
    def submit(self, handle: Optional[InteractionHandle], move: Move,
               timeout_sec: float) -> SubmitResult:
        """
        Send one move.

        Args:
            handle: Handle from open() or the previous submit()
            move: Move to send
            timeout_sec: Maximum time to wait for the outcome

        Returns:
            SubmitResult with the outcome and a possibly renewed handle
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Oracle identifier.

        Returns:
            String name identifying this oracle type (e.g., "simulated")
        """
        pass

    def close(self, handle: Optional[InteractionHandle]) -> None:
        """
        Release an attempt's surface.

        Default implementation does nothing.
        """
        pass

    def configure(self, **kwargs) -> None:
        """
        Configure oracle parameters.

        Override in subclasses to support runtime configuration.
        Default implementation does nothing.

        Args:
            **kwargs: Oracle-specific configuration options
        """
        pass
