"""
Strategies Package - Concrete strategy implementations.

Import this module to register all built-in strategies.
"""

from .coordinate_search import CoordinateSearchStrategy
from .candidate_elimination import CandidateEliminationStrategy

__all__ = [
    "CoordinateSearchStrategy",
    "CandidateEliminationStrategy",
]
