"""
Oracle Module for the Circuit Trap Solver

Pluggable access to the external puzzle. The solver only ever sees
per-move outcomes; the oracle owns the true grid.

Usage:
    from trapsolver.oracle import create_oracle

    oracle = create_oracle("simulated", size=3, seed=42)
    handle = oracle.open(timeout_sec=5.0)
    result = oracle.submit(handle, Move.RIGHT, timeout_sec=1.0)
    handle = result.handle
"""

# Public API - Result types
from .result import InteractionHandle, SubmitResult

# Public API - Base class and errors
from .base import Oracle, OracleError, OracleUnavailable, OracleTimeout

# Public API - Factory functions
from .factory import (
    create_oracle,
    register_oracle,
    available_oracles,
)

# Public API - Simulator
from .simulated import SimulatedTrapOracle, random_path, MSG_SUCCESS, MSG_FAIL

__all__ = [
    # Result types
    "InteractionHandle",
    "SubmitResult",
    # Base class
    "Oracle",
    "OracleError",
    "OracleUnavailable",
    "OracleTimeout",
    # Factory
    "create_oracle",
    "register_oracle",
    "available_oracles",
    # Simulator
    "SimulatedTrapOracle",
    "random_path",
    "MSG_SUCCESS",
    "MSG_FAIL",
]
