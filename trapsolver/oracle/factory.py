"""
Oracle Factory

Factory for creating oracle instances.
"""

import importlib
from typing import Dict, List, Type, Union

from .base import Oracle


# Registry of available oracles ("module.Class" paths are loaded lazily)
_ORACLE_REGISTRY: Dict[str, Union[str, Type[Oracle]]] = {
    "simulated": "simulated.SimulatedTrapOracle",
}

# Cache for loaded oracle classes
_ORACLE_CACHE: Dict[str, Type[Oracle]] = {}


def _load_oracle_class(oracle_type: str) -> Type[Oracle]:
    """Lazily load an oracle class by type."""
    if oracle_type in _ORACLE_CACHE:
        return _ORACLE_CACHE[oracle_type]

    entry = _ORACLE_REGISTRY[oracle_type]
    if isinstance(entry, str):
        module_name, class_name = entry.rsplit(".", 1)
        module = importlib.import_module(f".{module_name}", package=__package__)
        oracle_class = getattr(module, class_name)
    else:
        oracle_class = entry

    _ORACLE_CACHE[oracle_type] = oracle_class
    return oracle_class


def create_oracle(oracle_type: str = "simulated", **config) -> Oracle:
    """
    Create an oracle by type.

    Args:
        oracle_type: Oracle type identifier. Available types:
            - "simulated" (default): in-process trap simulator
        **config: Constructor arguments, e.g. for "simulated":
            - size / sizes: grid size(s) of the hidden puzzles
            - path_source: "library" or "random"
            - seed: random seed

    Returns:
        Oracle instance

    Raises:
        ValueError: If oracle_type is not recognized

    Example:
        oracle = create_oracle("simulated", size=4, seed=1)
        handle = oracle.open(timeout_sec=5.0)
    """
    if oracle_type not in _ORACLE_REGISTRY:
        available = ", ".join(_ORACLE_REGISTRY.keys())
        raise ValueError(f"Unknown oracle type: {oracle_type}. Available: {available}")

    oracle_class = _load_oracle_class(oracle_type)
    return oracle_class(**config)


def register_oracle(name: str, oracle_class: type) -> None:
    """
    Register a custom oracle type.

    Args:
        name: Oracle type identifier
        oracle_class: Oracle subclass

    Example:
        from trapsolver.oracle import register_oracle, Oracle

        class GameClientOracle(Oracle):
            ...

        register_oracle("game", GameClientOracle)
    """
    if not issubclass(oracle_class, Oracle):
        raise TypeError(f"{oracle_class} must be a subclass of Oracle")
    _ORACLE_REGISTRY[name] = oracle_class
    _ORACLE_CACHE.pop(name, None)


def available_oracles() -> List[str]:
    """
    List available oracle types.

    Returns:
        List of registered oracle type names
    """
    return list(_ORACLE_REGISTRY.keys())
