"""
Strategy Factory Module - Name registry for solving strategies.
"""

import logging
from typing import Any, Dict, List, Optional, Type

from .base import SolverStrategy

logger = logging.getLogger(__name__)

# name -> strategy class, filled by @register_strategy at import time
_STRATEGIES: Dict[str, Type[SolverStrategy]] = {}

DEFAULT_STRATEGY = "library"


def register_strategy(cls: Type[SolverStrategy]) -> Type[SolverStrategy]:
    """
    Class decorator that makes a strategy creatable by name.

    Usage:
        @register_strategy
        class SpiralStrategy(SolverStrategy):
            name = "spiral"
            ...

    Raises:
        ValueError: If the class keeps the base name or the name is taken
            by a different class
    """
    key = cls.name.lower()
    if key == SolverStrategy.name:
        raise ValueError(f"{cls.__name__} must define its own name")
    existing = _STRATEGIES.get(key)
    if existing is not None and existing is not cls:
        raise ValueError(f"Strategy name '{key}' already used by {existing.__name__}")
    _STRATEGIES[key] = cls
    return cls


def create_strategy(name: Optional[str] = None, **kwargs: Any) -> SolverStrategy:
    """
    Create a strategy by name.

    Each call returns a new instance with its own belief store, so keep
    the instance around for as long as the learning should last.

    Args:
        name: "coordinate", "library" or any registered name
            (None selects the default strategy)
        **kwargs: Constructor arguments, e.g. policy=SearchPolicy(...),
            store=LearnedPathStore() or library=PathLibrary(...)

    Returns:
        Strategy instance

    Raises:
        ValueError: If no strategy is registered under the name
    """
    key = (name or get_default_strategy_name()).lower()
    strategy_class = _STRATEGIES.get(key)
    if strategy_class is None:
        raise ValueError(f"Unknown strategy: {name}. Available: {', '.join(_STRATEGIES)}")

    logger.debug(f"Creating strategy '{key}' ({strategy_class.__name__})")
    return strategy_class(**kwargs)


def get_strategy_names() -> List[str]:
    """Registered strategy names, in registration order."""
    return list(_STRATEGIES)


def get_strategy_info() -> List[Dict[str, Any]]:
    """
    Describe every registered strategy (for CLI help and logs).

    Returns:
        List of dicts with 'name', 'description' and 'default' keys
    """
    default = get_default_strategy_name()
    return [
        {"name": key, "description": cls.description, "default": key == default}
        for key, cls in _STRATEGIES.items()
    ]


def get_default_strategy_name() -> str:
    """The library strategy when registered, else the first one ("" if none)."""
    if DEFAULT_STRATEGY in _STRATEGIES:
        return DEFAULT_STRATEGY
    return next(iter(_STRATEGIES), "")
