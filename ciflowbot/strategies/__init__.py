"""
Dispatch strategy registry: maps strategy names to label transforms.

When adding a new strategy, add a new entry here.
"""

from ..config import STRATEGY_ADD_DEFAULT_LABELS
from ..errors import UnknownStrategyError
from .base import Strategy
from .default_labels import strategy_add_default_labels

STRATEGIES: dict[str, Strategy] = {
    STRATEGY_ADD_DEFAULT_LABELS: strategy_add_default_labels,
}


def get_strategy(name: str) -> Strategy:
    try:
        return STRATEGIES[name]
    except KeyError:
        raise UnknownStrategyError(f"Unknown dispatch strategy: {name!r}") from None
