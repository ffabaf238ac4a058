"""
Shape shared by all dispatch strategies.
"""

from collections.abc import Callable

from ..config import BotConfig
from ..events import WebhookEvent

# A strategy receives the labels accumulated so far and returns the new
# accumulation. Strategies run left to right, each seeing the output of the
# previous one, and must not mutate their input.
Strategy = Callable[[list[str], WebhookEvent, BotConfig], list[str]]
