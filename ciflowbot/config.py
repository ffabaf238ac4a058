"""
Policy constants and credentials for CIFlowBot.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

STRATEGY_ADD_DEFAULT_LABELS = "strategy_add_default_labels"


@dataclass(frozen=True)
class BotConfig:
    """
    Fixed at deploy time. A single instance is shared read-only by every
    delivery handled by the process.
    """

    allowed_commands: frozenset[str] = frozenset({"ciflow"})
    bot_app_name: str = "pytorchbot"
    bot_assignee: str = "pytorchbot"
    label_prefix: str = "ciflow/"
    default_label: str = "ciflow/default"
    # slow rollout to a specific group of users first
    rollout_users: frozenset[str] = frozenset({"zhouzhuojie"})
    dispatch_strategies: tuple[str, ...] = (STRATEGY_ADD_DEFAULT_LABELS,)


DEFAULT_CONFIG = BotConfig()


@dataclass(frozen=True)
class Credentials:
    app_id: str | None = None
    private_key: str | None = None
    token: str | None = None
    webhook_secret: str | None = None


def _read_private_key(value: str | None) -> str | None:
    # Accept either the PEM content itself or a path to it
    if value and os.path.isfile(value):
        with open(value) as f:
            return f.read()
    return value


def load_credentials() -> Credentials:
    """Read credentials from the environment, loading .env if present."""
    load_dotenv()
    return Credentials(
        app_id=os.getenv("CIFLOW_BOT_APP_ID"),
        private_key=_read_private_key(os.getenv("CIFLOW_BOT_PRIVATE_KEY")),
        token=os.getenv("GITHUB_TOKEN"),
        webhook_secret=os.getenv("CIFLOW_BOT_WEBHOOK_SECRET"),
    )
