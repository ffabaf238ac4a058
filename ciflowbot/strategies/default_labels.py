"""
Default-labels strategy: make sure every dispatched PR carries the default ciflow label.
"""

from ..config import BotConfig
from ..events import WebhookEvent


def strategy_add_default_labels(
    labels: list[str], event: WebhookEvent, config: BotConfig
) -> list[str]:
    """
    Seed from the PR's current ciflow labels when nothing has been accumulated
    yet, then put the default label in front. Duplicates are left in place;
    label reconciliation collapses them.
    """
    if not labels:
        labels = event.pr_labels
    return [config.default_label, *labels]
