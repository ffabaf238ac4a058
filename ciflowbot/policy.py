"""
Who may change the ciflow state of a pull request.
"""

from abc import ABC, abstractmethod

import structlog

from .config import DEFAULT_CONFIG, BotConfig
from .errors import UnknownEventError
from .events import EventKind, WebhookEvent

logger = structlog.get_logger()


class AuthorizationPolicy(ABC):
    """
    Every policy must implement `is_authorized`. The decider only asks
    whether an event may mutate dispatch state, never how that is decided.
    """

    @abstractmethod
    def is_authorized(self, event: WebhookEvent) -> bool:
        """Return True if the event may change the PR's ciflow labels. Never raises."""
        ...


class PRAuthorPolicy(AuthorizationPolicy):
    """Only the PR author may trigger ciflow, and only with an allowed command."""

    def __init__(self, config: BotConfig = DEFAULT_CONFIG):
        self.config = config

    def is_authorized(self, event: WebhookEvent) -> bool:
        try:
            kind = EventKind.parse(event.kind)
        except UnknownEventError as e:
            logger.error("Unknown webhook event", event_name=event.kind, error=str(e))
            return False

        if kind is EventKind.ISSUE_COMMENT:
            if not event.comment_author:
                logger.error(
                    "Empty comment author", event_name=event.kind, pr_number=event.pr_number
                )
                return False

            # TODO: relax to any member with write permission on the repository
            if event.comment_author != event.pr_author:
                return False

            if event.command is None or event.command.name not in self.config.allowed_commands:
                return False

        return True


def in_rollout(event: WebhookEvent, config: BotConfig = DEFAULT_CONFIG) -> bool:
    """Return True if the PR author is on the rollout allow-list."""
    return event.pr_author in config.rollout_users
