"""
Turns raw GitHub webhook payloads into the fields CIFlowBot decides on.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .config import DEFAULT_CONFIG, BotConfig
from .errors import MalformedPayloadError, UnknownEventError


class EventKind(str, Enum):
    PULL_REQUEST = "pull_request"
    ISSUE_COMMENT = "issue_comment"

    @classmethod
    def parse(cls, name: str) -> "EventKind":
        try:
            return cls(name)
        except ValueError:
            raise UnknownEventError(f"Unknown webhook event: {name!r}") from None


@dataclass(frozen=True)
class Command:
    name: str
    args: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class WebhookEvent:
    kind: str
    owner: str
    repo: str
    pr_number: int
    pr_author: str
    pr_labels: list[str] = field(default_factory=list)
    action: str | None = None
    comment_author: str | None = None
    comment_body: str | None = None
    installation_id: int | None = None
    command: Command | None = None

    @property
    def full_repo_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_comment(body: str | None, bot_name: str) -> Command | None:
    """
    Parse ``@<bot_name> <command> <args...>`` out of a comment body.

    The pattern is anchored to the whole body, so only single-line comments
    can address the bot. Arguments are split on single spaces: a command
    with nothing after it yields ``[""]``.
    """
    if not body:
        return None
    # Command names are ASCII word characters only; whitespace stays Unicode-aware
    found = re.match(rf"^.*@{re.escape(bot_name)}\s+([A-Za-z0-9_]+)\s?(.*)\Z", body)
    if not found:
        return None
    return Command(name=found.group(1), args=found.group(2).split(" "))


def _get(payload: dict[str, Any] | None, *path: str) -> Any:
    value: Any = payload
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def extract_event(
    kind: str, payload: dict[str, Any], config: BotConfig = DEFAULT_CONFIG
) -> WebhookEvent:
    """
    Build a WebhookEvent from a delivery payload.

    Raises MalformedPayloadError when the repository owner/name or the pull
    request number/author is missing. Labels outside ``config.label_prefix``
    are dropped here; they are never touched on GitHub.
    """
    pr = _get(payload, "pull_request") or _get(payload, "issue")

    owner = _get(payload, "repository", "owner", "login")
    repo = _get(payload, "repository", "name")
    pr_number = _get(pr, "number")
    pr_author = _get(pr, "user", "login")

    missing = [
        name
        for name, value in (
            ("repository.owner.login", owner),
            ("repository.name", repo),
            ("number", pr_number),
            ("user.login", pr_author),
        )
        if value is None
    ]
    if missing:
        raise MalformedPayloadError(
            f"{kind} payload is missing required fields: {', '.join(missing)}"
        )

    pr_labels = [
        label["name"]
        for label in (pr.get("labels") or [])
        if label.get("name", "").startswith(config.label_prefix)
    ]

    comment_body = _get(payload, "comment", "body")

    return WebhookEvent(
        kind=kind,
        action=payload.get("action"),
        owner=owner,
        repo=repo,
        pr_number=pr_number,
        pr_author=pr_author,
        pr_labels=pr_labels,
        comment_author=_get(payload, "comment", "user", "login"),
        comment_body=comment_body,
        installation_id=_get(payload, "installation", "id"),
        command=parse_comment(comment_body, config.bot_app_name),
    )
