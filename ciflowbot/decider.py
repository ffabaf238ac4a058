"""
DispatchDecider: decides the ciflow labels for one webhook delivery and applies them.

The bot dispatches labels and signals GitHub Actions workflows to run. Workflows
in the target repository build their `if` conditions on the `ciflow/` labels;
the assign/unassign pair is what wakes them up.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

import structlog

from .config import DEFAULT_CONFIG, BotConfig
from .errors import UnknownStrategyError
from .events import WebhookEvent, extract_event
from .policy import AuthorizationPolicy, PRAuthorPolicy, in_rollout
from .strategies import get_strategy

logger = structlog.get_logger()


class Platform(Protocol):
    def add_assignees(
        self, owner: str, repo: str, issue_number: int, assignees: list[str]
    ) -> None: ...

    def remove_assignees(
        self, owner: str, repo: str, issue_number: int, assignees: list[str]
    ) -> None: ...

    def remove_label(self, owner: str, repo: str, issue_number: int, name: str) -> None: ...

    def add_labels(self, owner: str, repo: str, issue_number: int, labels: list[str]) -> None: ...


class DispatchState(str, Enum):
    REJECTED = "rejected"
    GATED_OUT = "gated_out"
    DONE = "done"


@dataclass(frozen=True)
class DispatchDecision:
    labels: list[str]
    strategies: list[str]
    labels_to_add: list[str]
    labels_to_delete: list[str]


class DispatchDecider:
    def __init__(
        self,
        event: WebhookEvent,
        platform: Platform,
        config: BotConfig = DEFAULT_CONFIG,
        policy: AuthorizationPolicy | None = None,
    ):
        self.event = event
        self.platform = platform
        self.config = config
        self.policy = policy or PRAuthorPolicy(config)
        self.dispatch_labels: list[str] = []
        self.dispatch_strategies: list[str] = list(config.dispatch_strategies)
        self.decision: DispatchDecision | None = None
        self.log = logger.bind(
            event_name=event.kind,
            owner=event.owner,
            repo=event.repo,
            pr_number=event.pr_number,
        )

    def _state(self) -> dict[str, Any]:
        return {
            "dispatch_labels": self.dispatch_labels,
            "dispatch_strategies": self.dispatch_strategies,
            "pr_labels": self.event.pr_labels,
        }

    def valid(self) -> bool:
        return self.policy.is_authorized(self.event)

    def rollout(self) -> bool:
        return in_rollout(self.event, self.config)

    def run_strategies(self) -> list[str]:
        """Apply every configured strategy in order to the dispatch labels."""
        for name in self.dispatch_strategies:
            try:
                strategy = get_strategy(name)
            except UnknownStrategyError:
                self.log.error("Unknown dispatch strategy", strategy_name=name)
                continue
            self.dispatch_labels = strategy(self.dispatch_labels, self.event, self.config)
        return self.dispatch_labels

    def set_labels(self) -> DispatchDecision:
        """
        Converge the PR's ciflow labels to the dispatch labels.

        Removals are issued one at a time, then all additions in a single
        call. Only labels under the ciflow prefix are ever considered, so
        other labels on the PR are left alone.
        """
        event = self.event
        labels = list(
            dict.fromkeys(
                label
                for label in self.dispatch_labels
                if label.startswith(self.config.label_prefix)
            )
        )
        labels_to_delete = [label for label in event.pr_labels if label not in labels]
        labels_to_add = [label for label in labels if label not in event.pr_labels]

        for label in labels_to_delete:
            self.platform.remove_label(event.owner, event.repo, event.pr_number, label)
        self.platform.add_labels(event.owner, event.repo, event.pr_number, labels_to_add)

        self.dispatch_labels = labels
        self.decision = DispatchDecision(
            labels=labels,
            strategies=list(self.dispatch_strategies),
            labels_to_add=labels_to_add,
            labels_to_delete=labels_to_delete,
        )
        return self.decision

    def signal_github(self) -> None:
        """
        Assign then unassign the bot so workflows listening for assignee
        changes pick up the new labels. The unassign must only be sent once
        the assign has completed.
        """
        event = self.event
        assignees = [self.config.bot_assignee]
        self.platform.add_assignees(event.owner, event.repo, event.pr_number, assignees)
        self.platform.remove_assignees(event.owner, event.repo, event.pr_number, assignees)

    def dispatch(self) -> None:
        self.run_strategies()
        self.set_labels()
        self.signal_github()
        self.log.info("ciflow dispatch success!", **self._state())

    def handle(self) -> DispatchState:
        self.log.info("ciflow dispatch started!", **self._state())
        if not self.valid():
            return DispatchState.REJECTED
        if not self.rollout():
            return DispatchState.GATED_OUT
        self.dispatch()
        return DispatchState.DONE


def handle_event(
    kind: str,
    payload: dict[str, Any],
    platform: Platform,
    config: BotConfig = DEFAULT_CONFIG,
    policy: AuthorizationPolicy | None = None,
) -> tuple[DispatchDecider, DispatchState]:
    """Extract the event from a payload and run the handler on it."""
    event = extract_event(kind, payload, config)
    decider = DispatchDecider(event, platform, config=config, policy=policy)
    return decider, decider.handle()
