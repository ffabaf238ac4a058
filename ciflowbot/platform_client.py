"""
The four GitHub calls CIFlowBot makes, behind one small client.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager

import requests
from github import Github
from github.GithubException import GithubException
from github.Issue import Issue

from .errors import PlatformAPIError


@contextmanager
def _translate_errors(action: str) -> Iterator[None]:
    try:
        yield
    except GithubException as e:
        raise PlatformAPIError(action, f"{e.status} {e.data}") from e
    except requests.exceptions.RequestException as e:
        raise PlatformAPIError(action, str(e)) from e


class GitHubPlatform:
    """
    Label and assignee mutations on a pull request (addressed as an issue).

    One instance is created per delivery. Nothing is retried here beyond what
    the underlying Github client's retry policy does.

    Pass either a ready client as `gh` or a `connect` callable; the latter is
    only invoked on the first API call, so deliveries that never reach
    dispatch never authenticate.
    """

    def __init__(self, gh: Github | None = None, connect: Callable[[], Github] | None = None):
        if gh is None and connect is None:
            raise ValueError("Either gh or connect is required")
        self._gh = gh
        self._connect = connect
        self._issues: dict[tuple[str, str, int], Issue] = {}

    @property
    def gh(self) -> Github:
        if self._gh is None:
            try:
                self._gh = self._connect()
            except ValueError as e:
                raise PlatformAPIError("authenticate", str(e)) from e
        return self._gh

    def _issue(self, owner: str, repo: str, issue_number: int) -> Issue:
        key = (owner, repo, issue_number)
        if key not in self._issues:
            self._issues[key] = self.gh.get_repo(f"{owner}/{repo}", lazy=True).get_issue(
                issue_number
            )
        return self._issues[key]

    def add_assignees(self, owner: str, repo: str, issue_number: int, assignees: list[str]) -> None:
        with _translate_errors("add assignees"):
            self._issue(owner, repo, issue_number).add_to_assignees(*assignees)

    def remove_assignees(
        self, owner: str, repo: str, issue_number: int, assignees: list[str]
    ) -> None:
        with _translate_errors("remove assignees"):
            self._issue(owner, repo, issue_number).remove_from_assignees(*assignees)

    def remove_label(self, owner: str, repo: str, issue_number: int, name: str) -> None:
        with _translate_errors(f"remove label {name!r}"):
            self._issue(owner, repo, issue_number).remove_from_labels(name)

    def add_labels(self, owner: str, repo: str, issue_number: int, labels: list[str]) -> None:
        """Add labels in one call; an empty list makes no request."""
        if not labels:
            return
        with _translate_errors("add labels"):
            self._issue(owner, repo, issue_number).add_to_labels(*labels)
