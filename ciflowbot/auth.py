"""
Authentication helpers for CIFlowBot.
"""

import os

import structlog
from github import Github, GithubIntegration
from github.Auth import AppAuth, Token
from github.GithubException import GithubException
from github.GithubRetry import GithubRetry

logger = structlog.get_logger()

# Transport-level retries; label and assignee calls are idempotent.
RETRY_TOTAL = 3


def _retry() -> GithubRetry:
    return GithubRetry(total=RETRY_TOTAL)


def get_app_auth(app_id: str, private_key: str) -> GithubIntegration:
    """
    Returns a GithubIntegration object authenticated as an App.
    """
    if not app_id or not private_key:
        raise ValueError("CIFLOW_BOT_APP_ID and CIFLOW_BOT_PRIVATE_KEY are required for App authentication")

    auth = AppAuth(app_id=app_id, private_key=private_key)
    return GithubIntegration(auth=auth, retry=_retry())


def get_installation_client(
    app_id: str,
    private_key: str,
    installation_id: int | None = None,
    repo_name: str | None = None,
) -> Github:
    """
    Returns a Github client authenticated as one App installation.

    Webhook deliveries carry the installation id; when it is not known
    (e.g. replaying a stored payload) it is looked up from the repository.
    """
    integration = get_app_auth(app_id, private_key)

    if installation_id is None:
        if not repo_name:
            raise ValueError("Either installation_id or repo_name is required")
        owner, repo = repo_name.split("/")
        try:
            installation_id = integration.get_repo_installation(owner, repo).id
        except GithubException as e:
            logger.error("No installation found for repo", repo=repo_name, error=str(e))
            raise

    return integration.get_github_for_installation(installation_id)


def get_github_client(
    app_id: str | None = None,
    private_key: str | None = None,
    token: str | None = None,
    installation_id: int | None = None,
    repo_name: str | None = None,
) -> Github:
    """
    Factory function to get the best available Github client.
    Prioritizes App authentication if credentials are provided.
    Fallbacks to Token auth.
    """
    # 1. Try App Auth if credentials exist and we can find the installation
    if app_id and private_key and (installation_id is not None or repo_name):
        try:
            return get_installation_client(app_id, private_key, installation_id, repo_name)
        except (GithubException, ValueError) as e:
            logger.error("Failed to authenticate as App, falling back to token", error=str(e))

    # 2. Try Token Auth
    if token:
        return Github(auth=Token(token), retry=_retry())

    # 3. Fallback to extracting token from Environment if not passed explicitly
    env_token = os.getenv("GITHUB_TOKEN")
    if env_token:
        return Github(auth=Token(env_token), retry=_retry())

    raise ValueError("No valid credentials found (CIFLOW_BOT_APP_ID/CIFLOW_BOT_PRIVATE_KEY or GITHUB_TOKEN)")
