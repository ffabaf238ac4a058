"""
Flask Server Entrypoint for CIFlowBot Webhooks.
"""

import hashlib
import hmac
from collections.abc import Callable

import structlog
from flask import Flask, jsonify, request
from github import Github

from .auth import get_github_client
from .config import DEFAULT_CONFIG, BotConfig, Credentials, load_credentials
from .decider import DispatchDecider
from .errors import MalformedPayloadError, PlatformAPIError
from .events import extract_event
from .platform_client import GitHubPlatform

logger = structlog.get_logger()

# (event, action) pairs that trigger a dispatch
SUBSCRIPTIONS = {
    ("pull_request", "opened"),
    ("pull_request", "reopened"),
    ("pull_request", "synchronize"),
    ("issue_comment", "created"),
    ("issue_comment", "edited"),
}

ClientFactory = Callable[[int | None, str], Github]


def verify_signature(secret: str, body: bytes, signature: str | None) -> bool:
    """Check an X-Hub-Signature-256 header against the raw request body."""
    if not signature:
        return False
    mac = hmac.new(secret.encode(), msg=body, digestmod=hashlib.sha256)
    return hmac.compare_digest(f"sha256={mac.hexdigest()}", signature)


def _default_client_factory(credentials: Credentials) -> ClientFactory:
    def factory(installation_id: int | None, repo_name: str) -> Github:
        return get_github_client(
            app_id=credentials.app_id,
            private_key=credentials.private_key,
            token=credentials.token,
            installation_id=installation_id,
            repo_name=repo_name,
        )

    return factory


def create_app(
    config: BotConfig = DEFAULT_CONFIG,
    credentials: Credentials | None = None,
    client_factory: ClientFactory | None = None,
) -> Flask:
    credentials = credentials or load_credentials()
    client_factory = client_factory or _default_client_factory(credentials)

    if not credentials.webhook_secret:
        logger.warning("CIFLOW_BOT_WEBHOOK_SECRET is not set, signature verification disabled")

    app = Flask(__name__)

    @app.route("/", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    @app.route("/webhook", methods=["POST"])
    def webhook():
        """
        Handle GitHub Webhooks.
        """
        delivery = request.headers.get("X-GitHub-Delivery")
        if credentials.webhook_secret and not verify_signature(
            credentials.webhook_secret,
            request.get_data(),
            request.headers.get("X-Hub-Signature-256"),
        ):
            logger.error("Invalid webhook signature", delivery=delivery)
            return jsonify({"error": "invalid signature"}), 401

        event = request.headers.get("X-GitHub-Event", "ping")
        if event == "ping":
            return jsonify({"status": "pong"})

        payload = request.get_json(silent=True) or {}
        action = payload.get("action")
        if (event, action) not in SUBSCRIPTIONS:
            return jsonify({"status": "ignored", "event": event, "action": action})

        try:
            webhook_event = extract_event(event, payload, config)
        except MalformedPayloadError as e:
            logger.error("Malformed webhook payload", delivery=delivery, error=str(e))
            return jsonify({"error": str(e)}), 400

        # Authenticate only once the handler actually touches GitHub
        platform = GitHubPlatform(
            connect=lambda: client_factory(
                webhook_event.installation_id, webhook_event.full_repo_name
            )
        )
        decider = DispatchDecider(webhook_event, platform, config=config)
        try:
            state = decider.handle()
        except PlatformAPIError as e:
            logger.error(
                "ciflow dispatch failed", delivery=delivery, event_name=event, error=str(e)
            )
            return jsonify({"error": str(e)}), 502

        body = {"status": state.value, "event": event, "action": webhook_event.action}
        if decider.decision is not None:
            body["dispatch_labels"] = decider.decision.labels
        return jsonify(body)

    return app
