"""
CLI Entrypoint for CIFlowBot.
"""

import argparse
import json
import os
import sys

from dotenv import load_dotenv
from github.GithubException import GithubException

from .auth import get_github_client
from .config import load_credentials
from .decider import handle_event
from .errors import MalformedPayloadError, PlatformAPIError
from .log import configure_logging
from .platform_client import GitHubPlatform
from .server import create_app

# Load .env if present
load_dotenv()


def serve(args) -> None:
    app = create_app()
    app.run(host=args.host, port=args.port)


def replay(args) -> None:
    """Handle one stored webhook delivery, e.g. after a failed delivery."""
    with open(args.payload) as f:
        payload = json.load(f)

    repo_name = args.repo or (payload.get("repository") or {}).get("full_name")
    credentials = load_credentials()

    try:
        gh = get_github_client(
            app_id=credentials.app_id,
            private_key=credentials.private_key,
            token=credentials.token,
            installation_id=(payload.get("installation") or {}).get("id"),
            repo_name=repo_name,
        )
    except (GithubException, ValueError) as e:
        print(f"Authentication Error: {e}")
        sys.exit(1)

    try:
        _, state = handle_event(args.event, payload, GitHubPlatform(gh))
    except MalformedPayloadError as e:
        print(f"Malformed Payload: {e}")
        sys.exit(1)
    except PlatformAPIError as e:
        print(f"Dispatch Error: {e}")
        sys.exit(1)
    print(f"Dispatch finished: {state.value}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="CIFlowBot GitHub Bot")
    parser.add_argument("--log-level", default=os.getenv("CIFLOW_BOT_LOG_LEVEL", "INFO"))
    parser.add_argument(
        "--log-format", choices=["json", "console"], default="json", help="Log renderer"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the webhook server")
    serve_parser.add_argument("--host", default="0.0.0.0")
    serve_parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "3000")))
    serve_parser.set_defaults(func=serve)

    replay_parser = subparsers.add_parser("replay", help="Handle a stored webhook payload")
    replay_parser.add_argument(
        "--event", required=True, choices=["pull_request", "issue_comment"]
    )
    replay_parser.add_argument("--payload", required=True, help="Path to the payload JSON")
    replay_parser.add_argument("--repo", help="Repository name (e.g. pytorch/pytorch)")
    replay_parser.set_defaults(func=replay)

    args = parser.parse_args(argv)
    configure_logging(args.log_level, json=args.log_format == "json")
    args.func(args)


if __name__ == "__main__":
    main()
