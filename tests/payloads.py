"""
Builders for GitHub webhook payloads used across the test suite.
"""


def _labels(names):
    return [{"name": name} for name in names or []]


def pr_payload(author="alice", labels=None, action="opened", number=42, installation_id=7):
    return {
        "action": action,
        "number": number,
        "pull_request": {
            "number": number,
            "user": {"login": author},
            "labels": _labels(labels),
        },
        "repository": {
            "name": "pytorch",
            "full_name": "pytorch/pytorch",
            "owner": {"login": "pytorch"},
        },
        "installation": {"id": installation_id},
    }


def comment_payload(
    body,
    commenter="alice",
    author="alice",
    labels=None,
    action="created",
    number=42,
    installation_id=7,
):
    return {
        "action": action,
        "issue": {
            "number": number,
            "user": {"login": author},
            "labels": _labels(labels),
            "pull_request": {"url": f"https://api.github.com/repos/pytorch/pytorch/pulls/{number}"},
        },
        "comment": {"user": {"login": commenter}, "body": body},
        "repository": {
            "name": "pytorch",
            "full_name": "pytorch/pytorch",
            "owner": {"login": "pytorch"},
        },
        "installation": {"id": installation_id},
    }
