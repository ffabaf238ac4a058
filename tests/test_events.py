import unittest

from payloads import comment_payload, pr_payload

from ciflowbot.config import DEFAULT_CONFIG
from ciflowbot.errors import MalformedPayloadError, UnknownEventError
from ciflowbot.events import Command, EventKind, extract_event, parse_comment


class TestParseComment(unittest.TestCase):
    def test_command_with_args(self):
        """A mention anywhere on the line is picked up with its arguments."""
        self.assertEqual(
            parse_comment("hey @pytorchbot ciflow default", "pytorchbot"),
            Command(name="ciflow", args=["default"]),
        )

    def test_multiple_args_split_on_single_spaces(self):
        command = parse_comment("@pytorchbot ciflow add linux  win", "pytorchbot")
        self.assertEqual(command.name, "ciflow")
        self.assertEqual(command.args, ["add", "linux", "", "win"])

    def test_no_mention(self):
        self.assertIsNone(parse_comment("no mention here", "pytorchbot"))

    def test_command_without_args_yields_single_empty_arg(self):
        self.assertEqual(
            parse_comment("@pytorchbot ciflow", "pytorchbot"),
            Command(name="ciflow", args=[""]),
        )

    def test_mention_is_case_sensitive(self):
        self.assertIsNone(parse_comment("@PyTorchBot ciflow default", "pytorchbot"))

    def test_command_name_is_ascii_only(self):
        """Non-ASCII letters end the command name and spill into the arguments."""
        self.assertEqual(
            parse_comment("@pytorchbot ciflowé", "pytorchbot"),
            Command(name="ciflow", args=["é"]),
        )

    def test_mention_without_command(self):
        self.assertIsNone(parse_comment("thanks @pytorchbot", "pytorchbot"))

    def test_multiline_body_does_not_match(self):
        """The pattern does not span lines, so multi-line bodies never address the bot."""
        self.assertIsNone(parse_comment("@pytorchbot ciflow default\nthanks!", "pytorchbot"))

    def test_empty_or_missing_body(self):
        self.assertIsNone(parse_comment("", "pytorchbot"))
        self.assertIsNone(parse_comment(None, "pytorchbot"))


class TestExtractEvent(unittest.TestCase):
    def test_pull_request_event(self):
        payload = pr_payload(author="alice", labels=["ciflow/default", "module: ci"])
        event = extract_event("pull_request", payload)

        self.assertEqual(event.kind, "pull_request")
        self.assertEqual(event.action, "opened")
        self.assertEqual(event.owner, "pytorch")
        self.assertEqual(event.repo, "pytorch")
        self.assertEqual(event.full_repo_name, "pytorch/pytorch")
        self.assertEqual(event.pr_number, 42)
        self.assertEqual(event.pr_author, "alice")
        self.assertEqual(event.installation_id, 7)
        self.assertIsNone(event.comment_author)
        self.assertIsNone(event.command)

    def test_only_namespaced_labels_are_kept(self):
        payload = pr_payload(labels=["bug", "ciflow/default", "ciflowx", "ciflow/linux"])
        event = extract_event("pull_request", payload)
        self.assertEqual(event.pr_labels, ["ciflow/default", "ciflow/linux"])

    def test_issue_comment_event(self):
        payload = comment_payload("@pytorchbot ciflow default", commenter="bob", author="alice")
        event = extract_event("issue_comment", payload)

        self.assertEqual(event.pr_author, "alice")
        self.assertEqual(event.comment_author, "bob")
        self.assertEqual(event.comment_body, "@pytorchbot ciflow default")
        self.assertEqual(event.command, Command(name="ciflow", args=["default"]))

    def test_missing_labels_is_empty(self):
        payload = pr_payload()
        del payload["pull_request"]["labels"]
        self.assertEqual(extract_event("pull_request", payload).pr_labels, [])

    def test_missing_repository_is_malformed(self):
        payload = pr_payload()
        del payload["repository"]
        with self.assertRaises(MalformedPayloadError) as ctx:
            extract_event("pull_request", payload)
        self.assertIn("repository.owner.login", str(ctx.exception))

    def test_missing_pull_request_is_malformed(self):
        payload = pr_payload()
        del payload["pull_request"]
        with self.assertRaises(MalformedPayloadError):
            extract_event("pull_request", payload)

    def test_missing_author_is_malformed(self):
        payload = comment_payload("@pytorchbot ciflow default")
        payload["issue"]["user"] = None
        with self.assertRaises(MalformedPayloadError) as ctx:
            extract_event("issue_comment", payload)
        self.assertIn("user.login", str(ctx.exception))

    def test_uses_configured_prefix_and_bot_name(self):
        from dataclasses import replace

        config = replace(DEFAULT_CONFIG, label_prefix="ci/", bot_app_name="mybot")
        payload = comment_payload("@mybot ciflow go", labels=["ci/a", "ciflow/b"])
        event = extract_event("issue_comment", payload, config)
        self.assertEqual(event.pr_labels, ["ci/a"])
        self.assertEqual(event.command, Command(name="ciflow", args=["go"]))


class TestEventKind(unittest.TestCase):
    def test_known_kinds(self):
        self.assertIs(EventKind.parse("pull_request"), EventKind.PULL_REQUEST)
        self.assertIs(EventKind.parse("issue_comment"), EventKind.ISSUE_COMMENT)

    def test_unknown_kind(self):
        with self.assertRaises(UnknownEventError):
            EventKind.parse("push")


if __name__ == "__main__":
    unittest.main()
