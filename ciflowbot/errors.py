"""
Exceptions raised by CIFlowBot.
"""


class CIFlowBotError(Exception):
    """Base class for all bot errors."""


class MalformedPayloadError(CIFlowBotError):
    """A webhook payload is missing repository or pull request identity fields."""


class UnknownEventError(CIFlowBotError):
    """The webhook event kind is not one the bot handles."""


class UnknownStrategyError(CIFlowBotError):
    """No dispatch strategy is registered under the requested name."""


class PlatformAPIError(CIFlowBotError):
    """A call to the GitHub API failed."""

    def __init__(self, action: str, message: str):
        super().__init__(f"{action} failed: {message}")
        self.action = action
