from __future__ import annotations


class Gmail2LineError(Exception):
    """Base class for every error raised by gmail2line."""


class ConfigError(Gmail2LineError):
    """Configuration or credentials could not be loaded."""


class NoMatchError(Gmail2LineError):
    """The mailbox query matched nothing. Expected, not a failure."""


class ListError(Gmail2LineError):
    """Listing candidate messages failed (auth, network, API)."""


class FetchError(Gmail2LineError):
    """A single message could not be retrieved."""

    def __init__(self, message_id: str, reason: str):
        super().__init__(f"message_id={message_id}: {reason}")
        self.message_id = message_id


class DecodeError(FetchError):
    """A single message was retrieved but its body could not be decoded."""


class AcknowledgeError(Gmail2LineError):
    """Clearing the unread flag on a message failed."""

    def __init__(self, message_id: str, reason: str):
        super().__init__(f"message_id={message_id}: {reason}")
        self.message_id = message_id


class SinkError(Gmail2LineError):
    """Pushing the forward batch to the chat service failed."""
