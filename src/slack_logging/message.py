"""
Payloads and the messages exchanged with the background worker
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional

from .config import SlackConfig


@dataclass(frozen=True)
class SlackPayload:
    """A fully rendered message plus its routing data"""

    channel: str
    username: str
    text: str
    webhook_url: str
    icon_emoji: Optional[str] = None

    @classmethod
    def from_config(cls, config: SlackConfig, text: str) -> "SlackPayload":
        return cls(
            channel=config.channel_name,
            username=config.username,
            text=text,
            webhook_url=config.webhook_url,
            icon_emoji=config.icon_emoji,
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON body of the webhook request"""
        return {
            "channel": self.channel,
            "username": self.username,
            "text": self.text,
            "icon_emoji": self.icon_emoji,
        }


class MessageKind(Enum):
    DATA = "data"
    SHUTDOWN = "shutdown"


@dataclass(frozen=True)
class WorkerMessage:
    """An entry of the worker queue: a payload to deliver, or a stop request"""

    kind: MessageKind
    payload: Optional[SlackPayload] = None

    SHUTDOWN: ClassVar["WorkerMessage"]

    @classmethod
    def data(cls, payload: SlackPayload) -> "WorkerMessage":
        return cls(MessageKind.DATA, payload)

    @property
    def is_shutdown(self) -> bool:
        return self.kind is MessageKind.SHUTDOWN


WorkerMessage.SHUTDOWN = WorkerMessage(MessageKind.SHUTDOWN)
