"""
Canonical data shapes shared by the store, the controller and the UI.

Typical contents:
- Role (user / assistant).
- ChatMessage (one immutable turn).
- ChatSession (ordered messages + metadata), with the JSON record mapping
  used by the history document.

Timestamps are timezone-aware UTC with second precision, which is also the
precision of the on-disk format, so a flush/load round trip is lossless.
"""

from __future__ import annotations
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


EMPTY_TITLE = "Empty Chat"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


def new_id() -> str:
    return str(uuid.uuid4())


def format_timestamp(value: datetime) -> str:
    """Render as ISO-8601 UTC, e.g. 2026-10-18T15:38:00Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc).replace(microsecond=0, tzinfo=None)
    # isoformat zero-pads years below 1000, strftime("%Y") does not on glibc.
    return value.isoformat(timespec="seconds") + "Z"


def parse_timestamp(text: Any) -> datetime:
    """
    Parse any ISO-8601 timestamp ('Z' suffix, explicit offset or naive).
    Naive values are taken as UTC. Raises TypeError/ValueError on bad input.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected an ISO-8601 string, got {type(text).__name__}")
    raw = text.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"Timestamp out of range: {text}") from e


def _require_str(data: dict, key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"Field '{key}' must be a string")
    return value


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "role": self.role.value,
            "content": self.content,
            "timestamp": format_timestamp(self.timestamp),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ChatMessage":
        if not isinstance(data, dict):
            raise TypeError("Message record must be a JSON object")
        return cls(
            id=_require_str(data, "id"),
            role=Role(data["role"]),
            content=_require_str(data, "content"),
            timestamp=parse_timestamp(data["timestamp"]),
        )


@dataclass
class ChatSession:
    provider: str
    id: str = field(default_factory=new_id)
    messages: list[ChatMessage] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    last_modified: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.last_modified is None:
            self.last_modified = self.created_at

    @property
    def last_message(self) -> Optional[ChatMessage]:
        return self.messages[-1] if self.messages else None

    @property
    def title(self) -> str:
        """First user message, else the first message of any role, else 'Empty Chat'."""
        first_user = next((m for m in self.messages if m.role == Role.USER), None)
        if first_user is not None:
            return first_user.content
        if self.messages:
            return self.messages[0].content
        return EMPTY_TITLE

    def copy(self) -> "ChatSession":
        """Independent copy; messages are immutable so a new list is enough."""
        return replace(self, messages=list(self.messages))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "messages": [m.to_dict() for m in self.messages],
            "provider": self.provider,
            "createdAt": format_timestamp(self.created_at),
            "lastModified": format_timestamp(self.last_modified),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "ChatSession":
        if not isinstance(data, dict):
            raise TypeError("Session record must be a JSON object")
        messages = data["messages"]
        if not isinstance(messages, list):
            raise TypeError("Field 'messages' must be an array")
        return cls(
            id=_require_str(data, "id"),
            messages=[ChatMessage.from_dict(m) for m in messages],
            provider=_require_str(data, "provider"),
            created_at=parse_timestamp(data["createdAt"]),
            last_modified=parse_timestamp(data["lastModified"]),
        )
