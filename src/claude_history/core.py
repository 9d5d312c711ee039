"""Core data models for claude-history."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal, Optional, Union

SortOrder = Literal["recent", "created"]


def _str_field(data: dict, key: str) -> str:
    """Return a string field, "" when absent. Other JSON types are malformed."""
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _optional_str(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class HistoryEntry:
    """One line of ~/.claude/history.jsonl."""

    display: str
    timestamp: int  # milliseconds since epoch
    project: str  # e.g. "/Users/alice/dev/webapp"
    session_id: str

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        if not isinstance(data, dict):
            raise TypeError(f"history entry must be an object, got {type(data).__name__}")
        timestamp = data.get("timestamp") or 0
        if not isinstance(timestamp, (int, float)) or isinstance(timestamp, bool):
            raise ValueError(f"invalid timestamp: {timestamp!r}")
        return cls(
            display=_str_field(data, "display"),
            timestamp=int(timestamp),
            project=_str_field(data, "project"),
            session_id=_str_field(data, "sessionId"),
        )


@dataclass(frozen=True)
class Session:
    """A conversation aggregated from every history entry sharing its id."""

    id: str
    display: str  # label of the first entry seen
    timestamp: int  # creation time, ms
    last_active_at: int  # most recent activity, ms
    project: str
    project_name: str

    @property
    def created(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    @property
    def last_active(self) -> datetime:
        return datetime.fromtimestamp(self.last_active_at / 1000, tz=timezone.utc)


@dataclass
class ContentBlock:
    """A tagged unit of message content.

    Only the fields relevant to ``type`` are populated:
    "text" -> text, "thinking" -> thinking, "tool_use" -> name + input,
    "tool_result" -> content.
    """

    type: str  # "text" | "tool_use" | "tool_result" | "thinking"
    text: Optional[str] = None
    thinking: Optional[str] = None
    name: Optional[str] = None
    input: Optional[dict] = None
    content: Union[str, list["ContentBlock"], None] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ContentBlock":
        if not isinstance(data, dict):
            raise TypeError(f"content block must be an object, got {type(data).__name__}")
        nested = data.get("content")
        if isinstance(nested, list):
            nested = [cls.from_dict(b) for b in nested if isinstance(b, dict)]
        elif nested is not None and not isinstance(nested, str):
            nested = str(nested)
        tool_input = data.get("input")
        return cls(
            type=_optional_str(data, "type") or "",
            text=_optional_str(data, "text"),
            thinking=_optional_str(data, "thinking"),
            name=_optional_str(data, "name"),
            input=tool_input if isinstance(tool_input, dict) else None,
            content=nested,
        )


def parse_content(raw: Any) -> Union[str, list[ContentBlock]]:
    """Normalise raw message content into a string or a list of blocks."""
    if isinstance(raw, str):
        return raw
    if isinstance(raw, list):
        return [ContentBlock.from_dict(b) for b in raw if isinstance(b, dict)]
    return ""


@dataclass
class MessagePayload:
    """The ``message`` object of a conversation log line."""

    role: str
    content: Union[str, list[ContentBlock]]
    model: Optional[str] = None


@dataclass
class ConversationMessage:
    """One line of a per-session conversation log."""

    type: str  # "user" | "assistant" | "progress" | "file-history-snapshot"
    uuid: str = ""
    timestamp: str = ""
    session_id: str = ""
    message: Optional[MessagePayload] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ConversationMessage":
        if not isinstance(data, dict):
            raise TypeError(f"conversation record must be an object, got {type(data).__name__}")
        payload = None
        msg = data.get("message")
        if isinstance(msg, dict):
            payload = MessagePayload(
                role=_optional_str(msg, "role") or "",
                content=parse_content(msg.get("content", "")),
                model=_optional_str(msg, "model"),
            )
        return cls(
            type=_str_field(data, "type"),
            uuid=_optional_str(data, "uuid") or "",
            timestamp=_optional_str(data, "timestamp") or "",
            session_id=_optional_str(data, "sessionId") or "",
            message=payload,
        )


@dataclass
class PlanFile:
    """A saved plan document."""

    name: str  # file name without the .md suffix
    path: str
    content: str
    modified_at: datetime
    title: Optional[str] = None  # first top-level heading, if any

    @property
    def display_title(self) -> str:
        return self.title or self.name
