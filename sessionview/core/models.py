"""Data models for reconstructed session transcripts."""

from dataclasses import dataclass, field
from typing import Literal, Optional, Union

from sessionview.constants import TOOL_STATUS_COMPLETED, TOOL_STATUS_ERROR, TOOL_STATUS_RUNNING

# JSON-serializable types for the display boundary
JsonPrimitive = Union[str, int, float, bool, None]
JsonValue = Union[JsonPrimitive, list["JsonValue"], dict[str, "JsonValue"]]
JsonDict = dict[str, JsonValue]

Role = Literal["user", "assistant"]
ToolStatus = Literal["running", "completed", "error"]


# ---------------------------------------------------------------------------
# Decoded content items (one event's payload, pre-extraction)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextItem:
    """Plain text fragment."""

    text: str


@dataclass(frozen=True)
class ImageItem:
    """Inline image carried as base64 data."""

    media_type: str
    data: str


@dataclass(frozen=True)
class ToolInvocationItem:
    """A tool call issued by the assistant.

    ``input`` is already rendered for display: string inputs verbatim,
    structured inputs as indented JSON.
    """

    name: str
    invocation_id: Optional[str] = None
    input: Optional[str] = None


@dataclass(frozen=True)
class ToolResultItem:
    """A tool outcome reported back in a user event.

    ``content`` is the raw JSON value; decoding into display text happens
    when the result is attached to its invocation.
    """

    invocation_id: str
    content: object = None
    is_error: bool = False


ContentItem = Union[TextItem, ImageItem, ToolInvocationItem, ToolResultItem]


@dataclass(frozen=True)
class Event:
    """One decoded log record."""

    kind: Role
    role: Role
    timestamp: str
    content: tuple[ContentItem, ...] = ()


# ---------------------------------------------------------------------------
# Output transcript
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextBlock:
    content: str
    order: int

    def to_dict(self) -> JsonDict:
        return {"type": "text", "content": self.content, "order": self.order}


@dataclass(frozen=True)
class ToolBlock:
    """Placeholder for a tool widget; resolves through ``Message.tools``."""

    tool_id: str
    order: int

    def to_dict(self) -> JsonDict:
        return {"type": "tool", "toolId": self.tool_id, "order": self.order}


@dataclass(frozen=True)
class ImageBlock:
    media_type: str
    data: str
    order: int

    def to_dict(self) -> JsonDict:
        return {"type": "image", "mediaType": self.media_type, "data": self.data, "order": self.order}


Block = Union[TextBlock, ToolBlock, ImageBlock]


@dataclass
class ToolExecution:
    """Lifecycle record of one tool invocation.

    Created running; completed (or failed) in place at most once when the
    matching result arrives.
    """

    id: str
    tool: str
    started_at: str
    tool_use_id: Optional[str] = None
    status: ToolStatus = TOOL_STATUS_RUNNING
    input: Optional[str] = None
    output: Optional[str] = None
    completed_at: Optional[str] = None

    @property
    def is_finished(self) -> bool:
        return self.status != TOOL_STATUS_RUNNING

    def finish(self, *, is_error: bool, output: Optional[str], completed_at: str) -> None:
        """Attach a result to this execution."""
        self.status = TOOL_STATUS_ERROR if is_error else TOOL_STATUS_COMPLETED
        self.output = output
        self.completed_at = completed_at

    def to_dict(self) -> JsonDict:
        return {
            "id": self.id,
            "tool": self.tool,
            "toolUseId": self.tool_use_id,
            "status": self.status,
            "input": self.input,
            "output": self.output,
            "startedAt": self.started_at,
            "completedAt": self.completed_at,
        }


@dataclass
class Message:
    """A logical transcript message: one or more adjacent same-role events."""

    role: Role
    content: str
    timestamp: str
    tools: Optional[list[ToolExecution]] = None
    blocks: Optional[list[Block]] = field(default=None)

    def to_dict(self) -> JsonDict:
        """Serialize to the display boundary schema."""
        return {
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
            "tools": [tool.to_dict() for tool in self.tools] if self.tools is not None else None,
            "blocks": [block.to_dict() for block in self.blocks] if self.blocks is not None else None,
        }


@dataclass(frozen=True)
class SessionEntry:
    """One row of a project's session index."""

    session_id: str
    first_prompt: str
    message_count: int
    created: str
    modified: str

    def to_dict(self) -> JsonDict:
        return {
            "sessionId": self.session_id,
            "firstPrompt": self.first_prompt,
            "messageCount": self.message_count,
            "created": self.created,
            "modified": self.modified,
        }


@dataclass(frozen=True)
class PlanEntry:
    """A plan document available for auxiliary display."""

    name: str
    path: str
    title: str
    modified: str

    def to_dict(self) -> JsonDict:
        return {"name": self.name, "path": self.path, "title": self.title, "modified": self.modified}
