"""API response models for the API server.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sessionview.core.models import (
    Block,
    ImageBlock,
    Message,
    PlanEntry,
    SessionEntry,
    TextBlock,
    ToolBlock,
    ToolExecution,
)

_WIRE_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ToolExecutionDTO(BaseModel):  # type: ignore[explicit-any]
    """DTO for one tool execution inside a message."""

    model_config = _WIRE_CONFIG

    id: str
    tool: str
    tool_use_id: str | None = None
    status: Literal["running", "completed", "error"]
    input: str | None = None
    output: str | None = None
    started_at: str
    completed_at: str | None = None

    @classmethod
    def from_core(cls, tool: ToolExecution) -> "ToolExecutionDTO":
        return cls(
            id=tool.id,
            tool=tool.tool,
            tool_use_id=tool.tool_use_id,
            status=tool.status,
            input=tool.input,
            output=tool.output,
            started_at=tool.started_at,
            completed_at=tool.completed_at,
        )


class TextBlockDTO(BaseModel):  # type: ignore[explicit-any]
    model_config = _WIRE_CONFIG

    type: Literal["text"] = "text"
    content: str
    order: int


class ToolBlockDTO(BaseModel):  # type: ignore[explicit-any]
    model_config = _WIRE_CONFIG

    type: Literal["tool"] = "tool"
    tool_id: str
    order: int


class ImageBlockDTO(BaseModel):  # type: ignore[explicit-any]
    model_config = _WIRE_CONFIG

    type: Literal["image"] = "image"
    media_type: str
    data: str
    order: int


BlockDTO = Annotated[Union[TextBlockDTO, ToolBlockDTO, ImageBlockDTO], Field(discriminator="type")]


def block_to_dto(block: Block) -> Union[TextBlockDTO, ToolBlockDTO, ImageBlockDTO]:
    """Map a core block to its wire DTO."""
    match block:
        case TextBlock(content=content, order=order):
            return TextBlockDTO(content=content, order=order)
        case ToolBlock(tool_id=tool_id, order=order):
            return ToolBlockDTO(tool_id=tool_id, order=order)
        case ImageBlock(media_type=media_type, data=data, order=order):
            return ImageBlockDTO(media_type=media_type, data=data, order=order)
    raise TypeError(f"Unsupported block type: {type(block).__name__}")


class MessageDTO(BaseModel):  # type: ignore[explicit-any]
    """DTO for one logical transcript message."""

    model_config = _WIRE_CONFIG

    role: Literal["user", "assistant"]
    content: str
    timestamp: str
    tools: list[ToolExecutionDTO] | None = None
    blocks: list[BlockDTO] | None = None

    @classmethod
    def from_core(cls, message: Message) -> "MessageDTO":
        """Map from core Message dataclass."""
        return cls(
            role=message.role,
            content=message.content,
            timestamp=message.timestamp,
            tools=[ToolExecutionDTO.from_core(t) for t in message.tools] if message.tools is not None else None,
            blocks=[block_to_dto(b) for b in message.blocks] if message.blocks is not None else None,
        )


class SessionMessagesDTO(BaseModel):  # type: ignore[explicit-any]
    """Response for a reconstructed session transcript."""

    model_config = _WIRE_CONFIG

    session_id: str
    messages: list[MessageDTO]


class SessionEntryDTO(BaseModel):  # type: ignore[explicit-any]
    """DTO for one session index row."""

    model_config = _WIRE_CONFIG

    session_id: str
    first_prompt: str
    message_count: int
    created: str
    modified: str

    @classmethod
    def from_core(cls, entry: SessionEntry) -> "SessionEntryDTO":
        return cls(
            session_id=entry.session_id,
            first_prompt=entry.first_prompt,
            message_count=entry.message_count,
            created=entry.created,
            modified=entry.modified,
        )


class PlanDTO(BaseModel):  # type: ignore[explicit-any]
    """DTO for a plan document listing row."""

    model_config = _WIRE_CONFIG

    name: str
    path: str
    title: str
    modified: str

    @classmethod
    def from_core(cls, plan: PlanEntry) -> "PlanDTO":
        return cls(name=plan.name, path=plan.path, title=plan.title, modified=plan.modified)


class HealthDTO(BaseModel):  # type: ignore[explicit-any]
    model_config = ConfigDict(frozen=True)

    status: Literal["ok"] = "ok"
