"""Decode raw session JSONL lines into typed events.

Decoding never raises: every line that cannot become an ``Event`` yields
``None`` and the caller moves on. Content items are narrowed to the closed
set in ``sessionview.core.models``; anything else is rejected here so the
extractor only ever sees well-formed items.
"""

import json
import logging
from typing import Mapping, Optional, cast

from sessionview.constants import (
    DEFAULT_IMAGE_MEDIA_TYPE,
    EVENT_KIND_ASSISTANT,
    EVENT_KIND_USER,
    EVENT_KINDS,
    RAW_TAG_IMAGE,
    RAW_TAG_TEXT,
    RAW_TAG_TOOL_RESULT,
    RAW_TAG_TOOL_USE,
    UNKNOWN_TOOL_NAME,
)
from sessionview.core.models import (
    ContentItem,
    Event,
    ImageItem,
    Role,
    TextItem,
    ToolInvocationItem,
    ToolResultItem,
)

logger = logging.getLogger(__name__)


def render_json(value: object) -> str:
    """Render a JSON value as indented text for display."""
    return json.dumps(value, indent=2, ensure_ascii=False)


def decode_record(line: str) -> Optional[Event]:
    """Decode one log line, or return None when the line must be skipped."""
    if not line.strip():
        return None

    try:
        entry_value: object = json.loads(line)
    except (ValueError, RecursionError):
        # Oversized integer literals raise ValueError; deep nesting raises RecursionError
        logger.debug("Skipping malformed transcript line: %.80s", line)
        return None

    if not isinstance(entry_value, dict):
        logger.debug("Skipping non-object transcript line")
        return None

    entry = cast(dict[str, object], entry_value)  # guard: loose-dict - Parsed JSONL entry
    kind = entry.get("type")
    if not isinstance(kind, str) or kind not in EVENT_KINDS:
        return None

    message = entry.get("message")
    if not isinstance(message, dict):
        logger.debug("Skipping %s entry without message payload", kind)
        return None

    timestamp = entry.get("timestamp")
    event_kind = cast(Role, kind)
    return Event(
        kind=event_kind,
        role=_resolve_role(message, event_kind),
        timestamp=timestamp if isinstance(timestamp, str) else "",
        content=decode_content(message.get("content"), event_kind),
    )


def _resolve_role(message: Mapping[str, object], kind: Role) -> Role:
    role = message.get("role")
    if role == EVENT_KIND_USER or role == EVENT_KIND_ASSISTANT:
        return cast(Role, role)
    return kind


def decode_content(content: object, kind: Role) -> tuple[ContentItem, ...]:
    """Narrow a message ``content`` payload to typed content items.

    A bare string becomes a single text item. Lists are decoded item by item,
    preserving order; items that fail to decode are dropped.
    """
    if isinstance(content, str):
        return (TextItem(text=content),)
    if not isinstance(content, list):
        return ()

    items: list[ContentItem] = []
    for raw in content:
        if not isinstance(raw, dict):
            continue
        item = decode_content_item(cast(dict[str, object], raw), kind)  # guard: loose-dict - External block
        if item is not None:
            items.append(item)
    return tuple(items)


def decode_content_item(
    block: Mapping[str, object],
    kind: Role,
) -> Optional[ContentItem]:
    """Decode a single raw content block; None for unknown or malformed blocks."""
    block_type = block.get("type")

    if block_type == RAW_TAG_TEXT:
        text = block.get("text")
        return TextItem(text=text) if isinstance(text, str) else None

    if block_type == RAW_TAG_IMAGE:
        return _decode_image(block)

    if block_type == RAW_TAG_TOOL_USE:
        if kind != EVENT_KIND_ASSISTANT:
            return None
        return _decode_tool_use(block)

    if block_type == RAW_TAG_TOOL_RESULT:
        if kind != EVENT_KIND_USER:
            return None
        return _decode_tool_result(block)

    return None


def _decode_image(block: Mapping[str, object]) -> Optional[ImageItem]:
    source = block.get("source")
    if not isinstance(source, dict):
        return None
    data = source.get("data")
    if not isinstance(data, str):
        return None
    media_type = source.get("media_type")
    return ImageItem(
        media_type=media_type if isinstance(media_type, str) else DEFAULT_IMAGE_MEDIA_TYPE,
        data=data,
    )


def _decode_tool_use(block: Mapping[str, object]) -> ToolInvocationItem:
    name = block.get("name")
    invocation_id = block.get("id")

    rendered_input: Optional[str] = None
    if "input" in block:
        raw_input = block["input"]
        rendered_input = raw_input if isinstance(raw_input, str) else render_json(raw_input)

    return ToolInvocationItem(
        name=name if isinstance(name, str) else UNKNOWN_TOOL_NAME,
        invocation_id=invocation_id if isinstance(invocation_id, str) else None,
        input=rendered_input,
    )


def _decode_tool_result(block: Mapping[str, object]) -> Optional[ToolResultItem]:
    invocation_id = block.get("tool_use_id")
    if not isinstance(invocation_id, str):
        return None
    return ToolResultItem(
        invocation_id=invocation_id,
        content=block.get("content"),
        is_error=block.get("is_error") is True,
    )
