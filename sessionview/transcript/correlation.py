"""Invocation-id index used to attach tool results to earlier tool calls."""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sessionview.core.models import Message, ToolExecution

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSlot:
    """Position of a ToolExecution: message index, then index in its tools list."""

    message_index: int
    tool_index: int


class CorrelationTable:
    """Maps tool invocation ids to slots in the output message list.

    Slots are plain indices, never object references. They stay valid because
    messages and their tool lists only ever grow by appending.
    """

    def __init__(self) -> None:
        self._slots: dict[str, ToolSlot] = {}

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, invocation_id: object) -> bool:
        return invocation_id in self._slots

    def register(self, invocation_id: str, message_index: int, tool_index: int) -> None:
        """Record where the execution for ``invocation_id`` lives.

        A repeated id replaces the earlier slot.
        """
        if invocation_id in self._slots:
            logger.debug("Tool invocation id %s registered twice; keeping latest slot", invocation_id)
        self._slots[invocation_id] = ToolSlot(message_index=message_index, tool_index=tool_index)

    def lookup(self, invocation_id: str) -> Optional[ToolSlot]:
        return self._slots.get(invocation_id)

    def resolve(self, invocation_id: str, messages: Sequence[Message]) -> Optional[ToolExecution]:
        """Return the execution registered for ``invocation_id``, if it is still addressable."""
        slot = self._slots.get(invocation_id)
        if slot is None:
            return None
        if not 0 <= slot.message_index < len(messages):
            return None
        tools = messages[slot.message_index].tools
        if tools is None or not 0 <= slot.tool_index < len(tools):
            return None
        return tools[slot.tool_index]
