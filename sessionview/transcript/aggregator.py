"""Merge extracted events into logical messages."""

import logging

from sessionview.core.models import Event, Message
from sessionview.transcript.correlation import CorrelationTable
from sessionview.transcript.extractor import Extraction

logger = logging.getLogger(__name__)


class MessageAggregator:
    """Owns the output message list and the correlation table that indexes it.

    Consecutive events with the same role are fragments of one turn (an
    assistant writes text, calls a tool, writes more text as separate records)
    and fold into the open message. A role change always opens a new message.
    """

    def __init__(self, table: CorrelationTable | None = None) -> None:
        self.messages: list[Message] = []
        self.table = table if table is not None else CorrelationTable()

    @property
    def open_message(self) -> Message | None:
        return self.messages[-1] if self.messages else None

    def absorb(self, event: Event, extraction: Extraction) -> bool:
        """Fold one event's extraction into the transcript.

        Returns False when the extraction was empty and nothing changed.
        """
        if extraction.is_empty:
            return False

        last = self.open_message
        if last is not None and last.role == event.role:
            self._merge(len(self.messages) - 1, last, event, extraction)
        else:
            self._open(event, extraction)
        return True

    def _open(self, event: Event, extraction: Extraction) -> None:
        message_index = len(self.messages)
        self.messages.append(
            Message(
                role=event.role,
                content=extraction.text,
                timestamp=event.timestamp,
                tools=list(extraction.tools) if extraction.tools else None,
                blocks=list(extraction.blocks) if extraction.blocks else None,
            )
        )
        for invocation_id, tool_index in extraction.registrations:
            self.table.register(invocation_id, message_index, tool_index)

    def _merge(self, message_index: int, last: Message, event: Event, extraction: Extraction) -> None:
        text = extraction.text
        if text:
            last.content = f"{last.content}\n{text}" if last.content else text

        if extraction.tools:
            if last.tools is None:
                last.tools = []
            base = len(last.tools)
            last.tools.extend(extraction.tools)
            for invocation_id, tool_index in extraction.registrations:
                self.table.register(invocation_id, message_index, base + tool_index)

        if extraction.blocks:
            if last.blocks is None:
                last.blocks = []
            last.blocks.extend(extraction.blocks)

        last.timestamp = event.timestamp
