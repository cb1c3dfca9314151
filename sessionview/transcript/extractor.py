"""Turn one decoded event into ordered display blocks.

The extractor is the only place that stamps block order numbers and
synthesizes tool ids. Both counters travel in an immutable ``Counters`` value:
callers pass the current value in and keep the one returned.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from sessionview.constants import RAW_TAG_TEXT, SYNTHESIZED_TOOL_ID_PREFIX
from sessionview.core.models import (
    Block,
    Event,
    ImageBlock,
    ImageItem,
    Message,
    TextBlock,
    TextItem,
    ToolBlock,
    ToolExecution,
    ToolInvocationItem,
    ToolResultItem,
)
from sessionview.transcript.correlation import CorrelationTable
from sessionview.transcript.decoder import render_json

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Counters:
    """Transcript-wide counters.

    ``order`` is the last block order number handed out; ``synthesized_tools``
    is the number of ``tool-<n>`` ids generated so far.
    """

    order: int = 0
    synthesized_tools: int = 0


@dataclass
class Extraction:
    """Everything one event contributes to the transcript."""

    texts: list[str] = field(default_factory=list)
    tools: list[ToolExecution] = field(default_factory=list)
    blocks: list[Block] = field(default_factory=list)
    # (invocation id, index into ``tools``) pairs awaiting table registration
    registrations: list[tuple[str, int]] = field(default_factory=list)
    applied_results: int = 0
    orphaned_results: int = 0

    @property
    def text(self) -> str:
        return "\n".join(self.texts)

    @property
    def is_empty(self) -> bool:
        return not self.texts and not self.tools and not self.blocks


def decode_tool_output(content: object) -> Optional[str]:
    """Render a tool result payload as display text.

    Strings pass through verbatim. Lists yield their text items joined by
    newlines, or the whole list as indented JSON when none are text.
    """
    if content is None:
        return None
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        texts = [
            item["text"]
            for item in content
            if isinstance(item, dict) and item.get("type") == RAW_TAG_TEXT and isinstance(item.get("text"), str)
        ]
        if texts:
            return "\n".join(texts)
    return render_json(content)


def extract_content(
    event: Event,
    counters: Counters,
    table: CorrelationTable,
    messages: Sequence[Message],
) -> tuple[Extraction, Counters]:
    """Extract blocks, new tool executions and result updates from one event.

    Tool results are applied immediately to the executions already present in
    ``messages``; results whose invocation id is not in ``table`` are dropped,
    as are repeated results for an execution that already finished.
    """
    extraction = Extraction()
    order = counters.order
    synthesized = counters.synthesized_tools

    for item in event.content:
        match item:
            case TextItem(text=text):
                if not text.strip():
                    continue
                extraction.texts.append(text)
                order += 1
                extraction.blocks.append(TextBlock(content=text, order=order))

            case ImageItem(media_type=media_type, data=data):
                order += 1
                extraction.blocks.append(ImageBlock(media_type=media_type, data=data, order=order))

            case ToolInvocationItem(name=name, invocation_id=invocation_id, input=tool_input):
                if invocation_id is not None:
                    tool_id = invocation_id
                else:
                    synthesized += 1
                    tool_id = f"{SYNTHESIZED_TOOL_ID_PREFIX}{synthesized}"

                extraction.tools.append(
                    ToolExecution(
                        id=tool_id,
                        tool=name,
                        started_at=event.timestamp,
                        tool_use_id=invocation_id,
                        input=tool_input,
                    )
                )
                order += 1
                extraction.blocks.append(ToolBlock(tool_id=tool_id, order=order))
                if invocation_id is not None:
                    extraction.registrations.append((invocation_id, len(extraction.tools) - 1))

            case ToolResultItem(invocation_id=invocation_id, content=content, is_error=is_error):
                execution = table.resolve(invocation_id, messages)
                if execution is None:
                    logger.debug("Dropping tool result for unknown invocation %s", invocation_id)
                    extraction.orphaned_results += 1
                    continue
                if execution.is_finished:
                    logger.debug("Ignoring repeated tool result for invocation %s", invocation_id)
                    continue
                execution.finish(
                    is_error=is_error,
                    output=decode_tool_output(content),
                    completed_at=event.timestamp,
                )
                extraction.applied_results += 1

    return extraction, replace(counters, order=order, synthesized_tools=synthesized)
