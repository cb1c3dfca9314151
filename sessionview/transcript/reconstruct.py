"""Single-pass transcript reconstruction.

``reconstruct_transcript`` is the batch entry point for a stored log.
``TranscriptReconstructor`` holds the same fold open so streaming callers can
feed lines as they arrive. Neither performs I/O.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sessionview.core.models import Message
from sessionview.transcript.aggregator import MessageAggregator
from sessionview.transcript.decoder import decode_record
from sessionview.transcript.extractor import Counters, extract_content

logger = logging.getLogger(__name__)


@dataclass
class ReconstructionStats:
    """Counts gathered during one reconstruction."""

    lines: int = 0
    skipped_lines: int = 0
    dropped_events: int = 0
    applied_results: int = 0
    orphaned_results: int = 0


class TranscriptReconstructor:
    """Incremental reconstruction over a growing log."""

    def __init__(self) -> None:
        self._aggregator = MessageAggregator()
        self._counters = Counters()
        self.stats = ReconstructionStats()

    @property
    def messages(self) -> list[Message]:
        return self._aggregator.messages

    @property
    def counters(self) -> Counters:
        return self._counters

    def feed(self, line: str) -> bool:
        """Consume one log line. Returns True if the transcript changed."""
        self.stats.lines += 1
        event = decode_record(line)
        if event is None:
            self.stats.skipped_lines += 1
            return False

        extraction, self._counters = extract_content(
            event,
            self._counters,
            self._aggregator.table,
            self._aggregator.messages,
        )
        self.stats.applied_results += extraction.applied_results
        self.stats.orphaned_results += extraction.orphaned_results

        if self._aggregator.absorb(event, extraction):
            return True

        if not extraction.applied_results:
            self.stats.dropped_events += 1
        return extraction.applied_results > 0

    def feed_lines(self, lines: Iterable[str]) -> bool:
        """Consume lines in order. Returns True if any of them changed the transcript."""
        changed = False
        for line in lines:
            changed = self.feed(line) or changed
        return changed


def reconstruct_lines(lines: Iterable[str]) -> list[Message]:
    """Reconstruct logical messages from an iterable of log lines."""
    reconstructor = TranscriptReconstructor()
    reconstructor.feed_lines(lines)
    stats = reconstructor.stats
    logger.debug(
        "Reconstructed %d messages from %d lines (skipped=%d dropped=%d results=%d orphaned=%d)",
        len(reconstructor.messages),
        stats.lines,
        stats.skipped_lines,
        stats.dropped_events,
        stats.applied_results,
        stats.orphaned_results,
    )
    return reconstructor.messages


def reconstruct_transcript(text: str) -> list[Message]:
    """Reconstruct logical messages from raw JSONL text."""
    # Split on newlines only; str.splitlines() would also break on U+2028 inside JSON strings.
    return reconstruct_lines(text.split("\n"))
