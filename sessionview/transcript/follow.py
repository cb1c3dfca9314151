"""Follow a growing session log and keep its transcript current."""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from sessionview.constants import DEFAULT_FOLLOW_POLL_INTERVAL
from sessionview.core.models import Message
from sessionview.transcript.reconstruct import TranscriptReconstructor

logger = logging.getLogger(__name__)

MessagesCallback = Callable[[list[Message]], None]


class TranscriptFollower:
    """Polls a JSONL log and feeds appended lines into a reconstructor.

    Only complete lines are fed; a trailing partial line stays buffered until
    its newline is written. If the file shrinks, it was rewritten and the
    transcript is rebuilt from the start.
    """

    def __init__(
        self,
        path: Path,
        *,
        poll_interval: float = DEFAULT_FOLLOW_POLL_INTERVAL,
        on_change: Optional[MessagesCallback] = None,
    ) -> None:
        self.path = path
        self.poll_interval = poll_interval
        self.on_change = on_change
        self.reconstructor = TranscriptReconstructor()
        self._position = 0
        self._pending = b""
        self._running = False
        self._poll_task: Optional[asyncio.Task[None]] = None

    @property
    def messages(self) -> list[Message]:
        return self.reconstructor.messages

    async def start(self) -> None:
        """Start polling in the background."""
        if self._running:
            return
        self._running = True
        self._poll_task = asyncio.create_task(self._poll_loop())
        logger.info("Following transcript %s", self.path)

    async def stop(self) -> None:
        """Stop polling."""
        self._running = False
        if self._poll_task:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None
        logger.info("Stopped following transcript %s", self.path)

    async def _poll_loop(self) -> None:
        while self._running:
            try:
                self.poll_once()
            except OSError as e:
                logger.warning("Failed to read transcript %s: %s", self.path, e)
            await asyncio.sleep(self.poll_interval)

    def _reset(self) -> None:
        self.reconstructor = TranscriptReconstructor()
        self._position = 0
        self._pending = b""

    def poll_once(self) -> bool:
        """Read whatever was appended since the last poll.

        Returns True if the transcript changed.
        """
        try:
            size = self.path.stat().st_size
        except FileNotFoundError:
            return False

        rebuilt = False
        if size < self._position:
            logger.info("Transcript %s shrank (%d < %d); rebuilding", self.path, size, self._position)
            self._reset()
            rebuilt = True

        chunk = b""
        if size > self._position:
            with open(self.path, "rb") as f:
                f.seek(self._position)
                chunk = f.read(size - self._position)
            self._position += len(chunk)

        raw_lines = (self._pending + chunk).split(b"\n")
        self._pending = raw_lines.pop()

        fed = self.reconstructor.feed_lines(line.decode("utf-8", errors="replace") for line in raw_lines)
        changed = fed or rebuilt
        if changed and self.on_change:
            self.on_change(self.messages)
        return changed
