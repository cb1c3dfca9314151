"""Locate and load Claude Code sessions stored on disk.

Claude keeps one directory per project under ``<claude_home>/projects``; the
directory name is the workspace path with ``/`` replaced by ``-``. Each
directory holds ``<session_id>.jsonl`` logs and a ``sessions-index.json``
summary.
"""

import json
import logging
from pathlib import Path
from typing import Mapping, Optional, cast

from sessionview.constants import (
    CLAUDE_PROJECTS_DIRNAME,
    DEFAULT_SESSION_LIMIT,
    PLAN_FILE_PATTERN,
    SESSION_LOG_SUFFIX,
    SESSIONS_INDEX_FILENAME,
)
from sessionview.core.models import Message, PlanEntry, SessionEntry
from sessionview.transcript import reconstruct_transcript
from sessionview.utils import format_mtime

logger = logging.getLogger(__name__)


class SessionStoreError(RuntimeError):
    """Raised when stored session data exists but cannot be read."""


class InvalidSessionIdError(SessionStoreError, ValueError):
    """Raised when a session id could escape the project directory."""


def project_dir_name(workspace: str) -> str:
    """Claude's directory name for a workspace path."""
    return workspace.replace("/", "-")


def project_dir(workspace: str, *, claude_home: Path) -> Path:
    return claude_home / CLAUDE_PROJECTS_DIRNAME / project_dir_name(workspace)


def _parse_session_entry(raw: Mapping[str, object]) -> Optional[SessionEntry]:
    session_id = raw.get("sessionId")
    if not isinstance(session_id, str) or not session_id:
        return None

    first_prompt = raw.get("firstPrompt")
    message_count = raw.get("messageCount")
    created = raw.get("created")
    modified = raw.get("modified")
    return SessionEntry(
        session_id=session_id,
        first_prompt=first_prompt if isinstance(first_prompt, str) else "",
        message_count=message_count if isinstance(message_count, int) and not isinstance(message_count, bool) else 0,
        created=created if isinstance(created, str) else "",
        modified=modified if isinstance(modified, str) else "",
    )


def list_sessions(
    workspace: str,
    *,
    claude_home: Path,
    limit: int = DEFAULT_SESSION_LIMIT,
) -> list[SessionEntry]:
    """List a workspace's sessions, most recently modified first.

    Returns an empty list when the project has no session index.

    Raises:
        SessionStoreError: The index exists but cannot be read or parsed.
    """
    index_path = project_dir(workspace, claude_home=claude_home) / SESSIONS_INDEX_FILENAME
    if not index_path.exists():
        return []

    try:
        raw_text = index_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SessionStoreError(f"Failed to read sessions: {e}") from e

    try:
        document: object = json.loads(raw_text)
    except json.JSONDecodeError as e:
        raise SessionStoreError(f"Failed to parse sessions: {e}") from e

    raw_entries = document.get("entries") if isinstance(document, dict) else None
    if not isinstance(raw_entries, list):
        raise SessionStoreError(f"Failed to parse sessions: no entries list in {index_path}")

    entries: list[SessionEntry] = []
    for raw in raw_entries:
        if not isinstance(raw, dict):
            continue
        entry = _parse_session_entry(cast(dict[str, object], raw))  # guard: loose-dict - External index entry
        if entry is None:
            logger.debug("Skipping malformed session index entry in %s", index_path)
            continue
        entries.append(entry)

    entries.sort(key=lambda e: e.modified, reverse=True)
    return entries[:limit]


def session_log_path(workspace: str, session_id: str, *, claude_home: Path) -> Path:
    """Path of a session's JSONL log.

    Raises:
        InvalidSessionIdError: ``session_id`` is empty or contains path components.
    """
    if not session_id or "/" in session_id or "\\" in session_id or ".." in session_id:
        raise InvalidSessionIdError(f"Invalid session id: {session_id!r}")
    return project_dir(workspace, claude_home=claude_home) / f"{session_id}{SESSION_LOG_SUFFIX}"


def load_session_messages(workspace: str, session_id: str, *, claude_home: Path) -> list[Message]:
    """Reconstruct the transcript of a stored session.

    Returns an empty list when the session log does not exist.

    Raises:
        SessionStoreError: The log exists but cannot be read.
    """
    path = session_log_path(workspace, session_id, claude_home=claude_home)
    if not path.exists():
        return []

    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise SessionStoreError(f"Failed to read session: {e}") from e

    return reconstruct_transcript(content)


def _plan_title(path: Path) -> str:
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            for line in f:
                if line.startswith("# "):
                    return line[2:].strip() or path.stem
    except OSError as e:
        logger.warning("Failed to read plan %s: %s", path, e)
    return path.stem


def list_plans(plans_dir: Path) -> list[PlanEntry]:
    """List Markdown plan documents, newest first."""
    if not plans_dir.is_dir():
        return []

    dated: list[tuple[float, PlanEntry]] = []
    for path in plans_dir.glob(PLAN_FILE_PATTERN):
        if not path.is_file():
            continue
        try:
            mtime = path.stat().st_mtime
        except OSError:
            continue
        dated.append(
            (
                mtime,
                PlanEntry(name=path.name, path=str(path), title=_plan_title(path), modified=format_mtime(mtime)),
            )
        )

    dated.sort(key=lambda item: item[0], reverse=True)
    return [entry for _, entry in dated]
