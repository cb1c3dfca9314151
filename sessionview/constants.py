"""Constants used across sessionview.

Values here describe the on-disk layout and wire vocabulary of Claude Code
session logs. They are not user-configurable; see sessionview.config for
settings that are.
"""

# Event kinds kept by the record decoder; every other kind is dropped.
EVENT_KIND_USER = "user"
EVENT_KIND_ASSISTANT = "assistant"
EVENT_KINDS = frozenset({EVENT_KIND_USER, EVENT_KIND_ASSISTANT})

# Raw content item tags as written in session JSONL.
RAW_TAG_TEXT = "text"
RAW_TAG_IMAGE = "image"
RAW_TAG_TOOL_USE = "tool_use"
RAW_TAG_TOOL_RESULT = "tool_result"

DEFAULT_IMAGE_MEDIA_TYPE = "image/png"
UNKNOWN_TOOL_NAME = "unknown"
SYNTHESIZED_TOOL_ID_PREFIX = "tool-"

# Tool execution lifecycle states
TOOL_STATUS_RUNNING = "running"
TOOL_STATUS_COMPLETED = "completed"
TOOL_STATUS_ERROR = "error"

# Claude Code storage layout (relative to the Claude home directory)
CLAUDE_PROJECTS_DIRNAME = "projects"
CLAUDE_PLANS_DIRNAME = "plans"
SESSIONS_INDEX_FILENAME = "sessions-index.json"
SESSION_LOG_SUFFIX = ".jsonl"
PLAN_FILE_PATTERN = "*.md"

DEFAULT_CLAUDE_HOME = "~/.claude"
DEFAULT_SESSION_LIMIT = 50

# Transcript follower
DEFAULT_FOLLOW_POLL_INTERVAL = 1.0  # Seconds between log size checks

# API server
DEFAULT_API_HOST = "127.0.0.1"
DEFAULT_API_PORT = 8420
