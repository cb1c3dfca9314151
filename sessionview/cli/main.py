"""sessionview: inspect Claude Code session transcripts from the terminal.

Every subcommand prints JSON to stdout; diagnostics go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from sessionview import __version__
from sessionview.config import AppConfig, get_config
from sessionview.constants import DEFAULT_FOLLOW_POLL_INTERVAL
from sessionview.core.models import JsonValue, Message
from sessionview.logging_config import setup_logging
from sessionview.sessions import SessionStoreError, list_plans, list_sessions, load_session_messages
from sessionview.transcript import reconstruct_transcript
from sessionview.transcript.follow import TranscriptFollower

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _emit(payload: JsonValue) -> None:
    print(json.dumps(payload, ensure_ascii=False))


def _messages_payload(messages: list[Message]) -> JsonValue:
    return [message.to_dict() for message in messages]


def _cmd_replay(args: argparse.Namespace, _config: AppConfig) -> int:
    if args.file == "-":
        text = sys.stdin.read()
    else:
        try:
            text = Path(args.file).expanduser().read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            print(f"ERROR: cannot read {args.file}: {e}", file=sys.stderr)
            return 1
    _emit(_messages_payload(reconstruct_transcript(text)))
    return 0


def _cmd_sessions(args: argparse.Namespace, config: AppConfig) -> int:
    entries = list_sessions(
        args.workspace,
        claude_home=config.claude_home_path(),
        limit=args.limit if args.limit is not None else config.sessions.limit,
    )
    _emit([entry.to_dict() for entry in entries])
    return 0


def _cmd_messages(args: argparse.Namespace, config: AppConfig) -> int:
    messages = load_session_messages(args.workspace, args.session_id, claude_home=config.claude_home_path())
    _emit(_messages_payload(messages))
    return 0


def _cmd_plans(args: argparse.Namespace, config: AppConfig) -> int:
    plans_dir = Path(args.dir).expanduser() if args.dir else config.plans_path()
    _emit([plan.to_dict() for plan in list_plans(plans_dir)])
    return 0


async def _watch(path: Path, interval: float) -> None:
    def report(messages: list[Message]) -> None:
        latest = messages[-1].to_dict() if messages else None
        _emit({"messageCount": len(messages), "latest": latest})
        sys.stdout.flush()

    follower = TranscriptFollower(path, poll_interval=interval, on_change=report)
    await follower.start()
    try:
        await asyncio.Event().wait()
    finally:
        await follower.stop()


def _cmd_watch(args: argparse.Namespace, _config: AppConfig) -> int:
    try:
        asyncio.run(_watch(Path(args.file).expanduser(), args.interval))
    except KeyboardInterrupt:
        pass
    return 0


def _cmd_serve(args: argparse.Namespace, config: AppConfig) -> int:
    from sessionview.api_server import run_server

    run_server(config, host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sessionview", description="Inspect Claude Code session transcripts.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", help="Path to sessionview.yml (default: $SESSIONVIEW_CONFIG_PATH)")
    parser.add_argument("--log-level", help="Override log level (DEBUG, INFO, WARNING, ...)")
    sub = parser.add_subparsers(dest="command", required=True)

    replay = sub.add_parser("replay", help="Reconstruct a JSONL session log")
    replay.add_argument("file", help="Path to a .jsonl log, or - for stdin")
    replay.set_defaults(handler=_cmd_replay)

    sessions = sub.add_parser("sessions", help="List a workspace's sessions")
    sessions.add_argument("workspace", help="Absolute workspace path")
    sessions.add_argument("--limit", type=_positive_int, help="Maximum number of sessions")
    sessions.set_defaults(handler=_cmd_sessions)

    messages = sub.add_parser("messages", help="Reconstruct a stored session")
    messages.add_argument("workspace", help="Absolute workspace path")
    messages.add_argument("session_id", help="Session id from the session index")
    messages.set_defaults(handler=_cmd_messages)

    plans = sub.add_parser("plans", help="List plan documents")
    plans.add_argument("--dir", help="Plans directory (default: <claude_home>/plans)")
    plans.set_defaults(handler=_cmd_plans)

    watch = sub.add_parser("watch", help="Follow a growing session log")
    watch.add_argument("file", help="Path to a .jsonl log")
    watch.add_argument("--interval", type=float, default=DEFAULT_FOLLOW_POLL_INTERVAL, help="Poll interval (s)")
    watch.set_defaults(handler=_cmd_watch)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind host")
    serve.add_argument("--port", type=int, help="Bind port")
    serve.set_defaults(handler=_cmd_serve)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = get_config(Path(args.config).expanduser() if args.config else None)
    setup_logging(args.log_level, default=config.logging.level)

    handler: Callable[[argparse.Namespace, AppConfig], int] = args.handler
    try:
        return handler(args, config)
    except SessionStoreError as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
