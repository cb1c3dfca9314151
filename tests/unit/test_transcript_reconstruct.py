"""End-to-end tests for transcript reconstruction from JSONL text."""

import json

import pytest

from sessionview.transcript import TranscriptReconstructor, reconstruct_lines, reconstruct_transcript


pytestmark = pytest.mark.unit


def _jsonl(*entries: object) -> str:
    return "\n".join(json.dumps(entry) for entry in entries) + "\n"


def _user(content: object, timestamp: str) -> dict[str, object]:
    return {"type": "user", "timestamp": timestamp, "message": {"role": "user", "content": content}}


def _assistant(content: object, timestamp: str) -> dict[str, object]:
    return {"type": "assistant", "timestamp": timestamp, "message": {"role": "assistant", "content": content}}


def test_simple_exchange():
    messages = reconstruct_transcript(
        _jsonl(
            _user("hi", "T1"),
            _assistant([{"type": "text", "text": "hello"}], "T2"),
        )
    )

    assert [m.to_dict() for m in messages] == [
        {
            "role": "user",
            "content": "hi",
            "timestamp": "T1",
            "tools": None,
            "blocks": [{"type": "text", "content": "hi", "order": 1}],
        },
        {
            "role": "assistant",
            "content": "hello",
            "timestamp": "T2",
            "tools": None,
            "blocks": [{"type": "text", "content": "hello", "order": 2}],
        },
    ]


def test_tool_round_trip_completes_tool_in_place():
    messages = reconstruct_transcript(
        _jsonl(
            _user("find x", "T1"),
            _assistant(
                [
                    {"type": "text", "text": "searching"},
                    {"type": "tool_use", "id": "A", "name": "search", "input": {"q": "x"}},
                ],
                "T2",
            ),
            _user([{"type": "tool_result", "tool_use_id": "A", "content": "3 results"}], "T3"),
            _assistant([{"type": "text", "text": "found 3"}], "T4"),
        )
    )

    assert len(messages) == 3
    user, assistant, reply = messages
    assert user.content == "find x"

    assert assistant.content == "searching"
    (tool,) = assistant.tools
    assert tool.to_dict() == {
        "id": "A",
        "tool": "search",
        "toolUseId": "A",
        "status": "completed",
        "input": '{\n  "q": "x"\n}',
        "output": "3 results",
        "startedAt": "T2",
        "completedAt": "T3",
    }
    assert [block.to_dict() for block in assistant.blocks] == [
        {"type": "text", "content": "searching", "order": 2},
        {"type": "tool", "toolId": "A", "order": 3},
    ]

    # The result-only user event produces no message; the next assistant event opens a new one.
    assert reply.role == "assistant"
    assert reply.content == "found 3"
    assert reply.blocks[0].order == 4


def test_adjacent_assistant_events_merge():
    messages = reconstruct_transcript(
        _jsonl(
            _assistant([{"type": "text", "text": "a"}], "T1"),
            _assistant([{"type": "text", "text": "b"}], "T2"),
        )
    )

    (message,) = messages
    assert message.content == "a\nb"
    assert message.timestamp == "T2"
    assert [block.order for block in message.blocks] == [1, 2]


def test_orphan_result_and_unknown_kinds_are_skipped():
    messages = reconstruct_transcript(
        _jsonl(
            {"type": "summary", "summary": "s"},
            _user([{"type": "tool_result", "tool_use_id": "Z", "content": "x"}], "T1"),
        )
    )
    assert messages == []


def test_malformed_lines_are_skipped():
    text = "\n".join(
        [
            "garbage",
            json.dumps(_user("hi", "T1")),
            "{truncated",
            "",
            json.dumps(_assistant("hello", "T2")),
        ]
    )
    messages = reconstruct_transcript(text)
    assert [(m.role, m.content) for m in messages] == [("user", "hi"), ("assistant", "hello")]


def test_empty_input_yields_no_messages():
    assert reconstruct_transcript("") == []
    assert reconstruct_transcript("\n\n") == []


def test_block_order_is_strictly_increasing_across_transcript():
    messages = reconstruct_transcript(
        _jsonl(
            _user([{"type": "text", "text": "look"}, {"type": "image", "source": {"data": "AAA"}}], "T1"),
            _assistant(
                [
                    {"type": "tool_use", "name": "Bash", "input": "ls"},
                    {"type": "text", "text": "   "},
                    {"type": "tool_use", "name": "Read"},
                ],
                "T2",
            ),
            _assistant([{"type": "text", "text": "done"}], "T3"),
        )
    )

    orders = [block.order for message in messages for block in message.blocks]
    assert orders == [1, 2, 3, 4, 5]


def test_synthesized_tool_ids_are_sequential():
    messages = reconstruct_transcript(
        _jsonl(
            _assistant([{"type": "tool_use", "name": "Bash"}], "T1"),
            _user("next", "T2"),
            _assistant([{"type": "tool_use", "name": "Read"}, {"type": "tool_use", "name": "Grep"}], "T3"),
        )
    )

    ids = [tool.id for message in messages for tool in (message.tools or [])]
    assert ids == ["tool-1", "tool-2", "tool-3"]
    assert all(tool.tool_use_id is None for message in messages for tool in (message.tools or []))


def test_every_tool_block_resolves_to_a_tool():
    messages = reconstruct_transcript(
        _jsonl(
            _assistant([{"type": "tool_use", "id": "A", "name": "Bash"}], "T1"),
            _assistant([{"type": "tool_use", "name": "Read"}], "T2"),
        )
    )

    for message in messages:
        tool_ids = {tool.id for tool in message.tools or []}
        for block in message.blocks or []:
            if block.to_dict()["type"] == "tool":
                assert block.tool_id in tool_ids


def test_tool_result_in_merged_message_updates_correct_slot():
    messages = reconstruct_transcript(
        _jsonl(
            _assistant([{"type": "tool_use", "id": "A", "name": "Bash"}], "T1"),
            _assistant([{"type": "tool_use", "id": "B", "name": "Read"}], "T2"),
            _user(
                [
                    {"type": "tool_result", "tool_use_id": "B", "content": [{"type": "text", "text": "file"}]},
                    {"type": "tool_result", "tool_use_id": "A", "content": "err", "is_error": True},
                ],
                "T3",
            ),
        )
    )

    (message,) = messages
    tool_a, tool_b = message.tools
    assert (tool_a.status, tool_a.output, tool_a.completed_at) == ("error", "err", "T3")
    assert (tool_b.status, tool_b.output, tool_b.completed_at) == ("completed", "file", "T3")


def test_result_with_text_opens_user_message():
    messages = reconstruct_transcript(
        _jsonl(
            _assistant([{"type": "tool_use", "id": "A", "name": "Bash"}], "T1"),
            _user(
                [
                    {"type": "tool_result", "tool_use_id": "A", "content": "ok"},
                    {"type": "text", "text": "now do more"},
                ],
                "T2",
            ),
        )
    )

    assert [m.role for m in messages] == ["assistant", "user"]
    assert messages[0].tools[0].status == "completed"
    assert messages[1].content == "now do more"
    assert messages[1].tools is None


def test_line_separator_inside_json_string_is_not_a_line_break():
    line = json.dumps(_user("a\u2028b", "T1"), ensure_ascii=False)
    messages = reconstruct_transcript(line + "\n")
    assert messages[0].content == "a\u2028b"


def test_incremental_feed_matches_batch():
    entries = [
        _user("find x", "T1"),
        _assistant([{"type": "tool_use", "id": "A", "name": "search", "input": {"q": "x"}}], "T2"),
        _user([{"type": "tool_result", "tool_use_id": "A", "content": "3 results"}], "T3"),
        _assistant("found 3", "T4"),
    ]
    lines = [json.dumps(entry) for entry in entries]

    reconstructor = TranscriptReconstructor()
    changes = [reconstructor.feed(line) for line in lines]

    assert changes == [True, True, True, True]
    assert [m.to_dict() for m in reconstructor.messages] == [m.to_dict() for m in reconstruct_lines(lines)]
    assert reconstructor.counters.order == 3


def test_stats_count_skips_drops_and_orphans():
    reconstructor = TranscriptReconstructor()
    reconstructor.feed_lines(
        [
            "not json",
            json.dumps({"type": "summary"}),
            json.dumps(_assistant([{"type": "tool_use", "id": "A", "name": "Bash"}], "T1")),
            json.dumps(_user([{"type": "tool_result", "tool_use_id": "A", "content": "ok"}], "T2")),
            json.dumps(_user([{"type": "tool_result", "tool_use_id": "Q", "content": "?"}], "T3")),
            json.dumps(_user("   ", "T4")),
        ]
    )

    stats = reconstructor.stats
    assert stats.lines == 6
    assert stats.skipped_lines == 2
    assert stats.applied_results == 1
    assert stats.orphaned_results == 1
    assert stats.dropped_events == 2


def test_lines_json_cannot_load_do_not_abort_reconstruction():
    oversized = '{"type": "user", "n": ' + "1" * 5000 + ', "message": {"role": "user", "content": "x"}}'
    nested = "[" * 100_000 + "]" * 100_000
    text = "\n".join([oversized, nested, json.dumps(_user("hi", "T1"))])

    reconstructor = TranscriptReconstructor()
    reconstructor.feed_lines(text.split("\n"))

    assert [m.content for m in reconstruct_transcript(text)] == ["hi"]
    assert reconstructor.stats.skipped_lines == 2
