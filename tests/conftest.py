"""Shared test fixtures for claude-history."""

import json
import os

import pytest

from claude_history.core import ContentBlock, ConversationMessage, MessagePayload


def user_turn(text, uuid="u"):
    return ConversationMessage(
        type="user",
        uuid=uuid,
        message=MessagePayload(role="user", content=[ContentBlock(type="text", text=text)]),
    )


def assistant_turn(text, uuid="a"):
    return ConversationMessage(
        type="assistant",
        uuid=uuid,
        message=MessagePayload(role="assistant", content=[ContentBlock(type="text", text=text)]),
    )


def tool_result_turn(output="ok", uuid="t"):
    return ConversationMessage(
        type="user",
        uuid=uuid,
        message=MessagePayload(
            role="user",
            content=[ContentBlock(type="tool_result", content=output)],
        ),
    )


@pytest.fixture
def tmp_claude_dir(tmp_path, monkeypatch):
    """Create a synthetic ~/.claude directory and point the config at it.

    Includes:
    - history.jsonl with three sessions across two projects, an entry
      without a session id and a malformed line
    - a realistic conversation log for session-001
    - two plan documents
    """
    claude_dir = tmp_path / ".claude"
    claude_dir.mkdir()
    monkeypatch.setenv("CLAUDE_HISTORY_DIR", str(claude_dir))
    monkeypatch.delenv("CLAUDE_HISTORY_PLANS_DIR", raising=False)

    history = [
        json.dumps({
            "display": "Help me refactor the auth module",
            "timestamp": 1_737_367_200_000,
            "project": "/Users/testuser/dev/myapp",
            "sessionId": "session-001",
        }),
        json.dumps({
            "display": "Write tests for the API",
            "timestamp": 1_737_370_800_000,
            "project": "/Users/testuser/dev/api",
            "sessionId": "session-002",
        }),
        # Later prompt in session-001, its most recent activity
        json.dumps({
            "display": "Looks good, now split it into separate files",
            "timestamp": 1_737_378_000_000,
            "project": "/Users/testuser/dev/myapp",
            "sessionId": "session-001",
        }),
        # No session id: skipped
        json.dumps({
            "display": "/help",
            "timestamp": 1_737_374_400_000,
            "project": "/Users/testuser/dev/myapp",
        }),
        "this is not json",
        json.dumps({
            "display": "",
            "timestamp": 1_737_374_400_000,
            "project": "/Users/testuser/dev/myapp",
            "sessionId": "session-003",
        }),
    ]
    (claude_dir / "history.jsonl").write_text("\n".join(history) + "\n", encoding="utf-8")

    project_dir = claude_dir / "projects" / "-Users-testuser-dev-myapp"
    project_dir.mkdir(parents=True)

    lines = [
        # 1. User prompt
        json.dumps({
            "type": "user",
            "message": {"role": "user", "content": [{"type": "text", "text": "Help me refactor the auth module"}]},
            "timestamp": "2025-01-20T10:00:00Z",
            "uuid": "uuid-001",
            "sessionId": "session-001",
        }),
        # 2. Assistant text + tool_use in same entry
        json.dumps({
            "type": "assistant",
            "message": {"role": "assistant", "model": "claude-sonnet-4", "content": [
                {"type": "text", "text": "I'll help you refactor the auth module. Let me start by reading the current code."},
                {"type": "tool_use", "id": "toolu_001", "name": "Read", "input": {"file_path": "/src/auth.ts"}},
            ]},
            "timestamp": "2025-01-20T10:00:30Z",
            "uuid": "uuid-002",
            "sessionId": "session-001",
        }),
        # 3. Tool result (appears as user type entry)
        json.dumps({
            "type": "user",
            "message": {"role": "user", "content": [
                {"type": "tool_result", "tool_use_id": "toolu_001", "content": "export function authenticate(token: string) {}"},
            ]},
            "timestamp": "2025-01-20T10:00:31Z",
            "uuid": "uuid-003",
            "sessionId": "session-001",
        }),
        # 4. Assistant with thinking block
        json.dumps({
            "type": "assistant",
            "message": {"role": "assistant", "content": [
                {"type": "thinking", "thinking": "I need to split validation from token refresh."},
                {"type": "text", "text": "I can see the auth module. Let me refactor it into separate concerns."},
                {"type": "tool_use", "id": "toolu_002", "name": "Edit", "input": {"file_path": "/src/auth.ts", "new_string": "..."}},
            ]},
            "timestamp": "2025-01-20T10:01:00Z",
            "uuid": "uuid-004",
            "sessionId": "session-001",
        }),
        # 5. file-history-snapshot (dropped)
        json.dumps({
            "type": "file-history-snapshot",
            "snapshot": {"trackedFileBackups": {}},
        }),
        # 6. User follow-up, plain string content
        json.dumps({
            "type": "user",
            "message": {"role": "user", "content": "Looks good, now split it into separate files"},
            "timestamp": "2025-01-20T10:05:00Z",
            "uuid": "uuid-006",
            "sessionId": "session-001",
        }),
        # 7. Progress entry (dropped)
        json.dumps({
            "type": "progress",
            "data": {"type": "hook_progress"},
        }),
        # 8. Truncated line from an interrupted write
        '{"type": "assistant", "message": {"role": "assis',
        # 9. Assistant with just tool_use
        json.dumps({
            "type": "assistant",
            "message": {"role": "assistant", "content": [
                {"type": "tool_use", "id": "toolu_003", "name": "Bash", "input": {"command": "mkdir -p /src/auth/"}},
            ]},
            "timestamp": "2025-01-20T10:05:30Z",
            "uuid": "uuid-007",
            "sessionId": "session-001",
        }),
    ]
    (project_dir / "session-001.jsonl").write_text("\n".join(lines) + "\n", encoding="utf-8")

    plans_dir = claude_dir / "plans"
    plans_dir.mkdir()
    older = plans_dir / "auth-refactor.md"
    older.write_text("Intro line\n\n# Auth refactor plan\n\n- split module\n", encoding="utf-8")
    newer = plans_dir / "untitled-plan.md"
    newer.write_text("No heading here, just notes.\n", encoding="utf-8")
    (plans_dir / "notes.txt").write_text("# not a plan\n", encoding="utf-8")
    os.utime(older, (1_700_000_000, 1_700_000_000))
    os.utime(newer, (1_700_100_000, 1_700_100_000))

    return claude_dir
