"""Claude Code history: session aggregation and conversation loading.

Reads two kinds of append-only logs written by Claude Code:

- ``~/.claude/history.jsonl``: one record per prompt, carrying the prompt
  label, a millisecond timestamp, the project path and the session id.
  Many records share a session id.
- ``~/.claude/projects/<encoded-project>/<sessionId>.jsonl``: the full
  conversation log of one session. Entry types "user" and "assistant" are
  kept; "progress", "file-history-snapshot" and other bookkeeping records
  are dropped.

Every loader absorbs I/O and decode failures and returns an empty list.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional

from .config import MAX_CONVERSATION_BYTES, get_history_path, get_projects_path
from .core import ConversationMessage, HistoryEntry, Session, SortOrder
from .jsonl import parse_jsonl
from .reader import aread_bounded, read_bounded

logger = logging.getLogger(__name__)

CONVERSATION_TYPES = ("user", "assistant")


# ── History log ──────────────────────────────────────────────────


def load_history_entries() -> list[HistoryEntry]:
    """Read every record of the history log."""
    path = get_history_path()
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug("History log unavailable at %s: %s", path, e)
        return []
    return parse_jsonl(text, HistoryEntry.from_dict)


async def aload_history_entries() -> list[HistoryEntry]:
    return await asyncio.to_thread(load_history_entries)


def get_unique_projects(entries: list[HistoryEntry]) -> list[str]:
    """Return the distinct non-empty project paths, sorted."""
    return sorted({e.project for e in entries if e.project})


def get_project_name(project_path: str) -> str:
    """Return the last segment of a project path."""
    return re.split(r"[/\\]", project_path.rstrip("/\\"))[-1]


def build_sessions(entries: list[HistoryEntry]) -> list[Session]:
    """Fold history entries into one Session per session id.

    The first entry seen for an id fixes its display label, creation time
    and project; later entries only advance ``last_active_at``. Sessions
    come back in first-seen order.
    """
    first_seen: dict[str, HistoryEntry] = {}
    last_active: dict[str, int] = {}

    for entry in entries:
        if not entry.session_id:
            continue
        if entry.session_id not in first_seen:
            first_seen[entry.session_id] = entry
            last_active[entry.session_id] = entry.timestamp
        elif entry.timestamp > last_active[entry.session_id]:
            last_active[entry.session_id] = entry.timestamp

    return [
        Session(
            id=session_id,
            display=entry.display,
            timestamp=entry.timestamp,
            last_active_at=last_active[session_id],
            project=entry.project,
            project_name=get_project_name(entry.project),
        )
        for session_id, entry in first_seen.items()
    ]


def sort_sessions(sessions: list[Session], order: SortOrder = "recent") -> list[Session]:
    """Return sessions newest first, by last activity or by creation time."""
    if order == "recent":
        return sorted(sessions, key=lambda s: s.last_active_at, reverse=True)
    if order == "created":
        return sorted(sessions, key=lambda s: s.timestamp, reverse=True)
    raise ValueError(f"Unknown sort order: {order!r}")


def filter_sessions(
    sessions: list[Session],
    project: Optional[str] = None,
    search: Optional[str] = None,
) -> list[Session]:
    """Keep sessions of one project and/or matching a search string."""
    if project:
        sessions = [s for s in sessions if s.project == project]
    if search:
        needle = search.lower()
        sessions = [
            s for s in sessions
            if needle in s.display.lower() or needle in s.project.lower()
        ]
    return sessions


def find_session(sessions: list[Session], session_id: str) -> Optional[Session]:
    return next((s for s in sessions if s.id == session_id), None)


def resume_command(session_id: str, skip_permissions: bool = False) -> str:
    """Return the shell command that resumes a session in Claude Code."""
    if skip_permissions:
        return f"claude --dangerously-skip-permissions --resume {session_id}"
    return f"claude --resume {session_id}"


# ── Conversation logs ────────────────────────────────────────────


def encode_project_path(project_path: str) -> str:
    """Map a project path to its directory name under ~/.claude/projects.

    /Users/alice/dev/webapp -> -Users-alice-dev-webapp
    """
    return re.sub(r"[/\\]", "-", project_path)


def get_session_path(session: Session) -> Path:
    return get_projects_path() / encode_project_path(session.project) / f"{session.id}.jsonl"


def _decode_conversation(text: str) -> list[ConversationMessage]:
    if not text:
        return []
    messages = parse_jsonl(text, ConversationMessage.from_dict)
    return [m for m in messages if m.type in CONVERSATION_TYPES]


def load_conversation(session: Session) -> list[ConversationMessage]:
    """Return the user and assistant turns of a session's log."""
    text = read_bounded(get_session_path(session), MAX_CONVERSATION_BYTES)
    return _decode_conversation(text)


async def aload_conversation(session: Session) -> list[ConversationMessage]:
    text = await aread_bounded(get_session_path(session), MAX_CONVERSATION_BYTES)
    return _decode_conversation(text)
