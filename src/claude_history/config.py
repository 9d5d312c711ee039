"""Path resolution for Claude Code's local data directory."""

import os
from pathlib import Path

# Conversation logs larger than this are read as a head + tail excerpt.
MAX_CONVERSATION_BYTES = 2 * 1024 * 1024
READ_OVERLAP_BYTES = 64


def get_claude_dir() -> Path:
    """Return the base directory Claude Code writes its history into."""
    env = os.environ.get("CLAUDE_HISTORY_DIR")
    if env:
        return Path(env)

    return Path.home() / ".claude"


def get_history_path() -> Path:
    """Return the path to the global history.jsonl log."""
    return get_claude_dir() / "history.jsonl"


def get_projects_path() -> Path:
    """Return the path to the per-project conversation logs."""
    return get_claude_dir() / "projects"


def get_plans_path() -> Path:
    """Return the path to the saved plan documents."""
    env = os.environ.get("CLAUDE_HISTORY_PLANS_DIR")
    if env:
        return Path(env)

    return get_claude_dir() / "plans"
