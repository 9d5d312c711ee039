"""Render conversations as Markdown and export sessions to Markdown or JSON."""

import json
from typing import NamedTuple, Optional

from .content import extract_text_content, is_tool_result_only
from .core import ContentBlock, ConversationMessage, Session
from .history import resume_command

NO_MESSAGES = "*No messages found*"


class Prompts(NamedTuple):
    """The first and last prompts a user typed in a session."""

    first: Optional[str]
    last: Optional[str]


def _is_genuine_prompt(msg: ConversationMessage) -> bool:
    return (
        msg.type == "user"
        and msg.message is not None
        and not is_tool_result_only(msg.message.content)
    )


def format_messages_as_markdown(messages: list[ConversationMessage]) -> str:
    """Render user and assistant turns as one Markdown document.

    Tool-result-only user turns and turns without visible text are skipped.
    Returns NO_MESSAGES when nothing is left to show.
    """
    sections = []

    for msg in messages:
        if msg.message is None:
            continue
        if msg.type == "user" and is_tool_result_only(msg.message.content):
            continue

        text = extract_text_content(msg.message.content)
        if not text:
            continue

        role = "User" if msg.type == "user" else "Assistant"
        sections.append(f"### {role}\n{text}")

    return "\n\n".join(sections) if sections else NO_MESSAGES


def get_prompts(messages: list[ConversationMessage]) -> Prompts:
    """Pick the first and (if there are two or more) last genuine user prompt."""
    prompts = [
        extract_text_content(msg.message.content)
        for msg in messages
        if _is_genuine_prompt(msg)
    ]
    first = prompts[0] if prompts else None
    last = prompts[-1] if len(prompts) >= 2 else None
    return Prompts(first, last)


def session_to_markdown(session: Session, messages: list[ConversationMessage]) -> str:
    """Export a session and its conversation as a standalone Markdown file."""
    lines = [f"# {session.display or session.id}", ""]

    if session.project:
        lines.append(f"**Project:** {session.project}")
    lines.append(f"**Session:** {session.id}")
    lines.append(f"**Created:** {session.created.isoformat()}")
    lines.append(f"**Last active:** {session.last_active.isoformat()}")
    lines.append(f"**Resume:** `{resume_command(session.id)}`")
    lines.extend(["", "---", ""])
    lines.append(format_messages_as_markdown(messages))
    lines.append("")

    return "\n".join(lines)


def _content_to_json(content):
    if isinstance(content, str):
        return content
    return [_block_to_dict(block) for block in content]


def _block_to_dict(block: ContentBlock) -> dict:
    data = {"type": block.type}
    for key in ("text", "thinking", "name", "input"):
        value = getattr(block, key)
        if value is not None:
            data[key] = value
    if block.content is not None:
        data["content"] = _content_to_json(block.content)
    return data


def message_to_dict(msg: ConversationMessage) -> dict:
    return {
        "type": msg.type,
        "uuid": msg.uuid,
        "timestamp": msg.timestamp,
        "session_id": msg.session_id,
        "role": msg.message.role if msg.message else None,
        "model": msg.message.model if msg.message else None,
        "text": extract_text_content(msg.message.content) if msg.message else "",
        "content": _content_to_json(msg.message.content) if msg.message else None,
    }


def session_to_dict(session: Session) -> dict:
    return {
        "id": session.id,
        "display": session.display,
        "timestamp": session.timestamp,
        "last_active_at": session.last_active_at,
        "created": session.created.isoformat(),
        "last_active": session.last_active.isoformat(),
        "project": session.project,
        "project_name": session.project_name,
    }


def session_to_json(session: Session, messages: list[ConversationMessage]) -> str:
    """Export a session and its conversation as structured JSON."""
    prompts = get_prompts(messages)
    data = {
        "session": session_to_dict(session),
        "first_prompt": prompts.first,
        "last_prompt": prompts.last,
        "messages": [message_to_dict(msg) for msg in messages],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)
