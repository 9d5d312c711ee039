"""Flatten structured message content into display text."""

from dataclasses import dataclass
from typing import Union

from .core import ContentBlock

TOOL_ARG_MAX_LENGTH = 80


@dataclass(frozen=True)
class ToolDisplayRule:
    """Which tool input to show next to the tool name, and how."""

    field: str
    code: bool = False


TOOL_DISPLAY_RULES: dict[str, ToolDisplayRule] = {
    "Read": ToolDisplayRule("file_path", code=True),
    "Write": ToolDisplayRule("file_path", code=True),
    "Edit": ToolDisplayRule("file_path", code=True),
    "Bash": ToolDisplayRule("command", code=True),
    "Grep": ToolDisplayRule("pattern", code=True),
    "Glob": ToolDisplayRule("pattern", code=True),
    "Task": ToolDisplayRule("description"),
    "Skill": ToolDisplayRule("skill"),
}


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "…"


def format_tool_use(block: ContentBlock) -> str:
    """Summarise a tool_use block on one line, e.g. ``> **Bash** `ls -la```."""
    name = block.name or "unknown"
    rule = TOOL_DISPLAY_RULES.get(name) if block.input else None
    value = block.input.get(rule.field) if rule else None

    if not value:
        return f"> **{name}**"

    display = truncate(str(value), TOOL_ARG_MAX_LENGTH)
    if rule.code:
        return f"> **{name}** `{display}`"
    return f"> **{name}** {display}"


def extract_text_content(content: Union[str, list[ContentBlock]]) -> str:
    """Return the readable text of a message.

    Text blocks are kept verbatim and tool calls are summarised. Tool
    results and thinking blocks are left out.
    """
    if isinstance(content, str):
        return content

    parts = []
    for block in content:
        if block.type == "text" and block.text:
            parts.append(block.text)
        elif block.type == "tool_use" and block.name:
            parts.append(format_tool_use(block))
    return "\n\n".join(parts)


def is_tool_result_only(content: Union[str, list[ContentBlock]]) -> bool:
    """True for a synthetic user turn that carries nothing but tool output."""
    if isinstance(content, str) or not content:
        return False
    return all(block.type == "tool_result" for block in content)
