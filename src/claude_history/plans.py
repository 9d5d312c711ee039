"""Saved plan documents in ~/.claude/plans/."""

import asyncio
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .config import get_plans_path
from .core import PlanFile

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^#\s+(.+)", re.MULTILINE)


def extract_first_heading(content: str) -> Optional[str]:
    """Return the text of the first top-level heading, if any."""
    match = _HEADING_RE.search(content)
    if not match:
        return None
    return match.group(1).strip() or None


def _read_plan(path: Path) -> PlanFile:
    content = path.read_text(encoding="utf-8", errors="replace")
    modified = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    return PlanFile(
        name=path.stem,
        path=str(path),
        content=content,
        modified_at=modified,
        title=extract_first_heading(content),
    )


def load_plans() -> list[PlanFile]:
    """Return every plan document, most recently modified first."""
    base = get_plans_path()
    if not base.is_dir():
        return []

    plans = []
    try:
        for path in base.glob("*.md"):
            if not path.is_file():
                continue
            try:
                plans.append(_read_plan(path))
            except OSError as e:
                logger.warning("Failed to read plan %s: %s", path, e)
    except OSError as e:
        logger.warning("Failed to list plans in %s: %s", base, e)
        return []

    plans.sort(key=lambda p: p.modified_at, reverse=True)
    return plans


async def aload_plans() -> list[PlanFile]:
    return await asyncio.to_thread(load_plans)


def _plan_path(name: str) -> Path:
    if not name or "/" in name or "\\" in name or name in (".", ".."):
        raise ValueError(f"Invalid plan name: {name!r}")
    return get_plans_path() / f"{name}.md"


def find_plan(name: str) -> Optional[PlanFile]:
    """Return the plan called ``name`` (without .md), or None."""
    path = _plan_path(name)
    if not path.is_file():
        return None
    try:
        return _read_plan(path)
    except OSError as e:
        logger.warning("Failed to read plan %s: %s", path, e)
        return None


def delete_plan(name: str) -> bool:
    """Delete a plan document. Returns False if it did not exist."""
    path = _plan_path(name)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    logger.info("Deleted plan %s", path)
    return True
