"""FastAPI web server for claude-history."""

import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, Response

from .core import PlanFile, Session
from .export import (
    format_messages_as_markdown,
    get_prompts,
    message_to_dict,
    session_to_dict,
    session_to_json,
    session_to_markdown,
)
from .history import (
    aload_conversation,
    aload_history_entries,
    build_sessions,
    filter_sessions,
    find_session,
    get_project_name,
    get_unique_projects,
    resume_command,
    sort_sessions,
)
from .plans import aload_plans, delete_plan, find_plan
from .selection import ConversationSelection, SelectionSuperseded

logger = logging.getLogger(__name__)

app = FastAPI(title="claude-history", version="0.1.0")

# The session shown in the conversation pane.
_selection = ConversationSelection()


async def _get_session(session_id: str) -> Session:
    """Look up a session by id or raise 404."""
    sessions = build_sessions(await aload_history_entries())
    session = find_session(sessions, session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _plan_to_dict(plan: PlanFile, with_content: bool = False) -> dict:
    data = {
        "name": plan.name,
        "title": plan.display_title,
        "path": plan.path,
        "modified_at": plan.modified_at.isoformat(),
    }
    if with_content:
        data["content"] = plan.content
    return data


# ── Routes ───────────────────────────────────────────────────────


@app.get("/")
async def index():
    """Serve the frontend."""
    html_path = Path(__file__).parent / "static" / "index.html"
    if not html_path.exists():
        raise HTTPException(status_code=404, detail="Frontend not found")
    return HTMLResponse(html_path.read_text(encoding="utf-8"))


@app.get("/api/projects")
async def get_projects():
    """Return the projects that appear in the history log."""
    entries = await aload_history_entries()
    return [
        {"path": path, "name": get_project_name(path)}
        for path in get_unique_projects(entries)
    ]


@app.get("/api/sessions")
async def get_sessions(
    project: str | None = Query(None, description="Filter by project path"),
    search: str | None = Query(None, description="Search in labels and projects"),
    sort: str = Query("recent", description="Sort: recent or created"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    """Return sessions built from the history log."""
    if sort not in ("recent", "created"):
        raise HTTPException(status_code=400, detail=f"Unknown sort order: {sort}")

    sessions = build_sessions(await aload_history_entries())
    sessions = filter_sessions(sessions, project=project, search=search)
    sessions = sort_sessions(sessions, sort)

    total = len(sessions)
    sessions = sessions[offset: offset + limit]

    return {
        "total": total,
        "sessions": [session_to_dict(s) for s in sessions],
    }


@app.get("/api/session/{session_id}")
async def get_session(session_id: str, refresh: bool = Query(False)):
    """Select a session and return its rendered conversation."""
    session = await _get_session(session_id)

    try:
        messages = await _selection.select(session, refresh=refresh)
    except SelectionSuperseded:
        raise HTTPException(status_code=409, detail="Superseded by a newer selection")
    except Exception as e:
        logger.error("Failed to load conversation %s: %s", session_id, e)
        raise HTTPException(status_code=500, detail="Failed to load conversation")

    prompts = get_prompts(messages)
    return {
        "session": session_to_dict(session),
        "markdown": format_messages_as_markdown(messages),
        "first_prompt": prompts.first,
        "last_prompt": prompts.last,
        "resume_command": resume_command(session.id),
        "resume_command_skip_permissions": resume_command(session.id, skip_permissions=True),
        "messages": [message_to_dict(m) for m in messages],
    }


@app.get("/api/export/{session_id}")
async def export_session(
    session_id: str,
    format: str = Query("md", description="Export format: md or json"),
):
    """Export a session as Markdown or JSON."""
    session = await _get_session(session_id)
    messages = await aload_conversation(session)

    if format == "json":
        content = session_to_json(session, messages)
        return Response(
            content=content,
            media_type="application/json",
            headers={"Content-Disposition": f'attachment; filename="{session.id}.json"'},
        )
    else:
        content = session_to_markdown(session, messages)
        return Response(
            content=content,
            media_type="text/markdown",
            headers={"Content-Disposition": f'attachment; filename="{session.id}.md"'},
        )


@app.get("/api/plans")
async def get_plans():
    """Return saved plan documents, newest first."""
    return [_plan_to_dict(p) for p in await aload_plans()]


@app.get("/api/plans/{name}")
async def get_plan(name: str):
    try:
        plan = find_plan(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if plan is None:
        raise HTTPException(status_code=404, detail="Plan not found")
    return _plan_to_dict(plan, with_content=True)


@app.delete("/api/plans/{name}")
async def remove_plan(name: str):
    try:
        deleted = delete_plan(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError as e:
        logger.error("Failed to delete plan %s: %s", name, e)
        raise HTTPException(status_code=500, detail="Failed to delete plan")
    if not deleted:
        raise HTTPException(status_code=404, detail="Plan not found")
    return {"deleted": name}
