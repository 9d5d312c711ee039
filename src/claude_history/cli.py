"""CLI entry point for claude-history."""

import logging

import click
import uvicorn

from .export import format_messages_as_markdown, get_prompts
from .history import (
    build_sessions,
    filter_sessions,
    find_session,
    get_project_name,
    get_unique_projects,
    load_conversation,
    load_history_entries,
    resume_command,
    sort_sessions,
)
from .plans import load_plans


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Browse Claude Code conversation history and saved plans."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--port", default=8080, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
def serve(port: int, host: str):
    """Start the web interface."""
    click.echo(f"Starting claude-history on http://{host}:{port}")
    uvicorn.run("claude_history.server:app", host=host, port=port, reload=False)


@main.command()
def projects():
    """List projects that have history."""
    for path in get_unique_projects(load_history_entries()):
        click.echo(f"{get_project_name(path)}\t{path}")


@main.command()
@click.option("--project", default=None, help="Only sessions of this project path.")
@click.option("--search", default=None, help="Case-insensitive filter on label and project.")
@click.option(
    "--sort", "order", type=click.Choice(["recent", "created"]), default="recent",
    help="Order by last activity or creation time.",
)
@click.option("--limit", default=50, show_default=True, help="Maximum sessions to show.")
def sessions(project: str | None, search: str | None, order: str, limit: int):
    """List sessions, newest first."""
    found = build_sessions(load_history_entries())
    found = sort_sessions(filter_sessions(found, project=project, search=search), order)
    for session in found[:limit]:
        when = session.last_active if order == "recent" else session.created
        label = session.display or f"[{session.created:%Y-%m-%d %H:%M}]"
        click.echo(f"{session.id}  {when:%Y-%m-%d %H:%M}  {session.project_name}  {label}")


@main.command()
@click.argument("session_id")
@click.option(
    "--prompt", type=click.Choice(["first", "last"]), default=None,
    help="Print only the first or last user prompt.",
)
def show(session_id: str, prompt: str | None):
    """Print a session's conversation as Markdown."""
    session = find_session(build_sessions(load_history_entries()), session_id)
    if session is None:
        raise click.ClickException(f"Session not found: {session_id}")

    messages = load_conversation(session)
    if prompt is None:
        click.echo(format_messages_as_markdown(messages))
        return

    prompts = get_prompts(messages)
    text = prompts.first if prompt == "first" else prompts.last
    if text is None:
        raise click.ClickException(f"Session has no {prompt} prompt")
    click.echo(text)


@main.command()
@click.argument("session_id")
@click.option("--skip-permissions", is_flag=True, help="Add --dangerously-skip-permissions.")
def resume(session_id: str, skip_permissions: bool):
    """Print the command that resumes a session."""
    click.echo(resume_command(session_id, skip_permissions=skip_permissions))


@main.command()
def plans():
    """List saved plan documents, newest first."""
    for plan in load_plans():
        click.echo(f"{plan.modified_at:%Y-%m-%d %H:%M}  {plan.display_title}\t{plan.path}")
