"""Single-flight loading of the currently selected conversation.

Only one session is "selected" at a time. Requests for the selected
session share one in-flight load; selecting a different session cancels
the previous load, and anyone still waiting on it gets
SelectionSuperseded instead of a stale result.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from .core import ConversationMessage, Session
from .history import aload_conversation

logger = logging.getLogger(__name__)

Loader = Callable[[Session], Awaitable[list[ConversationMessage]]]


class SelectionSuperseded(Exception):
    """A newer selection replaced the one being waited on."""

    def __init__(self, session_id: str):
        super().__init__(f"Selection of {session_id} was superseded")
        self.session_id = session_id


class ConversationSelection:
    """Loads conversations for whichever session is currently selected."""

    def __init__(self, loader: Loader = aload_conversation):
        self._loader = loader
        self._generation = 0
        self._selected_id: Optional[str] = None
        self._task: Optional[asyncio.Task] = None
        self._result: Optional[list[ConversationMessage]] = None

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def generation(self) -> int:
        return self._generation

    async def select(
        self, session: Session, refresh: bool = False
    ) -> list[ConversationMessage]:
        """Select ``session`` and return its conversation.

        Raises SelectionSuperseded if another session is selected before
        the load completes.
        """
        if session.id == self._selected_id:
            # A refresh while a load is running joins that load.
            if refresh:
                self._result = None
            if self._result is not None:
                return self._result
            task = self._task
        else:
            task = None

        if task is None:
            task = self._start(session)

        generation = self._generation
        await asyncio.wait({task})

        if task.cancelled() or generation != self._generation:
            raise SelectionSuperseded(session.id)
        return task.result()

    def clear(self) -> None:
        """Drop the selection and cancel any in-flight load."""
        self._generation += 1
        self._cancel_inflight()
        self._selected_id = None
        self._result = None

    def _start(self, session: Session) -> asyncio.Task:
        self._generation += 1
        self._cancel_inflight()
        self._selected_id = session.id
        self._result = None

        generation = self._generation
        task = asyncio.ensure_future(self._loader(session))
        task.add_done_callback(lambda t: self._finish(generation, t))
        self._task = task
        logger.debug("Loading conversation %s (generation %d)", session.id, generation)
        return task

    def _cancel_inflight(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _finish(self, generation: int, task: asyncio.Task) -> None:
        # Results of abandoned loads are discarded.
        if generation != self._generation or task.cancelled():
            return
        if task.exception() is not None:
            self._task = None
            return
        self._result = task.result()
        self._task = None
