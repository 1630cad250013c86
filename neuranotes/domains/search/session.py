"""
Search Session - Debounced, cancellable search with published state.

All methods run on a single event loop. Each attempt is stamped with a
generation number; an attempt publishes only if its generation is still
current when it completes, so a superseded attempt never overwrites newer
state even when its store calls finish.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from .cascade import KEYWORD_WEIGHTS, SEMANTIC_WEIGHTS, build_query
from .models import SearchMethod, SearchOptions, SearchOutcome, SessionState

if TYPE_CHECKING:
    from .contracts import SearchEngine

logger = logging.getLogger(__name__)

__all__ = ["SearchSession", "StateListener"]

StateListener = Callable[[SessionState], None]


class SearchSession:
    """
    Client-facing search controller.

    Example:
        >>> session = SearchSession(engine, debounce_ms=300)
        >>> session.submit("artif")
        >>> session.submit("artificial intel")  # supersedes the first call
        >>> await session.wait()
        >>> session.state.query
        'artificial intel'
    """

    def __init__(
        self,
        engine: SearchEngine,
        debounce_ms: int = 300,
        default_limit: int = 10,
        default_lexical_weight: float = 0.5,
        default_vector_weight: float = 0.5,
    ) -> None:
        self._engine = engine
        self._debounce_s = debounce_ms / 1000
        self._default_limit = default_limit
        self._default_lexical_weight = default_lexical_weight
        self._default_vector_weight = default_vector_weight

        self._generation = 0
        self._timer: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[None] | None = None
        self._state = SessionState()
        self._listeners: list[StateListener] = []

    # --- Published state ---

    @property
    def state(self) -> SessionState:
        """Latest published snapshot."""
        return self._state

    @property
    def is_searching(self) -> bool:
        return self._state.is_searching

    @property
    def generation(self) -> int:
        """Marker of the most recent attempt."""
        return self._generation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a state listener; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- Entry points ---

    def submit(self, text: str, options: SearchOptions | None = None) -> None:
        """
        Schedule a debounced search; only the last call in the window runs.

        Supersedes any in-flight attempt immediately.
        """
        self._generation += 1
        self._cancel_timer()
        self._cancel_inflight()
        self._timer = asyncio.create_task(self._debounced(text, options))

    def submit_now(
        self, text: str, options: SearchOptions | None = None
    ) -> asyncio.Task[None] | None:
        """
        Start a search immediately, bypassing the debounce window.

        Returns:
            The attempt task, or None when the text is blank
        """
        self._cancel_timer()
        return self._start_attempt(text, options)

    def search_keywords(
        self, text: str, options: SearchOptions | None = None
    ) -> asyncio.Task[None] | None:
        """Keyword-focused immediate search."""
        return self.submit_now(text, _with_weights(options, *KEYWORD_WEIGHTS))

    def search_semantic(
        self, text: str, options: SearchOptions | None = None
    ) -> asyncio.Task[None] | None:
        """Semantic-focused immediate search."""
        return self.submit_now(text, _with_weights(options, *SEMANTIC_WEIGHTS))

    def search_document(
        self, text: str, document_id: str, options: SearchOptions | None = None
    ) -> asyncio.Task[None] | None:
        """Immediate search scoped to one document; limit defaults to 5."""
        options = options or SearchOptions()
        return self.submit_now(
            text,
            options.model_copy(update={"document_id": document_id, "limit": options.limit or 5}),
        )

    def search_global(
        self, text: str, options: SearchOptions | None = None
    ) -> asyncio.Task[None] | None:
        """Immediate search across all documents."""
        options = options or SearchOptions()
        return self.submit_now(text, options.model_copy(update={"document_id": None}))

    def cancel(self) -> None:
        """Abort pending and in-flight work and clear published state."""
        self._generation += 1
        self._cancel_timer()
        self._cancel_inflight()
        self._publish(SessionState())

    async def close(self) -> None:
        """Cancel everything and let cancelled tasks unwind."""
        pending = [t for t in (self._timer, self._inflight) if t is not None]
        self.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def wait(self) -> None:
        """Wait until no debounce timer or attempt is outstanding."""
        while True:
            pending = [t for t in (self._timer, self._inflight) if t is not None and not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # --- Internals ---

    async def _debounced(self, text: str, options: SearchOptions | None) -> None:
        await asyncio.sleep(self._debounce_s)
        self._timer = None
        self._start_attempt(text, options)

    def _start_attempt(
        self, text: str, options: SearchOptions | None
    ) -> asyncio.Task[None] | None:
        self._generation += 1
        generation = self._generation
        self._cancel_inflight()

        if not text or not text.strip():
            self._publish(SessionState())
            return None

        self._publish(self._state.model_copy(update={"is_searching": True, "error": None}))
        task = asyncio.create_task(self._run_attempt(generation, text, options))
        self._inflight = task
        return task

    async def _run_attempt(
        self, generation: int, text: str, options: SearchOptions | None
    ) -> None:
        try:
            outcome = await self._engine.search(self._build_query(text, options))
        except asyncio.CancelledError:
            logger.debug("Search attempt %d cancelled", generation)
            return
        except Exception as e:
            logger.exception("Search attempt %d failed", generation)
            outcome = SearchOutcome(
                success=False,
                query=text,
                method=SearchMethod.ERROR,
                error=str(e) or type(e).__name__,
            )
        finally:
            if self._inflight is asyncio.current_task():
                self._inflight = None

        if generation != self._generation:
            logger.debug("Dropping stale outcome of attempt %d", generation)
            return

        self._publish(_state_from(outcome, text))

    def _build_query(self, text: str, options: SearchOptions | None):
        options = options or SearchOptions()
        return build_query(
            text,
            options.model_copy(
                update={
                    "lexical_weight": (
                        self._default_lexical_weight
                        if options.lexical_weight is None
                        else options.lexical_weight
                    ),
                    "vector_weight": (
                        self._default_vector_weight
                        if options.vector_weight is None
                        else options.vector_weight
                    ),
                }
            ),
            default_limit=self._default_limit,
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None and self._timer is not asyncio.current_task():
            self._timer.cancel()
        self._timer = None

    def _cancel_inflight(self) -> None:
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        self._inflight = None

    def _publish(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.warning("Search state listener failed", exc_info=True)


def _with_weights(
    options: SearchOptions | None, lexical_weight: float, vector_weight: float
) -> SearchOptions:
    options = options or SearchOptions()
    return options.model_copy(
        update={"lexical_weight": lexical_weight, "vector_weight": vector_weight}
    )


def _state_from(outcome: SearchOutcome, text: str) -> SessionState:
    if outcome.success:
        return SessionState(
            is_searching=False,
            query=text,
            results=outcome.results,
            total=outcome.total,
            method=outcome.method,
            duration_ms=outcome.duration_ms,
        )
    return SessionState(
        is_searching=False,
        query=text,
        error=outcome.error,
        method=outcome.method,
        duration_ms=outcome.duration_ms,
    )
