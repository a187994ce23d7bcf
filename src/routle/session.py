"""Session orchestration: one game, guesses processed one at a time."""

from __future__ import annotations

import asyncio
import logging
import random
from collections import deque
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable
from uuid import uuid4

from routle.adapters.geocoder import Geocoder, GeocoderError
from routle.game_state import GuessVerdict, apply_guess, new_game
from routle.models import GameState, MapConfig, Viewport
from routle.resolver import resolve
from routle.sampler import SessionStartError, pick_start_and_end
from routle.telemetry.logging import NullTelemetry, Telemetry

ViewportProvider = Callable[[], Viewport]


class GuessJobStatus(str, Enum):
    """Lifecycle states for submitted guesses."""

    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


@dataclass(slots=True)
class GuessJob:
    """One submitted guess and what became of it."""

    id: str
    query: str
    submitted_at: datetime
    status: GuessJobStatus
    verdict: GuessVerdict | None = None
    message: str | None = None
    error: str | None = None
    finished_at: datetime | None = None


class InMemoryGuessHistory:
    """Bounded in-memory guess history, newest first."""

    def __init__(self, max_jobs: int = 1_000) -> None:
        self._jobs: deque[GuessJob] = deque(maxlen=max_jobs)

    @property
    def max_jobs(self) -> int:
        return self._jobs.maxlen or 0

    def append(self, job: GuessJob) -> None:
        self._jobs.appendleft(job)

    def list_recent(self, limit: int) -> list[GuessJob]:
        return list(self._jobs)[:limit]


class GameSession:
    """Runs guesses for one game against a geocoder.

    Guesses are serialized with a lock: a guess submitted while another is in
    flight waits for it and then resolves against the committed state. Ending
    the session or calling :meth:`cancel_pending` discards in-flight guesses
    without touching the state.
    """

    def __init__(
        self,
        *,
        map_config: MapConfig,
        state: GameState,
        geocoder: Geocoder,
        viewport_provider: ViewportProvider,
        lookup_timeout_seconds: float = 8.0,
        telemetry: Telemetry | None = None,
        history: InMemoryGuessHistory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._map_config = map_config
        self._state = state
        self._geocoder = geocoder
        self._viewport_provider = viewport_provider
        self._lookup_timeout_seconds = lookup_timeout_seconds
        self._telemetry = telemetry or NullTelemetry()
        self._history = history or InMemoryGuessHistory()
        self._logger = logger or logging.getLogger("routle.session")

        self._lock = asyncio.Lock()
        self._generation = 0
        self._closed = False
        self._pending: set[asyncio.Task[GuessJob]] = set()

    @classmethod
    async def start(
        cls,
        *,
        map_config: MapConfig,
        geocoder: Geocoder,
        viewport_provider: ViewportProvider,
        rng: random.Random | None = None,
        max_attempts: int = 100,
        lookup_timeout_seconds: float = 8.0,
        telemetry: Telemetry | None = None,
    ) -> GameSession:
        """Sample start and end cities for ``map_config`` and open a session."""
        try:
            pool = await asyncio.wait_for(
                asyncio.to_thread(geocoder.sample_cities, map_config),
                timeout=lookup_timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise SessionStartError(f"Timed out sampling cities for map '{map_config.name}'") from exc
        except GeocoderError as exc:
            raise SessionStartError(f"Unable to sample cities for map '{map_config.name}': {exc}") from exc

        start_city, end_city = pick_start_and_end(pool, map_config, rng=rng, max_attempts=max_attempts)
        session = cls(
            map_config=map_config,
            state=new_game(map_config, start_city, end_city),
            geocoder=geocoder,
            viewport_provider=viewport_provider,
            lookup_timeout_seconds=lookup_timeout_seconds,
            telemetry=telemetry,
        )
        session._logger.info(
            "session_started",
            extra={"map": map_config.name, "start": start_city.name, "end": end_city.name},
        )
        return session

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def map_config(self) -> MapConfig:
        return self._map_config

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def search_radius(self) -> float:
        return self._state.search_radius

    def set_search_radius(self, value: float) -> None:
        if value <= 0:
            raise ValueError("Search radius must be > 0")
        self._state = replace(self._state, search_radius=float(value))

    def scale_search_radius(self, modifier: float) -> float:
        """Set the radius to the map's base radius times ``modifier``."""
        self.set_search_radius(self._map_config.search_radius * modifier)
        return self._state.search_radius

    def submit(self, query: str) -> asyncio.Task[GuessJob]:
        """Schedule a guess on the running loop and return its task."""
        task = asyncio.get_running_loop().create_task(self.guess(query), name=f"guess:{query}")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def guess(self, query: str) -> GuessJob:
        """Resolve one guess and commit the resulting state."""
        query = query.strip()
        if not query:
            raise ValueError("Guess must not be empty")

        job = GuessJob(
            id=uuid4().hex,
            query=query,
            submitted_at=datetime.now(timezone.utc),
            status=GuessJobStatus.QUEUED,
        )
        self._history.append(job)
        self._logger.info("guess_submitted", extra={"job_id": job.id, "query": query})

        if self._closed:
            return self._cancel(job, "Session is closed")

        generation = self._generation
        try:
            async with self._lock:
                if generation != self._generation:
                    return self._cancel(job, "Guess was cancelled before it started")
                return await self._run(job, generation)
        except asyncio.CancelledError:
            self._cancel(job, "Guess was cancelled while in flight")
            raise

    async def cancel_pending(self) -> None:
        """Discard every guess that has not committed yet."""
        self._generation += 1
        tasks = [task for task in self._pending if not task.done()]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._logger.info("pending_guesses_cancelled", extra={"count": len(tasks)})

    async def close(self) -> None:
        self._closed = True
        await self.cancel_pending()
        self._logger.info("session_closed", extra={"map": self._map_config.name})

    def list_recent_guesses(self, limit: int = 20) -> list[GuessJob]:
        return self._history.list_recent(limit)

    @property
    def turns(self) -> int:
        """Guesses that reached the game, counted from the guess history."""
        return sum(
            1
            for job in self._history.list_recent(self._history.max_jobs)
            if job.status == GuessJobStatus.SUCCEEDED and job.verdict != GuessVerdict.GAME_OVER
        )

    async def _run(self, job: GuessJob, generation: int) -> GuessJob:
        job.status = GuessJobStatus.RUNNING
        state = self._state
        radius = state.search_radius

        if state.has_won:
            return self._finish(job, GuessVerdict.GAME_OVER, "You win!")

        try:
            cities = await asyncio.wait_for(
                asyncio.to_thread(self._geocoder.search, job.query, self._map_config),
                timeout=self._lookup_timeout_seconds,
            )
        except asyncio.TimeoutError:
            job.status = GuessJobStatus.TIMED_OUT
            job.error = f"City lookup timed out after {self._lookup_timeout_seconds}s"
            job.finished_at = datetime.now(timezone.utc)
            self._logger.warning("guess_timeout", extra={"job_id": job.id, "query": job.query})
            return job
        except GeocoderError as exc:
            job.status = GuessJobStatus.FAILED
            job.error = f"{type(exc).__name__}: {exc}"
            job.finished_at = datetime.now(timezone.utc)
            self._logger.warning("guess_failed", extra={"job_id": job.id, "error": job.error})
            return job

        if generation != self._generation:
            return self._cancel(job, "Guess was cancelled while in flight")

        viewport = self._viewport_provider()
        outcome = resolve(job.query, cities, self._map_config, state.current_point, state.end_point)
        result = apply_guess(state, outcome, viewport, radius=radius)
        # keep a radius change made while the lookup was running
        self._state = replace(result.state, search_radius=self._state.search_radius)

        self._telemetry.emit(
            "guess_resolved",
            {
                "query": job.query,
                "verdict": result.verdict.value,
                "hits": len(cities),
                "radius": radius,
                "viewport": (viewport.width, viewport.height),
            },
        )
        return self._finish(job, result.verdict, result.message)

    def _finish(self, job: GuessJob, verdict: GuessVerdict, message: str) -> GuessJob:
        job.status = GuessJobStatus.SUCCEEDED
        job.verdict = verdict
        job.message = message
        job.finished_at = datetime.now(timezone.utc)
        self._logger.info(
            "guess_resolved",
            extra={"job_id": job.id, "query": job.query, "verdict": verdict.value},
        )
        return job

    def _cancel(self, job: GuessJob, reason: str) -> GuessJob:
        job.status = GuessJobStatus.CANCELLED
        job.error = reason
        job.finished_at = datetime.now(timezone.utc)
        self._logger.info("guess_cancelled", extra={"job_id": job.id, "reason": reason})
        return job
