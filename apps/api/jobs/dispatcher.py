"""
Post-upload job dispatcher.

Request handlers hand typed job messages to an in-process bounded channel
and return immediately. A background consumer forwards each message to the
external queue (arq on Redis). Enqueue failures are logged and dropped:
delivery is best-effort, at most once.

Usage:
    dispatcher = JobDispatcher(ArqJobSink(settings.redis_url))
    await dispatcher.start()

    dispatcher.submit(ThumbnailJob(user_id=user.id, file_id=entry.id))

    await dispatcher.stop()
"""

import asyncio
import contextlib
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Any, ClassVar

from arq import create_pool
from arq.connections import ArqRedis, RedisSettings

logger = logging.getLogger(__name__)


# =============================================================================
# Job Messages
# =============================================================================


@dataclass(frozen=True)
class Job:
    """Base job message. `function` names the worker function."""

    function: ClassVar[str] = ""

    def payload(self) -> dict[str, Any]:
        """Keyword arguments for the worker function (JSON-friendly)."""
        return {f.name: str(getattr(self, f.name)) for f in fields(self)}


@dataclass(frozen=True)
class ThumbnailJob(Job):
    """Render size variants of a freshly uploaded image."""

    function: ClassVar[str] = "generate_thumbnails"

    user_id: uuid.UUID
    file_id: uuid.UUID


@dataclass(frozen=True)
class WelcomeJob(Job):
    """Greet a newly registered user."""

    function: ClassVar[str] = "send_welcome"

    user_id: uuid.UUID


# =============================================================================
# Sinks
# =============================================================================


class JobSink(ABC):
    """Destination for dispatched jobs."""

    @abstractmethod
    async def enqueue(self, job: Job) -> None:
        """Hand a job to the external queue. May raise."""
        pass

    async def close(self) -> None:
        """Release connections."""
        return None


class ArqJobSink(JobSink):
    """Enqueue jobs on Redis through arq."""

    def __init__(self, redis_url: str):
        self.redis_settings = RedisSettings.from_dsn(redis_url)
        self._pool: ArqRedis | None = None

    async def _get_pool(self) -> ArqRedis:
        """Get or create Redis connection pool for enqueueing jobs."""
        if self._pool is None:
            self._pool = await create_pool(self.redis_settings)
        return self._pool

    async def enqueue(self, job: Job) -> None:
        pool = await self._get_pool()
        arq_job = await pool.enqueue_job(job.function, **job.payload())
        logger.debug(
            f"Enqueued {job.function} as {arq_job.job_id if arq_job else None}"
        )

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.aclose()
            self._pool = None


# =============================================================================
# Dispatcher
# =============================================================================


class JobDispatcher:
    """
    Fire-and-forget hand-off between request handlers and the job queue.

    submit() never raises and never blocks. Callers cannot observe whether
    a job was eventually enqueued.
    """

    def __init__(self, sink: JobSink, max_pending: int = 1000):
        self.sink = sink
        self._channel: asyncio.Queue[Job] = asyncio.Queue(maxsize=max_pending)
        self._consumer: asyncio.Task | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def pending(self) -> int:
        """Number of jobs waiting to be forwarded."""
        return self._channel.qsize()

    def submit(self, job: Job) -> bool:
        """
        Queue a job for delivery. Safe to call from any thread.

        Calls from outside the consumer's event loop are handed over with
        call_soon_threadsafe; a full channel then drops the job on the loop.

        Returns:
            True if accepted (or handed over), False if dropped because
            the channel is full
        """
        loop = self._loop
        if loop is not None and loop.is_running() and not self._on_loop(loop):
            loop.call_soon_threadsafe(self._offer, job)
            return True
        return self._offer(job)

    @staticmethod
    def _on_loop(loop: asyncio.AbstractEventLoop) -> bool:
        try:
            return asyncio.get_running_loop() is loop
        except RuntimeError:
            return False

    def _offer(self, job: Job) -> bool:
        try:
            self._channel.put_nowait(job)
        except asyncio.QueueFull:
            logger.warning(f"Dispatcher channel full, dropping {job.function} {job.payload()}")
            return False
        logger.debug(f"Submitted {job.function} {job.payload()}")
        return True

    async def _deliver(self, job: Job) -> None:
        try:
            await self.sink.enqueue(job)
        except Exception:
            logger.exception(f"Failed to enqueue {job.function} {job.payload()}")

    async def _consume(self) -> None:
        while True:
            job = await self._channel.get()
            try:
                await self._deliver(job)
            finally:
                self._channel.task_done()

    async def start(self) -> None:
        """Start the background consumer."""
        if self._consumer is None:
            self._loop = asyncio.get_running_loop()
            self._consumer = asyncio.create_task(self._consume())
            logger.info("Job dispatcher started")

    async def drain(self) -> None:
        """Wait until every submitted job has been handled."""
        await self._channel.join()

    async def stop(self) -> None:
        """Stop the consumer. Jobs still pending are dropped."""
        if self._consumer is not None:
            self._consumer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer
            self._consumer = None
        self._loop = None
        if self.pending:
            logger.warning(f"Job dispatcher stopped with {self.pending} pending jobs")
        await self.sink.close()
        logger.info("Job dispatcher stopped")
