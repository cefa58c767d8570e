from __future__ import annotations

import asyncio
from collections import OrderedDict, deque
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from typing import Any, Deque
import uuid

from app.core.config import get_settings

logger = logging.getLogger(__name__)

RecordHandler = Callable[[Any], Awaitable[dict | None]]
CompleteCallback = Callable[[list[dict]], None]
ErrorCallback = Callable[[BaseException], None]
ProgressCallback = Callable[[int, int, int], None]
SleepFunc = Callable[[float], Awaitable[None]]

MAX_TRACKED_JOBS = 200


class UploadQueueCleared(RuntimeError):
    pass


@dataclass
class UploadJob:
    id: str
    kind: str
    records: list[Any]
    handler: RecordHandler
    on_complete: CompleteCallback | None = None
    on_error: ErrorCallback | None = None
    on_progress: ProgressCallback | None = None
    status: str = "queued"
    results: list[dict] = field(default_factory=list)
    error: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None

    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def completed(self) -> int:
        return len(self.results)

    @property
    def progress(self) -> int:
        if not self.records:
            return 100
        return round(self.completed / self.total * 100)

    def summary(self, *, include_results: bool = True) -> dict:
        succeeded = sum(1 for item in self.results if item.get("success"))
        payload = {
            "job_id": self.id,
            "kind": self.kind,
            "status": self.status,
            "total": self.total,
            "completed": self.completed,
            "progress": self.progress,
            "successful": succeeded,
            "failed": self.completed - succeeded,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }
        if include_results:
            payload["results"] = list(self.results)
        return payload


class RateLimitedUploader:
    """Process-wide FIFO of import jobs with a fixed pause between record writes.

    One job runs at a time and its records go through the handler strictly in
    order, one at a time. The pause is taken after every record except the
    last one of the last queued job. A failing record becomes a result entry
    ``{"success": False, "error", "item", "index"}`` and processing continues.
    """

    def __init__(self, delay_seconds: float, *, sleep: SleepFunc = asyncio.sleep) -> None:
        self._queue: Deque[UploadJob] = deque()
        self._jobs: OrderedDict[str, UploadJob] = OrderedDict()
        self._processing = False
        self._task: asyncio.Task | None = None
        self._sleep = sleep
        self.rate_limit_delay = delay_seconds

    @property
    def is_processing(self) -> bool:
        return self._processing

    def submit(
        self,
        records: Sequence[Any],
        handler: RecordHandler,
        *,
        on_complete: CompleteCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_progress: ProgressCallback | None = None,
        kind: str = "generic",
    ) -> str:
        """Queue a batch and return its job id. Must be called from a running event loop."""
        return self.enqueue(
            records,
            handler,
            on_complete=on_complete,
            on_error=on_error,
            on_progress=on_progress,
            kind=kind,
        ).id

    def enqueue(
        self,
        records: Sequence[Any],
        handler: RecordHandler,
        *,
        on_complete: CompleteCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_progress: ProgressCallback | None = None,
        kind: str = "generic",
    ) -> UploadJob:
        """Like ``submit`` but hands back the job itself, which stays usable after registry eviction."""
        if not isinstance(records, (list, tuple)):
            raise TypeError("Upload data must be a list of records")
        if not callable(handler):
            raise TypeError("Record handler must be callable")

        loop = asyncio.get_running_loop()
        job = UploadJob(
            id=str(uuid.uuid4()),
            kind=kind,
            records=list(records),
            handler=handler,
            on_complete=on_complete,
            on_error=on_error,
            on_progress=on_progress,
        )
        self._track(job)
        self._queue.append(job)
        logger.info("Queued %s upload %s with %d record(s); queue length %d", kind, job.id, job.total, len(self._queue))

        if not self._processing:
            self._processing = True
            self._task = loop.create_task(self._drain())
        return job

    async def run(
        self,
        records: Sequence[Any],
        handler: RecordHandler,
        *,
        on_progress: ProgressCallback | None = None,
        kind: str = "generic",
    ) -> list[dict]:
        future: asyncio.Future[list[dict]] = asyncio.get_running_loop().create_future()

        def complete(results: list[dict]) -> None:
            if not future.done():
                future.set_result(results)

        def fail(exc: BaseException) -> None:
            if not future.done():
                future.set_exception(exc)

        self.submit(records, handler, on_complete=complete, on_error=fail, on_progress=on_progress, kind=kind)
        return await future

    def get_job(self, job_id: str) -> UploadJob | None:
        return self._jobs.get(job_id)

    def status(self) -> dict:
        return {
            "queue_length": len(self._queue),
            "is_processing": self._processing,
            "rate_limit_delay": self.rate_limit_delay,
        }

    def clear(self) -> int:
        """Drop queued jobs that have not started; the running job is unaffected."""
        dropped = list(self._queue)
        self._queue.clear()
        for job in dropped:
            job.status = "cleared"
            job.finished_at = datetime.now(timezone.utc)
            self._notify(job.on_error, UploadQueueCleared("Upload queue cleared before the job started"))
        if dropped:
            logger.warning("Cleared %d queued upload job(s)", len(dropped))
        return len(dropped)

    def reset(self) -> None:
        """Forget all jobs and the in-flight marker, e.g. after the owning event loop closed."""
        self.clear()
        self._task = None
        self._processing = False
        self._jobs.clear()

    def _track(self, job: UploadJob) -> None:
        self._jobs[job.id] = job
        while len(self._jobs) > MAX_TRACKED_JOBS:
            self._jobs.popitem(last=False)

    async def _drain(self) -> None:
        try:
            while self._queue:
                job = self._queue.popleft()
                await self._process(job)
                if self._queue:
                    await self._sleep(self.rate_limit_delay)
        finally:
            self._processing = False
            self._task = None

    async def _process(self, job: UploadJob) -> None:
        job.status = "processing"
        logger.info("Processing %s upload %s (%d record(s))", job.kind, job.id, job.total)
        try:
            for index, record in enumerate(job.records):
                try:
                    outcome = await job.handler(record)
                    result = dict(outcome) if outcome is not None else {"success": True, "item": record}
                    result.setdefault("success", True)
                except Exception as exc:
                    logger.warning("Upload %s record %d failed: %s", job.id, index, exc)
                    result = {"success": False, "error": str(exc) or exc.__class__.__name__, "item": record}
                result["index"] = index
                job.results.append(result)

                self._notify(job.on_progress, job.progress, job.completed, job.total)

                if index < job.total - 1:
                    await self._sleep(self.rate_limit_delay)
        except asyncio.CancelledError:
            job.status = "failed"
            job.error = "cancelled"
            job.finished_at = datetime.now(timezone.utc)
            self._notify(job.on_error, UploadQueueCleared("Upload job cancelled"))
            raise
        except Exception as exc:
            logger.exception("Upload %s aborted", job.id)
            job.status = "failed"
            job.error = str(exc)
            job.finished_at = datetime.now(timezone.utc)
            self._notify(job.on_error, exc)
            return

        job.status = "completed"
        job.finished_at = datetime.now(timezone.utc)
        succeeded = sum(1 for item in job.results if item.get("success"))
        logger.info("Upload %s finished: %d succeeded, %d failed", job.id, succeeded, job.total - succeeded)
        self._notify(job.on_complete, job.results)

    @staticmethod
    def _notify(callback: Callable[..., None] | None, *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:
            logger.exception("Upload callback raised")


_uploader = RateLimitedUploader(get_settings().upload_rate_limit_delay_seconds)


def get_uploader() -> RateLimitedUploader:
    return _uploader


def reset_uploader() -> None:
    _uploader.reset()
