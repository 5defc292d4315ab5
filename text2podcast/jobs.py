"""Background conversion jobs with an in-memory, polled status store."""

import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Union

from text2podcast.converter import Converter
from text2podcast.errors import PipelineError
from text2podcast.models import PipelineResult, PodcastMetadata

logger = logging.getLogger(__name__)

PENDING = "pending"
PROCESSING = "processing"
COMPLETED = "completed"
FAILED = "failed"

CompletionCallback = Callable[[str, Union[PipelineResult, BaseException]], None]


class JobManager:
    """Thread-safe in-memory job store.

    Status state machine: pending → processing → completed | failed
    """

    def __init__(self):
        self._jobs: dict[str, dict] = {}
        self._lock = threading.Lock()

    def create(self, job_id: str, *, title: str, episode_number: int) -> dict:
        with self._lock:
            job = {
                "job_id": job_id,
                "status": PENDING,
                "title": title,
                "episode_number": episode_number,
                "current_chunk": 0,
                "total_chunks": 0,
                "filename": None,
                "duration": None,
                "content_length": None,
                "validation_errors": [],
                "validation_warnings": [],
                "error": None,
                "error_kind": None,
            }
            self._jobs[job_id] = job
            return dict(job)

    def get(self, job_id: str) -> Optional[dict]:
        with self._lock:
            job = self._jobs.get(job_id)
            return dict(job) if job else None

    def update_status(self, job_id: str, status: str) -> None:
        with self._lock:
            if job_id in self._jobs:
                self._jobs[job_id]["status"] = status

    def update_progress(self, job_id: str, current: int, total: int) -> None:
        with self._lock:
            if job_id in self._jobs:
                self._jobs[job_id]["current_chunk"] = current
                self._jobs[job_id]["total_chunks"] = total

    def set_result(self, job_id: str, result: PipelineResult) -> None:
        with self._lock:
            if job_id in self._jobs:
                job = self._jobs[job_id]
                job["filename"] = result.filename
                job["duration"] = result.artifact.duration_seconds
                job["content_length"] = result.artifact.size_bytes
                job["validation_errors"] = list(result.report.errors)
                job["validation_warnings"] = list(result.report.warnings)

    def set_error(self, job_id: str, error: str, kind: Optional[str] = None) -> None:
        with self._lock:
            if job_id in self._jobs:
                self._jobs[job_id]["error"] = error
                self._jobs[job_id]["error_kind"] = kind


class JobRunner:
    """Runs conversions detached from the caller on a thread pool.

    ``submit`` returns a job id immediately; progress and the outcome are
    read back through :attr:`jobs`. An optional ``on_complete`` callback
    receives the result or the exception once a job ends.
    """

    def __init__(
        self,
        converter: Converter,
        max_workers: int = 2,
        on_complete: Optional[CompletionCallback] = None,
    ):
        self.converter = converter
        self.jobs = JobManager()
        self.on_complete = on_complete
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="t2p")
        self._futures: dict[str, Future] = {}
        self._futures_lock = threading.Lock()

    def submit(self, text: str, metadata: PodcastMetadata) -> str:
        job_id = uuid.uuid4().hex[:12]
        self.jobs.create(job_id, title=metadata.title, episode_number=metadata.episode_number)
        future = self._executor.submit(self._run, job_id, text, metadata)
        with self._futures_lock:
            self._futures[job_id] = future
        # Finished jobs stay readable through the job store only
        future.add_done_callback(lambda _: self._forget(job_id))
        return job_id

    def wait(self, job_id: str, timeout: Optional[float] = None) -> Optional[dict]:
        """Block until the job ends (or ``timeout`` expires) and return its status."""
        with self._futures_lock:
            future = self._futures.get(job_id)
        if future is not None:
            future.result(timeout=timeout)
            self._forget(job_id)
        return self.jobs.get(job_id)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def _forget(self, job_id: str) -> None:
        with self._futures_lock:
            self._futures.pop(job_id, None)

    def _run(self, job_id: str, text: str, metadata: PodcastMetadata) -> None:
        self.jobs.update_status(job_id, PROCESSING)

        def on_progress(current: int, total: int) -> None:
            self.jobs.update_progress(job_id, current, total)

        try:
            result = self.converter.convert(text, metadata, on_progress=on_progress)
        except Exception as e:
            logger.exception("Conversion failed for job %s", job_id)
            kind = e.kind.value if isinstance(e, PipelineError) else None
            self.jobs.set_error(job_id, str(e), kind)
            self.jobs.update_status(job_id, FAILED)
            self._notify(job_id, e)
            return

        self.jobs.set_result(job_id, result)
        if result.succeeded:
            self.jobs.update_status(job_id, COMPLETED)
        else:
            self.jobs.set_error(job_id, "; ".join(result.report.errors), "validation")
            self.jobs.update_status(job_id, FAILED)
        self._notify(job_id, result)

    def _notify(self, job_id: str, outcome) -> None:
        if self.on_complete is None:
            return
        try:
            self.on_complete(job_id, outcome)
        except Exception:
            logger.exception("Completion callback failed for job %s", job_id)
