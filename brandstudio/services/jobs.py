"""Generic driver for long-running generation jobs: submit, poll, extract URI."""

import logging
import threading
import time
from typing import Any, Callable

from .. import config
from ..errors import JobCancelled, JobFailure, JobTimeout
from ..models.job import JobState, VideoJob

logger = logging.getLogger(__name__)


class AsyncJobPoller:
    """
    Poll an operation handle until it completes or the local budget runs out.

    Submitted -> Polling -> Completed | TimedOut | Failed, plus Cancelled when
    the caller aborts. Cancelling only stops local polling; the remote job
    keeps running and its handle must not be reused.
    """

    def __init__(
        self,
        refresh: Callable[[Any], Any],
        extract_uri: Callable[[Any], str | None],
        poll_interval: float = config.POLL_INTERVAL_SECONDS,
        max_polls: int = config.MAX_POLLS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.refresh = refresh
        self.extract_uri = extract_uri
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.sleep = sleep

    def submit(self, submit_fn: Callable[[], Any]) -> VideoJob:
        """Start a job. The returned handle is opaque."""
        handle = submit_fn()
        logger.info("Job submitted, polling...")
        return VideoJob(handle=handle)

    def wait(self, job: VideoJob, cancel: threading.Event | None = None) -> str:
        """
        Poll until the job completes and return its result URI.

        Raises:
            JobCancelled: cancel was set, or the job was cancelled earlier
            JobTimeout: max_polls reached without completion
            JobFailure: the job completed without a URI
        """
        if job.state == JobState.CANCELLED:
            raise JobCancelled("Job handle was cancelled and cannot be reused")
        if job.is_terminal:
            raise JobFailure(f"Job already finished ({job.state.value})")

        job.state = JobState.POLLING
        while not job.done and job.polls < self.max_polls:
            self._check_cancel(job, cancel)
            self.sleep(self.poll_interval)
            self._check_cancel(job, cancel)

            job.handle = self.refresh(job.handle)
            job.polls += 1
            logger.info(f"Poll {job.polls}: {'COMPLETE' if job.done else 'In progress...'}")

        if not job.done:
            job.state = JobState.TIMED_OUT
            logger.warning(f"Job still running after {job.polls} polls")
            raise JobTimeout(job.polls)

        uri = self.extract_uri(job.handle)
        if not uri:
            job.state = JobState.FAILED
            error = getattr(job.handle, "error", None)
            logger.error(f"Job completed without a result URI: {error}")
            message = "Job completed without a result"
            if error:
                message = f"{message}: {error}"
            raise JobFailure(message)

        job.state = JobState.COMPLETED
        job.uri = uri
        return uri

    def run(self, submit_fn: Callable[[], Any], cancel: threading.Event | None = None) -> str:
        """Submit and wait."""
        return self.wait(self.submit(submit_fn), cancel)

    def _check_cancel(self, job: VideoJob, cancel: threading.Event | None) -> None:
        if cancel is not None and cancel.is_set():
            job.state = JobState.CANCELLED
            logger.info("Polling cancelled locally; remote job is not cancelled")
            raise JobCancelled("Polling cancelled")


def sign_uri(uri: str, api_key: str) -> str:
    """Append the API key so the video can be downloaded."""
    separator = "&" if "?" in uri else "?"
    return f"{uri}{separator}key={api_key}"
