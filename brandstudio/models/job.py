"""Long-running video job state."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class JobState(str, Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset(
    {JobState.COMPLETED, JobState.TIMED_OUT, JobState.FAILED, JobState.CANCELLED}
)


@dataclass
class VideoJob:
    """Opaque operation handle plus local polling state. Never persisted."""

    handle: Any
    state: JobState = JobState.SUBMITTED
    polls: int = 0
    uri: str | None = None

    @property
    def done(self) -> bool:
        return bool(getattr(self.handle, "done", False))

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES
