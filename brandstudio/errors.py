"""Error taxonomy for the generation pipeline.

Transient media-fetch failures never surface as exceptions; everything else
here propagates unmodified to the orchestration caller.
"""

from enum import Enum


class FailureStage(str, Enum):
    """Pipeline stage that produced no usable payload."""

    DRAFTS = "drafts"
    EDIT = "edit"
    FINALIZE = "finalize"
    KEYFRAMES = "keyframes"
    SCRIPT = "script"
    TEXT = "text"


class BrandStudioError(Exception):
    """Base class for all pipeline errors."""
    pass


class ConfigurationError(BrandStudioError):
    """No usable credential. Never retried automatically."""
    pass


class GenerationFailure(BrandStudioError):
    """The service returned no payload."""

    def __init__(self, message: str, stage: FailureStage):
        self.stage = stage
        super().__init__(message)


class EditFailure(GenerationFailure):
    """An edit returned no image."""

    def __init__(self, message: str = "Editing failed"):
        super().__init__(message, FailureStage.EDIT)


class FinalizationFailure(GenerationFailure):
    """Finalization returned no image. No partial output is kept."""

    def __init__(self, message: str = "Finalization failed"):
        super().__init__(message, FailureStage.FINALIZE)


class ParseFailure(BrandStudioError):
    """Structured output could not be parsed after fence stripping."""

    def __init__(self, message: str, raw_output: str):
        self.raw_output = raw_output
        super().__init__(message)


class JobError(BrandStudioError):
    """Base class for long-running job outcomes other than completion."""
    pass


class JobTimeout(JobError):
    """Local poll budget exhausted. The job may still be running remotely."""

    def __init__(self, polls: int):
        self.polls = polls
        super().__init__(f"Job did not complete after {polls} polls")


class JobFailure(JobError):
    """The job completed without a usable result."""
    pass


class JobCancelled(JobError):
    """Local polling was aborted. The remote job is not cancelled."""
    pass


class LogoMissingError(BrandStudioError):
    """A website was given but no logo was uploaded or extracted."""
    pass


class SessionClosedError(BrandStudioError):
    """The edit session was already finalized or discarded."""
    pass


class SessionBusyError(BrandStudioError):
    """Another edit is in progress on the same session."""
    pass
