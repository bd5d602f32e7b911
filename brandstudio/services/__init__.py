"""Generation pipeline services."""

from .brand import BrandService
from .drafts import DraftFanoutGenerator
from .editing import AnnotationInterpreter, EditApplier, SpellAuditor
from .finalize import Finalizer
from .jobs import AsyncJobPoller
from .logo import LogoResolver
from .preview import RealWorldPreviewService, VideoRenderer
from .prompt import compose_prompt
from .storyboard import StoryboardOrchestrator

__all__ = [
    "AnnotationInterpreter",
    "AsyncJobPoller",
    "BrandService",
    "DraftFanoutGenerator",
    "EditApplier",
    "Finalizer",
    "LogoResolver",
    "RealWorldPreviewService",
    "SpellAuditor",
    "StoryboardOrchestrator",
    "VideoRenderer",
    "compose_prompt",
]
