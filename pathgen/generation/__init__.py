"""
Learning activity generation.

Batched generation against a generative model, normalization of its untrusted
output, deterministic fallback, and persistence of the resulting path.
"""

from .client import GeminiGenerationClient, GenerationClient, parse_activities
from .fallback import fallback_types, synthesize_fallback
from .normalizer import normalize_activity
from .orchestrator import BatchOrchestrator, select_qualifying_sections
from .persistence import PersistenceOutcome, estimate_duration_hours, persist_activities
from .pipeline import LearningPathGenerator, LearningPathResult
from .schemas import ACTIVITY_TYPES, ActivityType, GeneratedActivity

__all__ = [
    "ACTIVITY_TYPES",
    "ActivityType",
    "BatchOrchestrator",
    "GeminiGenerationClient",
    "GeneratedActivity",
    "GenerationClient",
    "LearningPathGenerator",
    "LearningPathResult",
    "PersistenceOutcome",
    "estimate_duration_hours",
    "fallback_types",
    "normalize_activity",
    "parse_activities",
    "persist_activities",
    "select_qualifying_sections",
    "synthesize_fallback",
]
