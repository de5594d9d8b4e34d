# SQLAlchemy models
from .base import Base
from .learning import (
    Activity,
    Document,
    LearningPath,
    Section,
)

__all__ = [
    "Base",
    "Document",
    "Section",
    "LearningPath",
    "Activity",
]
