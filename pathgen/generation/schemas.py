"""
Activity schemas.

One pydantic model per activity type. These are the canonical, structurally
valid configurations that the normalizer produces and the store persists; raw
generator output never reaches the store without passing through them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, Protocol, Union

from pydantic import BaseModel, Field

# =============================================================================
# Limits
# =============================================================================

MAX_QUIZ_OPTIONS = 4
MAX_FLASHCARDS = 4
FLASHCARD_FRONT_MAX = 100
FLASHCARD_BACK_MAX = 200
MAX_BLANKS = 4
MAX_PAIRS = 4
BLANK_MARKER = "_____"


class ActivityType(str, Enum):
    """Activity type tag."""

    SLIDE = "slide"
    QUIZ = "quiz"
    FLASHCARD = "flashcard"
    EMBED = "embed"
    FILL_BLANKS = "fill_blanks"
    MATCHING = "matching"


# Fixed order used by fallback type selection
ACTIVITY_TYPES: list[ActivityType] = [
    ActivityType.SLIDE,
    ActivityType.QUIZ,
    ActivityType.FLASHCARD,
    ActivityType.EMBED,
    ActivityType.FILL_BLANKS,
    ActivityType.MATCHING,
]


class SectionLike(Protocol):
    """The section fields activity generation reads."""

    id: Any
    heading: str
    content: str


# =============================================================================
# Type-Specific Configs
# =============================================================================


class SlideConfig(BaseModel):
    content: str
    narration: str
    media_url: str | None = None
    media_type: Literal["image", "video"] = "image"


class QuizConfig(BaseModel):
    question: str
    options: list[str] = Field(..., min_length=1, max_length=MAX_QUIZ_OPTIONS)
    correct_answer: int = Field(0, ge=0, le=MAX_QUIZ_OPTIONS - 1)
    explanation: str | None = None


class FlashcardData(BaseModel):
    front: str = Field(..., max_length=FLASHCARD_FRONT_MAX)
    back: str = Field(..., max_length=FLASHCARD_BACK_MAX)


class FlashcardConfig(BaseModel):
    cards: list[FlashcardData] = Field(..., min_length=1, max_length=MAX_FLASHCARDS)


class EmbedConfig(BaseModel):
    url: str
    embed_type: Literal["video", "article"] = "video"


class FillBlank(BaseModel):
    position: int
    correct_answers: list[str] = Field(..., min_length=1)


class FillBlanksConfig(BaseModel):
    instruction: str
    text_with_blanks: str
    blanks: list[FillBlank] = Field(default_factory=list, max_length=MAX_BLANKS)


class MatchingPair(BaseModel):
    left: str
    right: str


class MatchingConfig(BaseModel):
    instruction: str
    pairs: list[MatchingPair] = Field(default_factory=list, max_length=MAX_PAIRS)


ActivityConfig = Union[
    SlideConfig, QuizConfig, FlashcardConfig, EmbedConfig, FillBlanksConfig, MatchingConfig
]

CONFIG_MODELS: dict[ActivityType, type[BaseModel]] = {
    ActivityType.SLIDE: SlideConfig,
    ActivityType.QUIZ: QuizConfig,
    ActivityType.FLASHCARD: FlashcardConfig,
    ActivityType.EMBED: EmbedConfig,
    ActivityType.FILL_BLANKS: FillBlanksConfig,
    ActivityType.MATCHING: MatchingConfig,
}


# =============================================================================
# Generated Activity
# =============================================================================


@dataclass
class GeneratedActivity:
    """A normalized activity ready to be persisted."""

    title: str
    description: str
    type: ActivityType
    config: ActivityConfig
    section_id: Any = None
    from_fallback: bool = False

    def to_row(self) -> dict[str, Any]:
        """Convert to the column mapping used by DocumentStore.add_activities."""
        return {
            "title": self.title,
            "description": self.description,
            "type": self.type.value,
            "config": self.config.model_dump(exclude_none=True),
        }
