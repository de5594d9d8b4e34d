"""
Activity Normalizer - the validation boundary for generated output.

The generative service is untrusted: any field may be missing, mistyped or out
of range. normalize_activity() turns whatever came back (or nothing at all)
into a fully populated, structurally valid config for one activity type,
deriving missing parts from the originating section's content.

It never raises.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable
from typing import Any

from loguru import logger

from .schemas import (
    BLANK_MARKER,
    FLASHCARD_BACK_MAX,
    FLASHCARD_FRONT_MAX,
    MAX_BLANKS,
    MAX_FLASHCARDS,
    MAX_PAIRS,
    MAX_QUIZ_OPTIONS,
    ActivityConfig,
    ActivityType,
    EmbedConfig,
    FillBlank,
    FillBlanksConfig,
    FlashcardConfig,
    FlashcardData,
    MatchingConfig,
    MatchingPair,
    QuizConfig,
    SectionLike,
    SlideConfig,
)

SLIDE_CONTENT_CHARS = 500
QUIZ_EXCERPT_CHARS = 100
BLANK_STRIDE = 5
BLANK_MIN_WORD_CHARS = 4

DEFAULT_QUIZ_PLACEHOLDERS = [
    "None of the above",
    "All of the above",
    "Not covered in this section",
]
DEFAULT_FILL_BLANKS_INSTRUCTION = "Fill in the blanks with the correct terms."
DEFAULT_MATCHING_INSTRUCTION = (
    "Match the items in the left column with their corresponding items in the right column."
)
EMBED_PLACEHOLDER_URL = "https://www.youtube.com/embed/placeholder-{section_id}"

_SENTENCE_END = re.compile(r"[.!?]+")


# =============================================================================
# Coercion helpers
# =============================================================================


def _text(value: Any) -> str | None:
    """Return value if it is a non-blank string."""
    if isinstance(value, str) and value.strip():
        return value
    return None


def _number(value: Any) -> int | None:
    """Return value as int if it is a finite real number (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _heading(section: SectionLike) -> str:
    return (getattr(section, "heading", None) or "").strip()


def _content(section: SectionLike) -> str:
    return getattr(section, "content", None) or ""


def resolve_activity_type(value: Any) -> ActivityType:
    """Map a raw type tag to an ActivityType, coercing unknown tags to slide."""
    if isinstance(value, ActivityType):
        return value
    if isinstance(value, str):
        try:
            return ActivityType(value.strip().lower())
        except ValueError:
            pass
    return ActivityType.SLIDE


# =============================================================================
# Per-type builders
# =============================================================================


def _build_slide(raw: dict, section: SectionLike) -> SlideConfig:
    heading = _heading(section) or "this section"
    return SlideConfig(
        content=_text(raw.get("content")) or _content(section)[:SLIDE_CONTENT_CHARS],
        narration=_text(raw.get("narration")) or f"In this section, we explore {heading}.",
        media_url=_text(raw.get("media_url")),
        media_type="video" if raw.get("media_type") == "video" else "image",
    )


def _build_quiz(raw: dict, section: SectionLike) -> QuizConfig:
    heading = _heading(section) or "this section"

    options = raw.get("options")
    if isinstance(options, list) and len(options) > 1:
        options = [str(option) for option in options[:MAX_QUIZ_OPTIONS]]
    else:
        excerpt = _content(section).strip()[:QUIZ_EXCERPT_CHARS]
        options = [excerpt, *DEFAULT_QUIZ_PLACEHOLDERS]

    answer = _number(raw.get("correct_answer"))
    if answer is None:
        answer = 0
    answer = max(0, min(answer, MAX_QUIZ_OPTIONS - 1))

    explanation = raw.get("explanation")
    return QuizConfig(
        question=_text(raw.get("question")) or f"What is the key idea of {heading}?",
        options=options,
        correct_answer=answer,
        explanation=explanation if isinstance(explanation, str) else None,
    )


def _build_flashcard(raw: dict, section: SectionLike) -> FlashcardConfig:
    cards = []
    provided = raw.get("cards")
    if isinstance(provided, list):
        for card in provided:
            card = _mapping(card)
            front, back = _text(card.get("front")), _text(card.get("back"))
            if front and back:
                cards.append(FlashcardData(
                    front=front[:FLASHCARD_FRONT_MAX],
                    back=back[:FLASHCARD_BACK_MAX],
                ))
            if len(cards) == MAX_FLASHCARDS:
                break

    if not cards:
        cards = [FlashcardData(
            front=_heading(section)[:FLASHCARD_FRONT_MAX],
            back=_content(section)[:FLASHCARD_BACK_MAX],
        )]

    return FlashcardConfig(cards=cards)


def _build_embed(raw: dict, section: SectionLike) -> EmbedConfig:
    return EmbedConfig(
        url=_text(raw.get("url")) or EMBED_PLACEHOLDER_URL.format(
            section_id=getattr(section, "id", None)
        ),
        embed_type="article" if raw.get("embed_type") == "article" else "video",
    )


def _coerce_blanks(provided: list) -> list[FillBlank]:
    blanks = []
    for index, blank in enumerate(provided[:MAX_BLANKS]):
        blank = _mapping(blank)
        position = _number(blank.get("position"))
        answers = blank.get("correct_answers")
        if isinstance(answers, str):
            answers = [answers]
        elif isinstance(answers, list):
            answers = [str(a) for a in answers if a is not None and str(a).strip()]
        else:
            answers = []
        if not answers:
            continue
        blanks.append(FillBlank(
            position=position if position is not None else index,
            correct_answers=answers,
        ))
    return blanks


def synthesize_blanks(content: str) -> tuple[str, list[FillBlank]]:
    """
    Blank out words of the content at a fixed stride.

    Every fifth word longer than three characters has its first occurrence
    in the text replaced by the blank marker, up to four blanks.
    """
    text = content
    blanks: list[FillBlank] = []
    words = content.split()
    for i in range(0, len(words), BLANK_STRIDE):
        word = words[i]
        if len(word) < BLANK_MIN_WORD_CHARS:
            continue
        text = text.replace(word, BLANK_MARKER, 1)
        blanks.append(FillBlank(position=len(blanks), correct_answers=[word]))
        if len(blanks) == MAX_BLANKS:
            break
    return text, blanks


def _build_fill_blanks(raw: dict, section: SectionLike) -> FillBlanksConfig:
    instruction = _text(raw.get("instruction")) or DEFAULT_FILL_BLANKS_INSTRUCTION
    text = _text(raw.get("text_with_blanks"))
    provided = raw.get("blanks")

    if text and isinstance(provided, list) and provided:
        blanks = _coerce_blanks(provided)
        if blanks:
            return FillBlanksConfig(instruction=instruction, text_with_blanks=text, blanks=blanks)

    text, blanks = synthesize_blanks(_content(section))
    return FillBlanksConfig(instruction=instruction, text_with_blanks=text, blanks=blanks)


def split_pair(sentence: str) -> MatchingPair:
    """Split a sentence on its first comma, or at its midpoint."""
    if "," in sentence:
        left, right = sentence.split(",", 1)
    else:
        middle = len(sentence) // 2
        left, right = sentence[:middle], sentence[middle:]
    return MatchingPair(left=left.strip(), right=right.strip())


def _build_matching(raw: dict, section: SectionLike) -> MatchingConfig:
    instruction = _text(raw.get("instruction")) or DEFAULT_MATCHING_INSTRUCTION
    provided = raw.get("pairs")

    if isinstance(provided, list) and provided:
        pairs = []
        for pair in provided[:MAX_PAIRS]:
            pair = _mapping(pair)
            left, right = pair.get("left"), pair.get("right")
            pairs.append(MatchingPair(
                left=left if isinstance(left, str) else "",
                right=right if isinstance(right, str) else "",
            ))
        return MatchingConfig(instruction=instruction, pairs=pairs)

    sentences = [s.strip() for s in _SENTENCE_END.split(_content(section)) if s.strip()]
    pairs = [split_pair(sentence) for sentence in sentences[:MAX_PAIRS]]
    return MatchingConfig(instruction=instruction, pairs=pairs)


_BUILDERS: dict[ActivityType, Callable[[dict, SectionLike], ActivityConfig]] = {
    ActivityType.SLIDE: _build_slide,
    ActivityType.QUIZ: _build_quiz,
    ActivityType.FLASHCARD: _build_flashcard,
    ActivityType.EMBED: _build_embed,
    ActivityType.FILL_BLANKS: _build_fill_blanks,
    ActivityType.MATCHING: _build_matching,
}


# =============================================================================
# Entry point
# =============================================================================


def normalize_activity(
    activity_type: Any,
    raw_config: Any,
    section: SectionLike,
) -> tuple[ActivityType, ActivityConfig]:
    """
    Produce a structurally valid config for an activity.

    Args:
        activity_type: Requested type tag (unknown tags become slide)
        raw_config: Generated config, possibly absent or malformed
        section: The section the activity was generated from

    Returns:
        (resolved type, config)
    """
    resolved = resolve_activity_type(activity_type)
    builder = _BUILDERS[resolved]
    try:
        return resolved, builder(_mapping(raw_config), section)
    except Exception as e:  # Untrusted input - rebuild from section content alone
        logger.warning(f"Discarding malformed {resolved.value} config: {e}")
        return resolved, builder({}, section)
