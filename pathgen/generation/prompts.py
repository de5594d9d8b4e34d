"""
LLM Prompts for Learning Activity Generation.

One system prompt describes the six activity types and their config shapes;
one batch prompt carries the section contexts of a generation batch and asks
for a fixed number of activities per section, in section order.
"""
from __future__ import annotations

import json

# =============================================================================
# System Prompt (Applied to All Generation)
# =============================================================================

SYSTEM_PROMPT = """You are an educational-content expert.

Your task is to turn sections of an uploaded document into learning activities
that follow the activity schema exactly.

KEY RULES (DO NOT VIOLATE FRONT-END CONTRACTS)

1. Output a single valid JSON object with an "activities" array.

2. Each activity has: title, description, type, config.
   type is one of: slide, quiz, flashcard, embed, fill_blanks, matching.

   slide:
   {"content": "HTML or markdown content for the slide",
    "narration": "Narration text read aloud with the slide",
    "media_type": "image" | "video"}

   quiz:
   {"question": "Question text",
    "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
    "correct_answer": 0,
    "explanation": "Why the correct answer is correct"}

   flashcard:
   {"cards": [{"front": "Term or question (max 100 chars)",
               "back": "Definition or answer (max 200 chars)"}]}   (at most 4 cards)

   embed:
   {"url": "https://...", "embed_type": "video" | "article"}

   fill_blanks:
   {"instruction": "Instructions for the exercise",
    "text_with_blanks": "Text with _____ placeholders",
    "blanks": [{"position": 0, "correct_answers": ["answer", "synonym"]}]}   (at most 4 blanks)

   matching:
   {"instruction": "Instructions for matching",
    "pairs": [{"left": "Item", "right": "Corresponding match"}]}   (at most 4 pairs)

3. Quizzes have exactly 4 options; correct_answer is the 0-based index.

QUALITY GUIDELINES

A. Vary cognitive load: avoid giving one section two activities of the same type.
B. Use the description to bridge from the previous activity.
C. Summarise long sections; do not paste huge blocks of source text.
D. Only use information from the provided sections.

Return only the JSON; no commentary."""


# =============================================================================
# Batch Prompt
# =============================================================================

BATCH_PROMPT = """Create exactly {activities_per_section} activities for EACH of the
{section_count} sections below ({total} activities in total).

Order matters: list the activities for the first section first, then the
second section, and so on, {activities_per_section} per section.

SECTIONS:
{sections_json}"""


def get_system_prompt() -> str:
    """Get the system prompt for LLM initialization."""
    return SYSTEM_PROMPT


def build_batch_prompt(batch: list[dict], activities_per_section: int = 2) -> str:
    """
    Format the user prompt for one generation batch.

    Args:
        batch: Section contexts ({id, heading, excerpt})
        activities_per_section: Activities requested per section

    Returns:
        Formatted prompt string
    """
    return BATCH_PROMPT.format(
        activities_per_section=activities_per_section,
        section_count=len(batch),
        total=len(batch) * activities_per_section,
        sections_json=json.dumps(batch, indent=2, ensure_ascii=False, default=str),
    )
