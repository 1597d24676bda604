"""Lesson document contract returned to the front-end."""

from lesson_api.domain.lesson.schema import (
    UNLISTED_LEVEL,
    VOCAB_LEVEL_TOKENS,
    LessonDocument,
    normalize_vocab_level,
    validate_lesson_document,
)

__all__ = [
    "LessonDocument",
    "UNLISTED_LEVEL",
    "VOCAB_LEVEL_TOKENS",
    "normalize_vocab_level",
    "validate_lesson_document",
]
