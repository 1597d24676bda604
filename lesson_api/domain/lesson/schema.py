import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# TBCL 등급 토큰. "無"는 TBCL 목록에 없는 단어를 뜻하며 0등급과 구분된다.
UNLISTED_LEVEL = "無"
VOCAB_LEVEL_TOKENS = ("1", "2", "3", "4", "5", "6", "7", UNLISTED_LEVEL)

_LEVEL_PATTERN = re.compile(r"^(?:level|lv\.?|l|tbcl)?\s*第?\s*([1-7])(?:\s*級)?$", re.IGNORECASE)
_UNLISTED_ALIASES = {"無", "无", "none", "n/a", "na", "-", "0", ""}


def normalize_vocab_level(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        return UNLISTED_LEVEL
    if isinstance(value, (int, float)):
        if float(value).is_integer() and 1 <= int(value) <= 7:
            return str(int(value))
        return UNLISTED_LEVEL

    text = str(value).strip()
    if text.lower() in _UNLISTED_ALIASES:
        return UNLISTED_LEVEL
    matched = _LEVEL_PATTERN.match(text)
    if matched:
        return matched.group(1)
    return UNLISTED_LEVEL


def _as_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _as_list(value: Any) -> Any:
    return [] if value is None else value


class _LessonModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class VocabEntry(_LessonModel):
    word: str = Field(min_length=1)
    pinyin: str = ""
    level: str = UNLISTED_LEVEL
    english: str = ""
    japanese: str = ""
    korean: str = ""
    vietnamese: str = ""
    partOfSpeech: str = ""
    example: str = ""

    @field_validator("level", mode="before")
    @classmethod
    def coerce_vocab_level(cls, value: Any) -> str:
        return normalize_vocab_level(value)

    @field_validator(
        "word", "pinyin", "english", "japanese", "korean", "vietnamese", "partOfSpeech", "example",
        mode="before",
    )
    @classmethod
    def normalize_text(cls, value: Any) -> Any:
        return _as_text(value)


class GrammarEntry(_LessonModel):
    pattern: str = Field(min_length=1)
    level: int = Field(ge=1, le=7)
    english: str = ""
    example: str = ""

    @field_validator("level", mode="before")
    @classmethod
    def coerce_grammar_level(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("grammar_level_not_numeric")
        if isinstance(value, str):
            matched = _LEVEL_PATTERN.match(value.strip())
            if matched:
                return int(matched.group(1))
        return value

    @field_validator("pattern", "english", "example", mode="before")
    @classmethod
    def normalize_text(cls, value: Any) -> Any:
        return _as_text(value)


class Reference(_LessonModel):
    id: str = ""
    author: str = ""
    year: str = ""
    title: str = ""
    source: str | None = None
    url: str = ""

    @field_validator("id", "author", "year", "title", "url", mode="before")
    @classmethod
    def normalize_text(cls, value: Any) -> Any:
        return _as_text(value)


class DialogueLine(_LessonModel):
    speaker: str = ""
    text: str = Field(min_length=1)

    @field_validator("speaker", "text", mode="before")
    @classmethod
    def normalize_text(cls, value: Any) -> Any:
        return _as_text(value)


class Activity(_LessonModel):
    title: str = Field(min_length=1)
    description: str = ""

    @field_validator("title", "description", mode="before")
    @classmethod
    def normalize_text(cls, value: Any) -> Any:
        return _as_text(value)


class _LessonSection(_LessonModel):
    title: str = ""
    vocabulary: list[VocabEntry] = Field(default_factory=list)
    grammar: list[GrammarEntry] = Field(default_factory=list)
    references: list[Reference] = Field(default_factory=list)

    @field_validator("vocabulary", "grammar", "references", mode="before")
    @classmethod
    def null_lists_as_empty(cls, value: Any) -> Any:
        return _as_list(value)

    @field_validator("title", mode="before")
    @classmethod
    def normalize_title(cls, value: Any) -> Any:
        return _as_text(value)


class Dialogue(_LessonSection):
    lines: list[DialogueLine] = Field(default_factory=list)
    characters: list[str] = Field(default_factory=list)
    setting: str | None = None

    @field_validator("lines", mode="before")
    @classmethod
    def drop_blank_lines(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return _as_list(value)
        return [item for item in value if not (isinstance(item, dict) and _as_text(item.get("text")) == "")]

    @field_validator("characters", mode="before")
    @classmethod
    def character_names(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return _as_list(value)
        names: list[Any] = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("name") or item.get("speaker") or ""
            item = _as_text(item)
            if item:
                names.append(item)
        return names


class Essay(_LessonSection):
    paragraphs: list[str] = Field(default_factory=list)

    @field_validator("paragraphs", mode="before")
    @classmethod
    def drop_blank_paragraphs(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return _as_list(value)
        return [_as_text(item) for item in value if _as_text(item) != ""]


class LessonDocument(_LessonModel):
    main_level: str = Field(min_length=1)
    summary: str | None = None
    warm_up: list[str] = Field(default_factory=list)
    dialogue: Dialogue = Field(default_factory=Dialogue)
    essay: Essay = Field(default_factory=Essay)
    activities: list[Activity] = Field(min_length=2)

    @field_validator("main_level", mode="before")
    @classmethod
    def normalize_main_level(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("warm_up", mode="before")
    @classmethod
    def null_warm_up(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value.strip()] if value.strip() else []
        return _as_list(value)

    @field_validator("dialogue", "essay", mode="before")
    @classmethod
    def null_section(cls, value: Any) -> Any:
        return {} if value is None else value

    @model_validator(mode="after")
    def check_single_content_type(self) -> "LessonDocument":
        if self.dialogue.lines and self.essay.paragraphs:
            raise ValueError("dialogue_and_essay_both_populated")
        return self


def validate_lesson_document(raw: dict[str, Any]) -> dict[str, Any]:
    """Validate and repair a parsed model response into the lesson contract.

    Raises pydantic.ValidationError when the structure cannot be repaired.
    """
    document = LessonDocument.model_validate(raw)
    return document.model_dump(mode="json", exclude_none=True)
