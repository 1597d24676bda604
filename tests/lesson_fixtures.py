from __future__ import annotations

import copy
import json
from typing import Any


_ESSAY_LESSON: dict[str, Any] = {
    "main_level": "TBCL 第3級",
    "summary": "一段關於測試文字的短文。",
    "warm_up": ["你平常怎麼練習閱讀？", "你覺得短文比較容易嗎？"],
    "dialogue": {
        "title": "",
        "lines": [],
        "vocabulary": [],
        "grammar": [],
        "references": [],
    },
    "essay": {
        "title": "測試",
        "paragraphs": ["這是一段很短的測試文字。"],
        "vocabulary": [
            {
                "word": "測試",
                "pinyin": "cèshì",
                "level": "4",
                "english": "test",
                "japanese": "テスト",
                "korean": "테스트",
                "vietnamese": "kiểm tra",
                "partOfSpeech": "Noun / Verb",
                "example": "這是一段很短的測試文字。",
            }
        ],
        "grammar": [
            {
                "pattern": "這是……",
                "level": 1,
                "english": "This is ...",
                "example": "這是一段很短的測試文字。",
            }
        ],
        "references": [],
    },
    "activities": [
        {"title": "朗讀練習", "description": "兩人一組輪流朗讀短文。"},
        {"title": "造句", "description": "用「測試」造三個句子。"},
    ],
}


def essay_lesson() -> dict[str, Any]:
    return copy.deepcopy(_ESSAY_LESSON)


def dialogue_lesson() -> dict[str, Any]:
    lesson = essay_lesson()
    lesson["essay"]["paragraphs"] = []
    lesson["dialogue"].update(
        {
            "title": "在論壇上",
            "characters": ["陳經理", "林教授"],
            "setting": "2020 年，產業論壇",
            "lines": [
                {"speaker": "陳經理", "text": "最近聽聞妳去歐洲考察。"},
                {"speaker": "林教授", "text": "秘密沒有，武器倒是有。"},
            ],
        }
    )
    return lesson


def essay_lesson_text() -> str:
    return json.dumps(essay_lesson(), ensure_ascii=False)


class FakeAIService:
    def __init__(self, responses: list[Any] | None = None) -> None:
        self.responses = list(responses or [essay_lesson_text()])
        self.calls: list[dict[str, str]] = []

    def generate_text(self, *, system_prompt: str, user_prompt: str) -> str:
        self.calls.append({"system_prompt": system_prompt, "user_prompt": user_prompt})
        response = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if isinstance(response, BaseException):
            raise response
        return response


class FakeBackend:
    """Scripted backend: exceptions are raised, strings returned, in order."""

    def __init__(self, name: str, script: list[Any]) -> None:
        self.name = name
        self.script = list(script)
        self.calls = 0

    def generate_text(self, *, system_prompt: str, user_prompt: str) -> str:
        self.calls += 1
        step = self.script[min(self.calls, len(self.script)) - 1]
        if isinstance(step, BaseException):
            raise step
        return step
