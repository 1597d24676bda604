from typing import Protocol


class TextGenerationProvider(Protocol):
    """LLM backend contract: one prompt pair in, raw model text out."""

    name: str

    def generate_text(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        ...
