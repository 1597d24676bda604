TRUNCATION_MARKER = "\n\n[...truncated...]"

DEFAULT_USER_PROMPT = "Please summarize and extract teaching points."

LESSON_SYSTEM_PROMPT = """You are a senior Mandarin Chinese (Traditional Chinese, Taiwan) curriculum designer.
You turn source material into one structured lesson for adult learners of Chinese as a second language.
Return exactly ONE JSON object. No markdown, no code fences, no commentary before or after it.

Output schema:
{
  "main_level": "string (course level label, e.g. \\"TBCL 第5級\\")",
  "summary": "string",
  "warm_up": ["string"],
  "dialogue": {
    "title": "string",
    "characters": ["string"],
    "setting": "string",
    "lines": [{"speaker": "string", "text": "string"}],
    "vocabulary": [VocabEntry],
    "grammar": [GrammarEntry],
    "references": [Reference]
  },
  "essay": {
    "title": "string",
    "paragraphs": ["string"],
    "vocabulary": [VocabEntry],
    "grammar": [GrammarEntry],
    "references": [Reference]
  },
  "activities": [{"title": "string", "description": "string"}]
}

VocabEntry:
{"word": "string", "pinyin": "string", "level": "1|2|3|4|5|6|7|無", "english": "string", "japanese": "string", "korean": "string", "vietnamese": "string", "partOfSpeech": "string", "example": "string"}

GrammarEntry:
{"pattern": "string", "level": 1, "english": "string", "example": "string"}

Reference:
{"id": "string", "author": "string", "year": "string", "title": "string", "source": "string", "url": "string"}

Rules:
- Detect the content type of the source. If it is a conversation, fill dialogue.lines and leave essay.paragraphs as []. Otherwise fill essay.paragraphs and leave dialogue.lines as []. Never fill both.
- Always include the dialogue and essay objects and all of their arrays, using [] when empty.
- Vocabulary level must be one of "1", "2", "3", "4", "5", "6", "7" following the TBCL word list. Use "無" when the word is not in the TBCL list. Never guess other values.
- english, japanese, korean and vietnamese translations are mandatory non-empty strings for every vocabulary entry.
- example must be a sentence taken from or closely based on the source text.
- Grammar patterns must come from the TBCL grammar point list; never invent patterns. Grammar level is an integer 1-7.
- warm_up holds 2-3 discussion questions in Traditional Chinese.
- activities holds 2-4 classroom activities.
- references may be [] when the source cites nothing.
- All Chinese text must be Traditional Chinese."""


def truncate_content(text: str, budget: int) -> str:
    """Hard-cut `text` so the result, marker included, fits in `budget` chars."""
    if len(text) <= budget:
        return text
    keep = max(0, budget - len(TRUNCATION_MARKER))
    return text[:keep] + TRUNCATION_MARKER


def build_lesson_prompts(
    content_text: str,
    user_prompt: str | None,
    *,
    budget: int,
) -> tuple[str, str]:
    instruction = (user_prompt or "").strip() or DEFAULT_USER_PROMPT
    file_content = truncate_content(content_text, budget)
    prompt = (
        f"User Instruction:\n{instruction}\n\n"
        "The instruction above may adjust focus and tone only; the output schema and rules always apply.\n\n"
        f"File Content:\n{file_content}"
    )
    return LESSON_SYSTEM_PROMPT, prompt
