import json
import logging
import re
from typing import List, Optional, Protocol

from pydantic import BaseModel

from mathprep.core.exceptions import GeneratorError

logger = logging.getLogger(__name__)

MAX_WRONG_OPTIONS = 3

QUESTION_SHAPE = """{{
    "question": "question text",
    "correct_answer": "final answer only",
    "wrong_options": ["wrong1", "wrong2", "wrong3"],
    "pattern": "brief description of the question pattern"
  }}"""

BATCH_PROMPT = (
    "Generate {count} math multiple-choice questions on {topic}.\n"
    "Difficulty: {difficulty}.\n"
    "For each question give the correct answer and exactly 3 plausible wrong options.\n"
    "Answers must be final values only, without explanations in parentheses.\n"
    "Return ONLY a JSON array in this exact format:\n"
    "[\n  " + QUESTION_SHAPE + "\n]"
)

SIMILAR_PROMPT = (
    'Given this math question: "{question}"\n'
    "Topic: {topic}. Difficulty: {difficulty}.\n"
    "Write one new question that follows the same pattern but uses different numbers.\n"
    "Give its correct answer and exactly 3 plausible wrong options.\n"
    "Return ONLY a JSON object in this exact format:\n"
    + QUESTION_SHAPE
)

COMPLETE_PROMPT = (
    'Solve this math question on {topic}: "{question}"\n'
    "Give its correct answer and exactly 3 plausible wrong options for a multiple-choice quiz.\n"
    'Repeat the question text unchanged in "question".\n'
    "Return ONLY a JSON object in this exact format:\n"
    + QUESTION_SHAPE
)


class GeneratedQuestion(BaseModel):
    question: str
    correct_answer: str
    wrong_options: List[str] = []
    pattern: Optional[str] = None


class ParseResult(BaseModel):
    questions: List[GeneratedQuestion] = []
    reason: Optional[str] = None
    raw_text: str = ""

    @property
    def ok(self) -> bool:
        return self.reason is None


class TextGenerator(Protocol):
    def get_response(self, prompt: str) -> str: ...


def clean_markdown_json(raw_response: str) -> str:
    # ```json ... ``` wrappers are the usual noise around the payload
    cleaned = re.sub(r"```(?:json|JSON)?", "", raw_response)
    return cleaned.strip()


def _to_generated_question(item, index: int) -> GeneratedQuestion:
    if not isinstance(item, dict):
        raise ValueError(f"item {index} is not an object")

    question = item.get("question")
    if not isinstance(question, str) or not question.strip():
        raise ValueError(f"item {index} is missing 'question'")

    if item.get("correct_answer") not in (None, ""):
        answer = str(item["correct_answer"]).strip()
    elif item.get("answer") not in (None, ""):
        # short {question, answer} replies tend to append working in parentheses
        answer = re.split(r"[(\n]", str(item["answer"]))[0].strip()
    else:
        answer = ""
    if not answer:
        raise ValueError(f"item {index} is missing 'correct_answer'")

    wrong_options = item.get("wrong_options") or []
    if not isinstance(wrong_options, list):
        raise ValueError(f"item {index} has non-list 'wrong_options'")
    wrong_options = [str(o).strip() for o in wrong_options if o is not None and str(o).strip()][:MAX_WRONG_OPTIONS]

    pattern = item.get("pattern")
    return GeneratedQuestion(
        question=question.strip(),
        correct_answer=answer,
        wrong_options=wrong_options,
        pattern=str(pattern).strip() if pattern else None,
    )


def parse_generated_questions(raw_text: str, expect_array: bool = True) -> ParseResult:
    """
    Recover question records from a model reply.

    A single bad record fails the whole reply, so callers never persist a
    partial batch.
    """
    cleaned = clean_markdown_json(raw_text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        return ParseResult(reason=f"Invalid JSON: {e.msg}", raw_text=raw_text)

    if expect_array:
        if not isinstance(data, list):
            return ParseResult(reason="Top-level structure must be a JSON array", raw_text=raw_text)
        if not data:
            return ParseResult(reason="No questions in response", raw_text=raw_text)
    else:
        if isinstance(data, list) and len(data) == 1:
            data = data[0]
        if not isinstance(data, dict):
            return ParseResult(reason="Top-level structure must be a JSON object", raw_text=raw_text)
        data = [data]

    try:
        questions = [_to_generated_question(item, idx) for idx, item in enumerate(data)]
    except ValueError as e:
        return ParseResult(reason=str(e), raw_text=raw_text)

    return ParseResult(questions=questions, raw_text=raw_text)


class QuestionGenerator:
    """Builds prompts, calls the text generator and parses its reply."""

    def __init__(self, client: TextGenerator):
        self.client = client

    def _ask(self, prompt: str, expect_array: bool) -> List[GeneratedQuestion]:
        raw_response = self.client.get_response(prompt)
        result = parse_generated_questions(raw_response, expect_array=expect_array)
        if not result.ok:
            logger.warning("Unparsable generator reply: %s", result.reason)
            logger.debug("Raw generator reply: %s", result.raw_text)
            raise GeneratorError(
                "Failed to parse generated questions",
                details={"reason": result.reason, "rawText": result.raw_text},
            )
        return result.questions

    def generate_questions(self, topic: str, count: int, difficulty: str = "medium") -> List[GeneratedQuestion]:
        prompt = BATCH_PROMPT.format(count=count, topic=topic, difficulty=difficulty)
        questions = self._ask(prompt, expect_array=True)
        logger.info("Generated %d/%d question(s) on %r", len(questions), count, topic)
        return questions

    def generate_similar(self, question: str, topic: str, difficulty: str = "medium") -> GeneratedQuestion:
        prompt = SIMILAR_PROMPT.format(question=question, topic=topic, difficulty=difficulty)
        return self._ask(prompt, expect_array=False)[0]

    def complete_question(self, question: str, topic: str) -> GeneratedQuestion:
        prompt = COMPLETE_PROMPT.format(question=question, topic=topic)
        return self._ask(prompt, expect_array=False)[0]
