"""
Client-held quiz state.

A session walks a list of question payloads (the dicts served by
/generate-quiz) in order, keeps the running score and the missed
questions, and splices a similar question right after the current one when
the server returns it for a wrong answer. Nothing here is persisted; a
client that reloads starts over.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from mathprep.core.exceptions import SessionStateError
from mathprep.services.options import answers_match, build_options

# how long a client shows feedback before moving on
FEEDBACK_DELAY_SECONDS = 2.0


class SessionState(str, Enum):
    SETUP = "setup"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class QuizSummary:
    score: int
    total: int
    practice_topics: List[str]

    @property
    def message(self) -> str:
        text = f"Quiz completed! Score: {self.score}/{self.total}"
        if self.practice_topics:
            return f"{text}\nTopics to practice: {', '.join(self.practice_topics)}"
        return f"{text}\nGreat job! You mastered these concepts!"


@dataclass
class QuizSession:
    questions: List[dict] = field(default_factory=list)
    index: int = 0
    score: int = 0
    missed: List[dict] = field(default_factory=list)
    state: SessionState = SessionState.SETUP
    answered: bool = False

    def start(self, questions: List[dict]) -> None:
        self.questions = list(questions)
        self.index = 0
        self.score = 0
        self.missed = []
        self.answered = False
        self.state = SessionState.IN_PROGRESS if self.questions else SessionState.COMPLETED

    def _require(self, state: SessionState) -> None:
        if self.state != state:
            raise SessionStateError(f"Session is {self.state.value}, expected {state.value}")

    @property
    def current(self) -> dict:
        self._require(SessionState.IN_PROGRESS)
        return self.questions[self.index]

    def is_correct(self, selected: str) -> bool:
        return answers_match(selected, self.current.get("correct_answer"))

    def record_result(self, is_correct: bool, similar_question: Optional[dict] = None) -> None:
        self._require(SessionState.IN_PROGRESS)
        if self.answered:
            raise SessionStateError("Current question already answered")

        if is_correct:
            self.score += 1
        else:
            self.missed.append(self.current)
            if similar_question:
                self.insert_next(similar_question)
        self.answered = True

    def record_answer(self, selected: str, similar_question: Optional[dict] = None) -> bool:
        is_correct = self.is_correct(selected)
        self.record_result(is_correct, similar_question)
        return is_correct

    def insert_next(self, question: dict) -> None:
        question = dict(question)
        if not question.get("options"):
            question["options"] = build_options(question.get("correct_answer"), question.get("wrong_options"))
        self.questions.insert(self.index + 1, question)

    def advance(self) -> SessionState:
        self._require(SessionState.IN_PROGRESS)
        if not self.answered:
            raise SessionStateError("Answer the current question before moving on")

        self.index += 1
        self.answered = False
        if self.index >= len(self.questions):
            self.state = SessionState.COMPLETED
        return self.state

    def practice_topics(self) -> List[str]:
        topics: List[str] = []
        for q in self.missed:
            label = q.get("pattern") or q.get("topic")
            if label and label not in topics:
                topics.append(label)
        return topics

    def summary(self) -> QuizSummary:
        self._require(SessionState.COMPLETED)
        return QuizSummary(score=self.score, total=len(self.questions), practice_topics=self.practice_topics())
