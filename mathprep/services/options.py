import random
from typing import List, Optional, Sequence


def build_options(correct_answer: Optional[str], wrong_options: Optional[Sequence[str]]) -> List[str]:
    """Correct answer plus distractors in a fresh random order."""
    options = list(wrong_options or [])
    if correct_answer:
        options.append(correct_answer)
    return random.sample(options, len(options))


def answers_match(user_answer: Optional[str], correct_answer: Optional[str]) -> bool:
    """Trimmed, case-insensitive comparison of a typed answer."""
    if user_answer is None or correct_answer is None:
        return False
    return user_answer.strip().casefold() == correct_answer.strip().casefold()
