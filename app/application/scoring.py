from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from .errors import InvalidInput


@dataclass(frozen=True)
class ScoredQuestion:
    question: str
    correct_answer: str
    user_answer: Optional[str]
    is_correct: bool


@dataclass(frozen=True)
class ScoreResult:
    per_question: List[ScoredQuestion] = field(default_factory=list)
    correct_answers: int = 0
    total_questions: int = 0
    score: int = 0


def percentage(correct: int, total: int) -> int:
    """round(100 * correct / total), rounding halves up."""
    if total < 1:
        raise InvalidInput("totalQuestions must be at least 1")
    return (200 * correct + total) // (2 * total)


def _field(question: Any, name: str) -> Any:
    if isinstance(question, Mapping):
        return question.get(name)
    return getattr(question, name)


def score(questions: Sequence[Any], answers: Mapping[int, Optional[str]]) -> ScoreResult:
    """
    Scores a question batch against the user's answers.

    `questions` items expose `question` and `correct_answer` (attributes or
    mapping keys); `answers` maps question index to the chosen option.
    Comparison is exact string equality, and indices missing from `answers`
    count as incorrect.
    """
    total = len(questions)
    if total < 1:
        raise InvalidInput("At least one question is required to compute a score")

    per_question = []
    for index, question in enumerate(questions):
        correct_answer = _field(question, "correct_answer")
        user_answer = answers.get(index)
        per_question.append(
            ScoredQuestion(
                question=_field(question, "question"),
                correct_answer=correct_answer,
                user_answer=user_answer,
                is_correct=user_answer is not None and user_answer == correct_answer,
            )
        )

    correct = sum(1 for q in per_question if q.is_correct)
    return ScoreResult(
        per_question=per_question,
        correct_answers=correct,
        total_questions=total,
        score=percentage(correct, total),
    )
