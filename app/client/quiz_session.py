import logging
import threading
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set

from app.application.errors import InvalidInput, InvalidTransition

logger = logging.getLogger(__name__)

DEFAULT_TIME_LIMIT_SECONDS = 30 * 60


class SessionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ACTIVE = "active"
    SUBMITTED = "submitted"


class QuestionStatus(str, Enum):
    CURRENT = "current"
    ATTEMPTED = "attempted"
    VISITED = "visited"
    UNVISITED = "unvisited"


class QuizSession:
    """
    Client-held state of one quiz attempt.

    idle -> loading -> active -> submitted. All mutations go through a lock
    shared with the countdown timer thread.
    """

    def __init__(self, time_limit: int = DEFAULT_TIME_LIMIT_SECONDS):
        self.time_limit = time_limit
        self._lock = threading.RLock()
        self._reset_fields()

    def _reset_fields(self) -> None:
        self.status = SessionStatus.IDLE
        self.questions: List[Dict] = []
        self.answers: Dict[int, str] = {}
        self.visited: Set[int] = set()
        self.attempted: Set[int] = set()
        self.current_index = 0
        self.time_remaining = self.time_limit
        self.fallback = False
        self.forced = False

    # ---------------------------
    # Lifecycle
    # ---------------------------

    def begin_loading(self) -> None:
        with self._lock:
            if self.status != SessionStatus.IDLE:
                raise InvalidTransition(f"Cannot load questions while {self.status.value}")
            self.status = SessionStatus.LOADING

    def load(self, questions: Sequence[Dict], fallback: bool = False) -> None:
        with self._lock:
            if self.status != SessionStatus.LOADING:
                raise InvalidTransition(f"Cannot start a quiz while {self.status.value}")
            if not questions:
                raise InvalidInput("A quiz needs at least one question")
            self.questions = list(questions)
            self.fallback = fallback
            self.time_remaining = self.time_limit
            self.status = SessionStatus.ACTIVE
            # The first question is on screen as soon as the quiz starts
            self.current_index = 0
            self.visited.add(0)

    def reset(self) -> None:
        with self._lock:
            self._reset_fields()

    # ---------------------------
    # Events
    # ---------------------------

    def select_answer(self, index: int, option: str) -> None:
        with self._lock:
            self._require_active("select an answer")
            self._require_index(index)
            if index not in self.visited:
                raise InvalidInput(f"Question {index} has not been shown yet")
            self.answers[index] = option
            self.attempted.add(index)

    def navigate(self, index: int) -> None:
        with self._lock:
            self._require_active("navigate")
            self._require_index(index)
            self.current_index = index
            self.visited.add(index)

    def next(self) -> None:
        with self._lock:
            if self.current_index < len(self.questions) - 1:
                self.navigate(self.current_index + 1)

    def previous(self) -> None:
        with self._lock:
            if self.current_index > 0:
                self.navigate(self.current_index - 1)

    def tick(self) -> bool:
        """Counts down one second. Returns True when this tick forced the submit."""
        with self._lock:
            if self.status != SessionStatus.ACTIVE:
                return False
            self.time_remaining = max(0, self.time_remaining - 1)
            if self.time_remaining == 0:
                logger.info("Time is up, submitting quiz automatically")
                self.forced = True
                self.status = SessionStatus.SUBMITTED
                return True
            return False

    def submit(self) -> None:
        with self._lock:
            if self.status == SessionStatus.SUBMITTED:
                return
            self._require_active("submit")
            self.status = SessionStatus.SUBMITTED

    # ---------------------------
    # Derived queries
    # ---------------------------

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def answered_count(self) -> int:
        return len(self.attempted)

    @property
    def visited_count(self) -> int:
        return len(self.visited)

    @property
    def not_visited_count(self) -> int:
        return self.total_questions - self.visited_count

    @property
    def time_used(self) -> int:
        return self.time_limit - self.time_remaining

    @property
    def current_question(self) -> Optional[Dict]:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    def status_of(self, index: int) -> QuestionStatus:
        self._require_index(index)
        if index == self.current_index:
            return QuestionStatus.CURRENT
        if index in self.attempted:
            return QuestionStatus.ATTEMPTED
        if index in self.visited:
            return QuestionStatus.VISITED
        return QuestionStatus.UNVISITED

    def build_submission(self) -> Dict:
        """Payload for POST /results/save, built from the frozen answers."""
        with self._lock:
            if self.status != SessionStatus.SUBMITTED:
                raise InvalidTransition("Submit the quiz before building its result")
            return {
                "questions": [
                    {
                        "question": q["question"],
                        "correct_answer": q["correct_answer"],
                        "user_answer": self.answers.get(i),
                        "options": list(q.get("options", [])),
                        "category": q.get("category"),
                        "difficulty": q.get("difficulty"),
                    }
                    for i, q in enumerate(self.questions)
                ],
                "timeUsed": self.time_used,
                "completed": not self.forced,
            }

    # ---------------------------
    # Guards
    # ---------------------------

    def _require_active(self, action: str) -> None:
        if self.status != SessionStatus.ACTIVE:
            raise InvalidTransition(f"Cannot {action} while {self.status.value}")

    def _require_index(self, index: int) -> None:
        if not (0 <= index < len(self.questions)):
            raise InvalidInput(f"Question index {index} out of range")


def format_time(seconds: int) -> str:
    minutes, rest = divmod(max(0, seconds), 60)
    return f"{minutes:02d}:{rest:02d}"
