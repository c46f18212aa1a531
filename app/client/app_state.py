import copy
import logging
import threading
from enum import Enum
from typing import Callable, Dict, Optional

import httpx

from app.application.scoring import ScoreResult, score
from app.infrastructure.trivia.fallback_data import FALLBACK_MESSAGE, FALLBACK_QUESTIONS

from .api_client import ApiClient, ApiError, AuthExpired
from .client_session import ClientSession
from .quiz_session import DEFAULT_TIME_LIMIT_SECONDS, QuizSession
from .timer import CountdownTimer

logger = logging.getLogger(__name__)

QUIZ_SIZE = 15


class Page(str, Enum):
    AUTH = "auth"
    START = "start"
    QUIZ = "quiz"
    REPORT = "report"


class AuthMode(str, Enum):
    LOGIN = "login"
    REGISTER = "register"


class QuizApp:
    """
    Page-level controller: owns the credentials, the quiz session and its
    countdown, and moves between pages.
    """

    def __init__(
        self,
        api: ApiClient,
        time_limit: int = DEFAULT_TIME_LIMIT_SECONDS,
        timer_factory: Optional[Callable[..., CountdownTimer]] = None,
    ):
        self.api = api
        self.api.on_unauthorized = self._handle_unauthorized
        self.quiz = QuizSession(time_limit=time_limit)
        self._timer_factory = timer_factory or CountdownTimer
        self._timer: Optional[CountdownTimer] = None
        self._complete_lock = threading.Lock()
        self.page = Page.START if self.session.is_authenticated else Page.AUTH
        self.auth_mode = AuthMode.LOGIN
        self.last_result: Optional[Dict] = None
        self.notice: Optional[str] = None

    @property
    def session(self) -> ClientSession:
        return self.api.session

    @property
    def user(self) -> Optional[Dict]:
        return self.session.user

    # ---------------------------
    # Authentication
    # ---------------------------

    def switch_auth_mode(self) -> AuthMode:
        self.auth_mode = AuthMode.REGISTER if self.auth_mode == AuthMode.LOGIN else AuthMode.LOGIN
        return self.auth_mode

    def login(self, email: str, password: str) -> None:
        self.api.login(email, password)
        self.page = Page.START

    def register(self, name: str, email: str, password: str) -> None:
        self.api.register(name, email, password)
        self.page = Page.START

    def logout(self) -> None:
        if self.session.is_authenticated:
            try:
                self.api.logout()
            except ApiError as e:
                logger.warning(f"Logout request failed: {e}")
        self._teardown()

    def _handle_unauthorized(self) -> None:
        # The API client already cleared the credentials
        self._teardown()

    def _teardown(self) -> None:
        self._stop_timer()
        self.quiz.reset()
        self.session.clear()
        self.last_result = None
        self.notice = None
        self.auth_mode = AuthMode.LOGIN
        self.page = Page.AUTH

    # ---------------------------
    # Quiz flow
    # ---------------------------

    def start_quiz(self, amount: int = QUIZ_SIZE) -> None:
        if self.page != Page.START:
            raise RuntimeError(f"Cannot start a quiz from the {self.page.value} page")

        self.quiz.begin_loading()
        try:
            data = self.api.get_questions(amount=amount)
            questions, fallback = data["questions"], data.get("fallback", False)
            if not isinstance(questions, list) or not questions:
                raise ValueError("Service returned no questions")
            self.notice = data.get("message")
        except AuthExpired:
            raise
        except (ApiError, httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            # ValueError covers a non-JSON body such as a proxy error page
            logger.warning(f"Could not fetch questions, using built-in set: {e}")
            questions, fallback = copy.deepcopy(FALLBACK_QUESTIONS), True
            self.notice = FALLBACK_MESSAGE
        except Exception:
            self.quiz.reset()
            raise

        self.quiz.load(questions, fallback=fallback)
        self.page = Page.QUIZ
        self._timer = self._timer_factory(self._tick, self._on_time_up)
        self._timer.start()

    def select_answer(self, option: str) -> None:
        self.quiz.select_answer(self.quiz.current_index, option)

    def go_to(self, index: int) -> None:
        self.quiz.navigate(index)

    def _tick(self) -> bool:
        return self.quiz.tick()

    def _on_time_up(self) -> None:
        self.complete_quiz()

    def complete_quiz(self) -> Optional[Dict]:
        """Submit by the user or by the countdown; only the first call saves."""
        with self._complete_lock:
            if self.page != Page.QUIZ:
                return self.last_result
            self._stop_timer()
            self.quiz.submit()
            payload = self.quiz.build_submission()
            try:
                self.last_result = self.api.save_result(payload).get("result")
            except AuthExpired:
                return None
            except (ApiError, httpx.HTTPError, ValueError) as e:
                # The report is still shown from local state
                logger.error(f"Error saving quiz result: {e}")
                self.last_result = None
            self.page = Page.REPORT
            return self.last_result

    def retake(self) -> None:
        self._stop_timer()
        self.quiz.reset()
        self.last_result = None
        self.notice = None
        self.page = Page.START

    def _stop_timer(self) -> None:
        # No join: the timer thread may itself be waiting on _complete_lock
        if self._timer is not None:
            self._timer.cancel(wait=False)
            self._timer = None

    def report(self) -> ScoreResult:
        """Scores the submitted attempt locally for the report page."""
        if self.page != Page.REPORT:
            raise RuntimeError("The report is only available after submitting")
        return score(self.quiz.questions, self.quiz.answers)
