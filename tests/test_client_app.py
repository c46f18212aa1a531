import time

import httpx
import pytest

from app.client.api_client import ApiClient, ApiError, AuthExpired
from app.client.app_state import AuthMode, Page, QuizApp
from app.client.client_session import ClientSession
from app.client.quiz_session import SessionStatus
from app.client.timer import CountdownTimer
from app.infrastructure.trivia.fallback_data import FALLBACK_MESSAGE, FALLBACK_QUESTIONS
from conftest import register_user


class FakeTimer:
    """Driven by hand instead of a background thread."""

    instances = []

    def __init__(self, on_tick, on_expire=None):
        self.on_tick = on_tick
        self.on_expire = on_expire
        self.started = False
        self.cancelled = False
        FakeTimer.instances.append(self)

    def start(self):
        self.started = True

    def cancel(self, wait=True):
        self.cancelled = True

    def advance(self, seconds):
        for _ in range(seconds):
            if self.cancelled:
                return
            if self.on_tick():
                self.cancelled = True
                if self.on_expire is not None:
                    self.on_expire()
                return

    def run_out(self):
        while not self.cancelled:
            self.advance(1)


@pytest.fixture
def api(client):
    return ApiClient(client, ClientSession())


@pytest.fixture
def quiz_app(api):
    FakeTimer.instances = []
    register_user(api._http)
    app = QuizApp(api, time_limit=60, timer_factory=FakeTimer)
    app.login("ada@example.com", "secret123")
    return app


def answer_correctly(app, indices):
    for i in indices:
        app.go_to(i)
        app.select_answer(app.quiz.current_question["correct_answer"])


def test_new_app_starts_on_auth_page(api):
    app = QuizApp(api, timer_factory=FakeTimer)
    assert app.page == Page.AUTH
    assert app.auth_mode == AuthMode.LOGIN
    assert app.switch_auth_mode() == AuthMode.REGISTER
    assert app.switch_auth_mode() == AuthMode.LOGIN


def test_register_goes_to_start_page(api):
    app = QuizApp(api, timer_factory=FakeTimer)
    app.register("Grace Hopper", "grace@example.com", "cobol123")
    assert app.page == Page.START
    assert app.user["email"] == "grace@example.com"
    assert api.session.is_authenticated


def test_bad_login_is_a_plain_error(api):
    register_user(api._http)
    app = QuizApp(api, timer_factory=FakeTimer)
    app.switch_auth_mode()
    teardowns = []
    app._teardown = lambda: teardowns.append(1)

    with pytest.raises(ApiError) as exc_info:
        app.login("ada@example.com", "wrong-password")

    assert not isinstance(exc_info.value, AuthExpired)
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid credentials"
    assert teardowns == []
    assert app.page == Page.AUTH
    assert app.auth_mode == AuthMode.REGISTER
    assert not api.session.is_authenticated


def test_start_quiz_loads_questions_and_starts_timer(quiz_app):
    assert quiz_app.page == Page.START
    quiz_app.start_quiz()

    assert quiz_app.page == Page.QUIZ
    assert quiz_app.quiz.status == SessionStatus.ACTIVE
    assert quiz_app.quiz.total_questions == 15
    assert quiz_app.quiz.fallback is False
    assert quiz_app.quiz.questions[2]["question"] == 'Who wrote "Hamlet"?'
    timer = FakeTimer.instances[-1]
    assert timer.started and not timer.cancelled


def test_timeout_submits_and_saves_partial_attempt(quiz_app):
    quiz_app.start_quiz()
    answer_correctly(quiz_app, range(5))
    quiz_app.go_to(9)

    FakeTimer.instances[-1].run_out()

    assert quiz_app.page == Page.REPORT
    assert quiz_app.quiz.status == SessionStatus.SUBMITTED
    assert quiz_app.quiz.time_remaining == 0
    saved = quiz_app.last_result
    assert saved["correctAnswers"] == 5
    assert saved["totalQuestions"] == 15
    assert saved["score"] == 33
    assert saved["timeUsed"] == 60

    detail = quiz_app.api.get_result(saved["id"])["result"]
    assert detail["completed"] is False
    assert sum(q["user_answer"] is not None for q in detail["questions"]) == 5

    report = quiz_app.report()
    assert report.correct_answers == 5
    assert report.score == 33


def test_user_submit_saves_once(quiz_app):
    quiz_app.start_quiz()
    answer_correctly(quiz_app, range(15))
    timer = FakeTimer.instances[-1]
    timer.advance(20)

    first = quiz_app.complete_quiz()
    second = quiz_app.complete_quiz()

    assert first["score"] == 100
    assert second == first
    assert timer.cancelled
    assert quiz_app.api.get_my_results()["pagination"]["totalResults"] == 1
    detail = quiz_app.api.get_result(first["id"])["result"]
    assert detail["completed"] is True
    assert detail["timeUsed"] == 20


def test_report_still_shown_when_save_fails(quiz_app, monkeypatch):
    quiz_app.start_quiz()
    answer_correctly(quiz_app, [0])

    def failing_save(payload):
        raise ApiError(500, "Server error while saving quiz result")

    monkeypatch.setattr(quiz_app.api, "save_result", failing_save)
    assert quiz_app.complete_quiz() is None
    assert quiz_app.page == Page.REPORT
    assert quiz_app.report().correct_answers == 1


def test_upstream_outage_serves_server_fallback(quiz_app, upstream):
    upstream.mode = "down"
    quiz_app.start_quiz()
    assert quiz_app.page == Page.QUIZ
    assert quiz_app.quiz.fallback is True
    assert quiz_app.notice == FALLBACK_MESSAGE


def test_failed_question_request_uses_built_in_set(quiz_app, monkeypatch):
    def failing_questions(**kwargs):
        raise ApiError(503, "unavailable")

    monkeypatch.setattr(quiz_app.api, "get_questions", failing_questions)
    quiz_app.start_quiz()

    assert quiz_app.page == Page.QUIZ
    assert quiz_app.quiz.fallback is True
    assert [q["question"] for q in quiz_app.quiz.questions] == [q["question"] for q in FALLBACK_QUESTIONS]
    assert quiz_app.notice == FALLBACK_MESSAGE


def test_unauthorized_response_routes_to_auth(quiz_app):
    quiz_app.start_quiz()
    timer = FakeTimer.instances[-1]
    quiz_app.session.token = "expired-token"

    with pytest.raises(AuthExpired):
        quiz_app.api.get_stats()

    assert quiz_app.page == Page.AUTH
    assert not quiz_app.session.is_authenticated
    assert quiz_app.user is None
    assert quiz_app.quiz.status == SessionStatus.IDLE
    assert timer.cancelled


def test_logout_tears_everything_down(quiz_app):
    quiz_app.start_quiz()
    answer_correctly(quiz_app, [0])
    timer = FakeTimer.instances[-1]

    quiz_app.logout()

    assert quiz_app.page == Page.AUTH
    assert timer.cancelled
    assert not quiz_app.session.is_authenticated
    assert quiz_app.quiz.status == SessionStatus.IDLE
    assert quiz_app.quiz.answers == {}
    assert quiz_app.last_result is None


def test_retake_returns_to_start_with_fresh_session(quiz_app):
    quiz_app.start_quiz()
    quiz_app.complete_quiz()
    assert quiz_app.page == Page.REPORT

    quiz_app.retake()
    assert quiz_app.page == Page.START
    assert quiz_app.quiz.status == SessionStatus.IDLE
    assert quiz_app.last_result is None

    quiz_app.start_quiz()
    assert quiz_app.page == Page.QUIZ
    assert quiz_app.quiz.answered_count == 0


def test_start_quiz_requires_start_page(quiz_app):
    quiz_app.start_quiz()
    with pytest.raises(RuntimeError):
        quiz_app.start_quiz()


def test_api_client_wraps_service_errors(api):
    headers, _ = register_user(api._http)
    api.session.start(headers["Authorization"].split()[1], {"email": "ada@example.com"})

    profile = api.get_profile()
    assert profile["user"]["email"] == "ada@example.com"

    with pytest.raises(ApiError) as exc_info:
        api.get_result(424242)
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Quiz result not found"

    with pytest.raises(ApiError) as exc_info:
        api.get_my_results(sort="-password")
    assert exc_info.value.status_code == 400
    assert api.session.is_authenticated


def test_api_client_unauthorized_clears_session_and_notifies(api):
    calls = []
    api.on_unauthorized = lambda: calls.append("401")
    api.session.start("not-a-token", {"email": "nobody@example.com"})

    with pytest.raises(AuthExpired):
        api.get_leaderboard()

    assert calls == ["401"]
    assert api.session.token is None


def test_non_json_question_response_uses_built_in_set():
    def proxy_error_page(request):
        return httpx.Response(200, text="<html>proxy error</html>")

    session = ClientSession()
    session.start("token", {"email": "ada@example.com"})
    http = httpx.Client(base_url="http://quiz.example.com", transport=httpx.MockTransport(proxy_error_page))
    app = QuizApp(ApiClient(http, session), timer_factory=FakeTimer)
    assert app.page == Page.START

    app.start_quiz()

    assert app.page == Page.QUIZ
    assert app.quiz.status == SessionStatus.ACTIVE
    assert app.quiz.fallback is True
    assert app.notice == FALLBACK_MESSAGE
    http.close()


def test_unexpected_fetch_error_leaves_quiz_restartable(quiz_app, monkeypatch):
    def broken_questions(**kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(quiz_app.api, "get_questions", broken_questions)
    with pytest.raises(RuntimeError, match="boom"):
        quiz_app.start_quiz()

    assert quiz_app.page == Page.START
    assert quiz_app.quiz.status == SessionStatus.IDLE

    monkeypatch.undo()
    quiz_app.start_quiz()
    assert quiz_app.page == Page.QUIZ


def test_submit_while_final_tick_expires_does_not_stall(api):
    register_user(api._http)
    app = QuizApp(
        api,
        time_limit=1,
        timer_factory=lambda on_tick, on_expire: CountdownTimer(on_tick, on_expire, interval=0.5),
    )
    app.login("ada@example.com", "secret123")

    # The submitting thread holds the lock while the timer thread expires
    with app._complete_lock:
        app.start_quiz()
        deadline = time.monotonic() + 5
        while app.quiz.status != SessionStatus.SUBMITTED and time.monotonic() < deadline:
            time.sleep(0.01)
        assert app.quiz.forced is True

        started = time.monotonic()
        app._stop_timer()
        assert time.monotonic() - started < 0.25

    deadline = time.monotonic() + 5
    while app.page != Page.REPORT and time.monotonic() < deadline:
        time.sleep(0.01)
    assert app.page == Page.REPORT
    assert app.last_result["timeUsed"] == 1
