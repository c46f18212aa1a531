# trivia_client.py

import copy
import html
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from app.application.errors import UpstreamUnavailable
from app.infrastructure.config import settings
from .fallback_data import FALLBACK_CATEGORIES, FALLBACK_MESSAGE, FALLBACK_QUESTIONS

logger = logging.getLogger(__name__)


@dataclass
class QuestionBatch:
    questions: List[Dict]
    fallback: bool = False
    message: Optional[str] = None


class TriviaClient:
    """
    Proxy for the Open Trivia DB question API.

    Upstream failures are retried and then degrade to the embedded fallback
    set; callers learn about the degrade through `QuestionBatch.fallback`,
    never through an exception.
    """

    def __init__(
        self,
        base_url: str = settings.TRIVIA_API_URL,
        *,
        timeout: float = settings.TRIVIA_TIMEOUT_SECONDS,
        retry_attempts: int = settings.TRIVIA_RETRY_ATTEMPTS,
        retry_wait_seconds: float = 0.5,
        transport: Optional[httpx.BaseTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)
        self._retry_attempts = max(1, retry_attempts)
        self._retry_wait_seconds = retry_wait_seconds
        self._rng = rng or random.Random()

    def close(self) -> None:
        self._client.close()

    # ---------------------------
    # Questions
    # ---------------------------

    def fetch_questions(
        self,
        amount: int = settings.QUIZ_SIZE,
        category: Optional[int] = None,
        difficulty: Optional[str] = None,
    ) -> QuestionBatch:
        params = {"amount": amount, "type": "multiple"}
        if category:
            params["category"] = category
        if difficulty:
            params["difficulty"] = difficulty

        try:
            payload = self._with_retry(self._get_json)("/api.php", params)
            questions = self._parse_questions(payload)
        except UpstreamUnavailable as e:
            logger.warning(f"Trivia provider unavailable, serving fallback questions: {e}")
            return QuestionBatch(
                questions=copy.deepcopy(FALLBACK_QUESTIONS),
                fallback=True,
                message=FALLBACK_MESSAGE,
            )

        logger.info(f"Fetched {len(questions)} questions from trivia provider")
        return QuestionBatch(questions=questions)

    def _parse_questions(self, payload: Dict) -> List[Dict]:
        if not isinstance(payload, dict):
            raise UpstreamUnavailable(f"Unexpected payload type {type(payload).__name__}")
        if payload.get("response_code") != 0:
            raise UpstreamUnavailable(
                f"Provider returned response_code={payload.get('response_code')}"
            )

        questions = []
        try:
            for index, item in enumerate(payload["results"]):
                correct = html.unescape(item["correct_answer"])
                options = [html.unescape(a) for a in item["incorrect_answers"]] + [correct]
                self._rng.shuffle(options)
                questions.append(
                    {
                        "id": index,
                        "question": html.unescape(item["question"]),
                        "correct_answer": correct,
                        "options": options,
                        "category": html.unescape(item.get("category", "")),
                        "difficulty": item.get("difficulty", ""),
                    }
                )
        except (KeyError, TypeError) as e:
            raise UpstreamUnavailable(f"Malformed question payload: {e}") from e

        if not questions:
            raise UpstreamUnavailable("Provider returned no questions")
        return questions

    # ---------------------------
    # Categories
    # ---------------------------

    def fetch_categories(self) -> List[Dict]:
        try:
            payload = self._with_retry(self._get_json)("/api_category.php", None)
            return [{"id": c["id"], "name": c["name"]} for c in payload["trivia_categories"]]
        except (UpstreamUnavailable, KeyError, TypeError) as e:
            logger.warning(f"Trivia categories unavailable, serving fallback list: {e}")
            return copy.deepcopy(FALLBACK_CATEGORIES)

    # ---------------------------
    # Transport
    # ---------------------------

    def _with_retry(self, fn):
        return retry(
            retry=retry_if_exception_type(UpstreamUnavailable),
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=self._retry_wait_seconds, max=4),
            reraise=True,
        )(fn)

    def _get_json(self, path: str, params: Optional[Dict]) -> Dict:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamUnavailable(str(e)) from e
