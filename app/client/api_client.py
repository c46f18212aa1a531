import logging
from typing import Any, Callable, Dict, Optional

import httpx

from .client_session import ClientSession

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class AuthExpired(ApiError):
    """401 from the service; the local credentials have already been cleared."""


class ApiClient:
    """
    Thin wrapper over the quiz REST service.

    Every request carries the session's bearer token. A 401 clears the
    session and fires `on_unauthorized` before `AuthExpired` is raised.
    """

    def __init__(
        self,
        http: httpx.Client,
        session: ClientSession,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ):
        self._http = http
        self.session = session
        self.on_unauthorized = on_unauthorized

    @classmethod
    def connect(cls, base_url: str, session: ClientSession, timeout: float = 10.0, **kwargs):
        http = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )
        return cls(http, session, **kwargs)

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, authenticated: bool = True, **kwargs) -> Dict:
        headers = dict(kwargs.pop("headers", None) or {})
        if authenticated:
            headers.update(self.session.auth_headers())
        response = self._http.request(method, path, headers=headers, **kwargs)

        # On login/register a 401 means bad credentials, not an expired session
        if response.status_code == 401 and authenticated:
            logger.warning(f"{method} {path} rejected as unauthorized, clearing credentials")
            self.session.clear()
            if self.on_unauthorized is not None:
                self.on_unauthorized()
            raise AuthExpired(401, self._detail(response))
        if response.is_error:
            raise ApiError(response.status_code, self._detail(response))
        return response.json()

    @staticmethod
    def _detail(response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return body.get("detail") or body.get("errors") or body.get("message") or body
        return body

    # Auth
    def register(self, name: str, email: str, password: str) -> Dict:
        data = self._request("POST", "/auth/register", authenticated=False, json={"name": name, "email": email, "password": password})
        self.session.start(data["token"], data["user"])
        return data

    def login(self, email: str, password: str) -> Dict:
        data = self._request("POST", "/auth/login", authenticated=False, json={"email": email, "password": password})
        self.session.start(data["token"], data["user"])
        return data

    def logout(self) -> Dict:
        return self._request("POST", "/auth/logout")

    def get_profile(self) -> Dict:
        return self._request("GET", "/auth/profile")

    def update_profile(self, name: str) -> Dict:
        return self._request("PUT", "/auth/profile", json={"name": name})

    def change_password(self, current_password: str, new_password: str) -> Dict:
        return self._request(
            "PUT",
            "/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    # Quiz
    def get_questions(self, amount: int = 15, category: Optional[int] = None, difficulty: Optional[str] = None) -> Dict:
        params: Dict[str, Any] = {"amount": amount}
        if category:
            params["category"] = category
        if difficulty:
            params["difficulty"] = difficulty
        return self._request("GET", "/quiz/questions", params=params)

    def get_categories(self) -> Dict:
        return self._request("GET", "/quiz/categories")

    def get_quiz_stats(self) -> Dict:
        return self._request("GET", "/quiz/stats")

    # Results
    def save_result(self, payload: Dict) -> Dict:
        return self._request("POST", "/results/save", json=payload)

    def get_my_results(self, page: int = 1, limit: int = 10, sort: str = "-createdAt") -> Dict:
        return self._request("GET", "/results/my-results", params={"page": page, "limit": limit, "sort": sort})

    def get_result(self, result_id: int) -> Dict:
        return self._request("GET", f"/results/result/{result_id}")

    def delete_result(self, result_id: int) -> Dict:
        return self._request("DELETE", f"/results/result/{result_id}")

    def get_stats(self) -> Dict:
        return self._request("GET", "/results/stats")

    def get_leaderboard(self, limit: int = 10) -> Dict:
        return self._request("GET", "/results/leaderboard", params={"limit": limit})
