from typing import Dict, Optional


class ClientSession:
    """Credentials of the signed-in user. `clear()` is the only logout path."""

    def __init__(self):
        self.token: Optional[str] = None
        self.user: Optional[Dict] = None

    def start(self, token: str, user: Dict) -> None:
        self.token = token
        self.user = dict(user)

    def clear(self) -> None:
        self.token = None
        self.user = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
