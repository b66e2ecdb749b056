from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from finance_client.api import ApiClient, ApiError
from finance_client.core.models import User

logger = logging.getLogger(__name__)


class TokenStore:
    """Persists the bearer token and cached user between runs."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.load()

    def load(self) -> None:
        if self.path is None or not self.path.exists():
            return
        try:
            with self.path.open("r", encoding="utf-8") as fp:
                data = json.load(fp)
        except (json.JSONDecodeError, OSError):
            logger.warning("Ignoring unreadable session file %s", self.path)
            return
        self.token = data.get("token")
        self.user = data.get("user")

    def save(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = user
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fp:
            json.dump({"token": token, "user": user}, fp, indent=2)

    def clear(self) -> None:
        self.token = None
        self.user = None
        if self.path is not None:
            self.path.unlink(missing_ok=True)


def validate_registration(name: str, email: str, password: str) -> Dict[str, str]:
    errors = {}
    if len(name.strip()) < 2:
        errors["name"] = "Name must have at least 2 characters"
    if "@" not in email:
        errors["email"] = "Invalid email"
    if len(password) < 6:
        errors["password"] = "Password must have at least 6 characters"
    return errors


class AuthSession:
    def __init__(self, api: ApiClient, store: TokenStore) -> None:
        self.api = api
        self.store = store
        self.api.token_store = store

    @property
    def user(self) -> Optional[User]:
        return User.from_api(self.store.user) if self.store.user else None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.store.token and self.store.user)

    def _store_auth(self, response: Dict[str, Any]) -> User:
        data = response["data"]
        self.store.save(data["token"], data["user"])
        return User.from_api(data["user"])

    def login(self, email: str, password: str) -> User:
        return self._store_auth(self.api.post("/auth/login", {"email": email, "password": password}))

    def register(self, name: str, email: str, password: str) -> User:
        errors = validate_registration(name, email, password)
        if errors:
            raise ApiError("Invalid registration data", errors=errors)
        return self._store_auth(
            self.api.post("/auth/register", {"name": name, "email": email, "password": password})
        )

    def logout(self) -> None:
        self.store.clear()

    def restore(self) -> Optional[User]:
        """Re-validate a stored token; drops the session when the API rejects it."""
        if not self.store.token:
            return None
        try:
            response = self.api.get("/users/me")
        except ApiError as exc:
            logger.info("Stored session rejected: %s", exc)
            self.store.clear()
            return None
        self.update_user(response["data"])
        return self.user

    def update_user(self, user: Dict[str, Any]) -> None:
        self.store.save(self.store.token or "", user)

    def update_profile(self, name: str, email: str) -> User:
        response = self.api.put("/users/me", {"name": name, "email": email})
        self.update_user(response["data"])
        return User.from_api(response["data"])

    def change_password(self, current: str, new: str, confirm: str) -> None:
        if len(new) < 6:
            raise ApiError("Invalid password", errors={"newPassword": "Password must have at least 6 characters"})
        if new != confirm:
            raise ApiError("Invalid password", errors={"confirmPassword": "Passwords do not match"})
        self.api.put("/users/me", {"currentPassword": current, "newPassword": new})
