from __future__ import annotations

import threading

from nomoredm.config import ConfigurationError


class CredentialStore:
    def __init__(self, token: str | None = None):
        self._lock = threading.Lock()
        self._token = ""
        if token is not None:
            self.set(token)

    def set(self, token: str) -> None:
        cleaned = (token or "").strip()
        if not cleaned:
            raise ConfigurationError("Credential must not be empty")
        with self._lock:
            self._token = cleaned

    def get(self) -> str:
        with self._lock:
            token = self._token
        if not token:
            raise ConfigurationError("Credential has not been set")
        return token

    @property
    def is_set(self) -> bool:
        with self._lock:
            return bool(self._token)
