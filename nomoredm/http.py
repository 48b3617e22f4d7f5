from __future__ import annotations

import logging
from typing import Any

import requests

from nomoredm.config import AppSettings

logger = logging.getLogger(__name__)


class ApiHttpError(RuntimeError):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class HttpClient:
    def __init__(self, settings: AppSettings, session: requests.Session | None = None):
        self._settings = settings
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": "nomoredm/0.1.0",
            }
        )

    def put_json(self, token: str, path: str, payload: Any) -> Any:
        return self.send_json("PUT", token, path, payload)

    def send_json(self, method: str, token: str, path: str, payload: Any) -> Any:
        url = f"{self._settings.base_url}{path}"
        headers = {"Authorization": f"{self._settings.auth_scheme} {token}"}

        logger.debug("%s %s", method, url)
        response = self._session.request(
            method,
            url,
            headers=headers,
            json=payload,
            timeout=self._settings.timeout_seconds,
        )

        if response.ok:
            if not response.content:
                return {}
            return response.json()

        message = response.text[:500]
        raise ApiHttpError(
            status_code=response.status_code,
            message=f"HTTP {response.status_code}: {message}",
        )

    def close(self) -> None:
        self._session.close()
