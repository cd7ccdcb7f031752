from __future__ import annotations

import logging
from contextlib import contextmanager
import threading
from typing import Any, Callable, Iterator, Optional

import requests

from salesdash.domain.errors import ApiError, AuthenticationError, NotFoundError

log = logging.getLogger("salesdash.api")


class ApiClient:
    """HTTP access to the sales backend.

    The bearer token is read from the session on every request, so a login
    or logout is picked up without rebuilding the client. Failures are raised
    as :class:`ApiError` subclasses and never retried.

    Calls run on worker threads. Each in-flight call checks out its own
    ``requests.Session`` from a pool; idle sessions are reused. Passing
    ``http`` pins every call to that one object.
    """

    def __init__(
        self,
        base_url: str,
        session,
        http: requests.Session | None = None,
        timeout: float = 10,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout
        self._session_factory = (lambda: http) if http is not None else session_factory
        self._idle: list[requests.Session] = []
        self._lock = threading.Lock()

    @contextmanager
    def _checkout(self) -> Iterator[requests.Session]:
        with self._lock:
            http = self._idle.pop() if self._idle else None
        if http is None:
            http = self._session_factory()
        try:
            yield http
        finally:
            with self._lock:
                if http not in self._idle:
                    self._idle.append(http)

    def close(self) -> None:
        with self._lock:
            idle, self._idle = self._idle, []
        for http in idle:
            http.close()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self.session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message")
            if isinstance(message, list):
                return "; ".join(str(m) for m in message)
            if message:
                return str(message)
        return f"HTTP {response.status_code}"

    def _send(self, method: str, path: str, json: Any = None, params: Optional[dict] = None) -> requests.Response:
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}
        try:
            with self._checkout() as http:
                response = http.request(
                    method,
                    self._url(path),
                    json=json,
                    params=params or None,
                    headers=self._headers(),
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            log.warning("api_transport_failed method=%s path=%s error=%s", method, path, e)
            raise ApiError(f"Backend unreachable: {e}") from e

        status = response.status_code
        if status >= 400:
            message = self._error_message(response)
            log.warning("api_request_failed method=%s path=%s status=%s message=%s", method, path, status, message)
            if status == 401:
                raise AuthenticationError(message, status)
            if status == 404:
                raise NotFoundError(message, status)
            raise ApiError(message, status)

        log.info("api_request method=%s path=%s status=%s", method, path, status)
        return response

    def _json(self, response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON from backend: {e}", response.status_code) from e

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self._json(self._send("GET", path, params=params))

    def post(self, path: str, json: Any = None) -> Any:
        return self._json(self._send("POST", path, json=json))

    def put(self, path: str, json: Any = None) -> Any:
        return self._json(self._send("PUT", path, json=json))

    def patch(self, path: str, json: Any = None) -> Any:
        return self._json(self._send("PATCH", path, json=json))

    def delete(self, path: str) -> Any:
        return self._json(self._send("DELETE", path))

    def post_binary(self, path: str, json: Any = None) -> bytes:
        return self._send("POST", path, json=json).content
