import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


class FakeApi:
    """Stands in for ApiClient: canned responses per (method, path), call log."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []

    def _answer(self, method, path, payload):
        self.calls.append((method, path, payload))
        value = self.responses.get((method, path))
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(payload)
        return value

    def get(self, path, params=None):
        return self._answer("GET", path, params)

    def post(self, path, json=None):
        return self._answer("POST", path, json)

    def put(self, path, json=None):
        return self._answer("PUT", path, json)

    def patch(self, path, json=None):
        return self._answer("PATCH", path, json)

    def delete(self, path):
        return self._answer("DELETE", path, None)

    def post_binary(self, path, json=None):
        return self._answer("POST_BINARY", path, json)


class MemoryStore:
    def __init__(self, token=None):
        self.token = token

    def load(self):
        return self.token

    def save(self, token):
        self.token = token

    def clear(self):
        self.token = None
