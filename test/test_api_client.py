import threading

import pytest
import requests

from conftest import MemoryStore

from salesdash.application.session import SessionContext
from salesdash.domain.errors import ApiError, AuthenticationError, NotFoundError
from salesdash.domain.models import User
from salesdash.repositories.api_client import ApiClient


class FakeResponse:
    def __init__(self, status_code=200, body=None, content=None):
        self.status_code = status_code
        self._body = body
        if content is not None:
            self.content = content
        elif body is None:
            self.content = b""
        else:
            self.content = b"{}"

    def json(self):
        if self._body is None:
            raise ValueError("no json")
        return self._body


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def _client(http, token=None):
    session = SessionContext(MemoryStore(token)).hydrate()
    return ApiClient("http://backend:3000/", session, http=http, timeout=3)


def test_bearer_header_sent_when_token_present():
    http = FakeHttp(FakeResponse(200, [{"id": 1}]))

    assert _client(http, token="tok").get("/products") == [{"id": 1}]

    method, url, kwargs = http.requests[0]
    assert (method, url) == ("GET", "http://backend:3000/products")
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["timeout"] == 3


def test_no_authorization_header_without_token():
    http = FakeHttp(FakeResponse(200, {"ok": True}))

    _client(http).post("/auth/login", json={"email": "a@b.co"})

    assert "Authorization" not in http.requests[0][2]["headers"]
    assert http.requests[0][2]["json"] == {"email": "a@b.co"}


def test_token_change_is_seen_by_next_request():
    http = FakeHttp(FakeResponse(200, {}))
    client = _client(http)

    client.session.login("fresh", User(id=1, name="Ana", email="ana@example.com"))
    client.get("/users/profile")

    assert http.requests[0][2]["headers"]["Authorization"] == "Bearer fresh"


def test_empty_query_params_are_dropped():
    http = FakeHttp(FakeResponse(200, []))

    _client(http, "tok").get("/sales", params={"startDate": "2024-01-01", "productId": None, "userId": ""})

    assert http.requests[0][2]["params"] == {"startDate": "2024-01-01"}


@pytest.mark.parametrize(
    "status, error_type",
    [(401, AuthenticationError), (404, NotFoundError), (500, ApiError), (400, ApiError)],
)
def test_error_statuses_are_mapped(status, error_type):
    http = FakeHttp(FakeResponse(status, {"message": "nope"}))

    with pytest.raises(error_type) as info:
        _client(http, "tok").get("/products")

    assert info.value.status == status
    assert str(info.value) == "nope"


def test_validation_messages_from_backend_are_joined():
    http = FakeHttp(FakeResponse(400, {"message": ["name too short", "email invalid"]}))

    with pytest.raises(ApiError, match="name too short; email invalid"):
        _client(http, "tok").post("/products", json={})


def test_error_without_body_falls_back_to_status():
    http = FakeHttp(FakeResponse(502))

    with pytest.raises(ApiError, match="HTTP 502"):
        _client(http, "tok").get("/products")


def test_transport_failure_becomes_api_error():
    http = FakeHttp(error=requests.ConnectionError("refused"))

    with pytest.raises(ApiError) as info:
        _client(http, "tok").get("/products")

    assert info.value.status is None


def test_empty_body_yields_none():
    http = FakeHttp(FakeResponse(204))

    assert _client(http, "tok").delete("/products/1") is None


def test_binary_download_returns_raw_bytes():
    http = FakeHttp(FakeResponse(200, content=b"%PDF-1.7"))

    assert _client(http, "tok").post_binary("/reports/generate", json={"format": "pdf"}) == b"%PDF-1.7"


class BlockingHttp(FakeHttp):
    """Holds each request until ``barrier`` parties are in flight at once."""

    def __init__(self, barrier):
        super().__init__(FakeResponse(200, []))
        self.barrier = barrier
        self.closed = False

    def request(self, method, url, **kwargs):
        self.barrier.wait(timeout=5)
        return super().request(method, url, **kwargs)

    def close(self):
        self.closed = True


def test_concurrent_calls_never_share_an_http_session():
    barrier = threading.Barrier(2)
    created = []

    def factory():
        http = BlockingHttp(barrier)
        created.append(http)
        return http

    session = SessionContext(MemoryStore("tok")).hydrate()
    client = ApiClient("http://backend:3000", session, session_factory=factory)

    workers = [threading.Thread(target=client.get, args=(path,)) for path in ("/sales", "/products")]
    for w in workers:
        w.start()
    for w in workers:
        w.join(timeout=5)

    assert len(created) == 2
    assert [len(http.requests) for http in created] == [1, 1]

    client.close()
    assert all(http.closed for http in created)


def test_idle_session_is_reused_for_sequential_calls():
    created = []

    def factory():
        http = FakeHttp(FakeResponse(200, []))
        created.append(http)
        return http

    client = ApiClient("http://backend:3000", SessionContext(MemoryStore("tok")).hydrate(), session_factory=factory)

    client.get("/sales")
    client.get("/products")

    assert len(created) == 1
    assert [r[1] for r in created[0].requests] == ["http://backend:3000/sales", "http://backend:3000/products"]
