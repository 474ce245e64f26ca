# ================================
# FILE: tests/test_middleware.py
# ================================

import logging

import pytest
from fastapi.testclient import TestClient

from harness_demo.core.logging_config import ACCESS_LOGGER_NAME
from harness_demo.core.monitoring import REQUEST_COUNT
from harness_demo.main import create_application
from harness_demo.middleware.capture import ResponseCapture
from harness_demo.middleware.chain import chain
from harness_demo.middleware.logging_middleware import RequestLoggingMiddleware, _remote_address
from harness_demo.middleware.security_headers import SECURITY_HEADERS, SecurityHeadersMiddleware

EXPECTED_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'self'; img-src 'self' data:; style-src 'self' 'unsafe-inline'; script-src 'self'",
}

HTTP_SCOPE = {
    "type": "http",
    "method": "GET",
    "path": "/x",
    "headers": [],
    "client": ("10.0.0.7", 5123),
}


async def _receive():
    return {"type": "http.request", "body": b"", "more_body": False}


def _collector():
    sent = []

    async def send(message):
        sent.append(message)

    return sent, send


def _plain_app(status=200, chunks=(b"ok",), headers=None):
    async def app(scope, receive, send):
        await send({"type": "http.response.start", "status": status, "headers": headers or []})
        for i, chunk in enumerate(chunks):
            await send({"type": "http.response.body", "body": chunk, "more_body": i < len(chunks) - 1})
    return app


class FakeMonitor:
    def __init__(self):
        self.started = 0
        self.ended = []

    def record_request_start(self):
        self.started += 1

    def record_request_end(self, method, path, status, processing_time):
        self.ended.append((method, path, status))


class TestResponseCapture:
    """ResponseCapture observes status and size without altering messages"""

    @pytest.mark.asyncio
    async def test_records_status_and_sums_bytes(self):
        sent, send = _collector()
        capture = ResponseCapture(send)
        messages = [
            {"type": "http.response.start", "status": 404, "headers": []},
            {"type": "http.response.body", "body": b"abc", "more_body": True},
            {"type": "http.response.body", "body": b"", "more_body": True},
            {"type": "http.response.body", "body": b"defg", "more_body": False},
        ]
        for message in messages:
            await capture(message)

        assert capture.status == 404
        assert capture.size == 7
        assert sent == messages

    @pytest.mark.asyncio
    async def test_body_without_start_is_implicit_200(self):
        _, send = _collector()
        capture = ResponseCapture(send)
        await capture({"type": "http.response.body", "body": b"hello"})
        assert capture.status == 200
        assert capture.size == 5

    def test_nothing_written(self):
        capture = ResponseCapture(_collector()[1])
        assert capture.status is None
        assert capture.size == 0


class TestChain:
    """chain(T, A, B) behaves exactly like A(B(T))"""

    @staticmethod
    def _recorder(name, events):
        def factory(app):
            async def wrapped(scope, receive, send):
                events.append(f"{name}:in")
                await app(scope, receive, send)
                events.append(f"{name}:out")
            return wrapped
        return factory

    @staticmethod
    def _terminal(events):
        async def app(scope, receive, send):
            events.append("T")
        return app

    @pytest.mark.asyncio
    async def test_first_middleware_is_outermost(self):
        events = []
        app = chain(self._terminal(events), self._recorder("A", events), self._recorder("B", events))
        await app(HTTP_SCOPE, _receive, _collector()[1])
        assert events == ["A:in", "B:in", "T", "B:out", "A:out"]

    @pytest.mark.asyncio
    async def test_matches_manual_nesting(self):
        chained, nested = [], []
        A, B = self._recorder("A", chained), self._recorder("B", chained)
        await chain(self._terminal(chained), A, B)(HTTP_SCOPE, _receive, _collector()[1])

        A, B = self._recorder("A", nested), self._recorder("B", nested)
        await A(B(self._terminal(nested)))(HTTP_SCOPE, _receive, _collector()[1])

        assert chained == nested

    def test_empty_chain_returns_app(self):
        app = self._terminal([])
        assert chain(app) is app

    @pytest.mark.asyncio
    async def test_inner_exceptions_propagate(self):
        async def failing(scope, receive, send):
            raise RuntimeError("boom")

        app = chain(failing, SecurityHeadersMiddleware, RequestLoggingMiddleware)
        with pytest.raises(RuntimeError, match="boom"):
            await app(HTTP_SCOPE, _receive, _collector()[1])


class TestSecurityHeaders:
    """Every HTTP response carries the fixed header set"""

    def test_header_values_are_exact(self):
        assert SECURITY_HEADERS == EXPECTED_HEADERS

    @pytest.mark.parametrize(
        "method, path, status",
        [
            ("GET", "/", 200),
            ("GET", "/healthz", 200),
            ("GET", "/version", 200),
            ("GET", "/static/app.js", 200),
            ("GET", "/missing", 404),
            ("POST", "/healthz", 405),
        ],
    )
    def test_every_route(self, client: TestClient, method, path, status):
        response = client.request(method, path)
        assert response.status_code == status
        for name, value in EXPECTED_HEADERS.items():
            assert response.headers[name] == value

    def test_warming_ready_probe_has_headers(self, warming_client: TestClient):
        response = warming_client.get("/readyz")
        assert response.status_code == 503
        assert response.headers["X-Frame-Options"] == "DENY"

    @pytest.mark.asyncio
    async def test_overrides_inner_values(self):
        inner = _plain_app(headers=[(b"x-frame-options", b"SAMEORIGIN")])
        sent, send = _collector()
        await SecurityHeadersMiddleware(inner)(dict(HTTP_SCOPE), _receive, send)

        headers = [(k.decode(), v.decode()) for k, v in sent[0]["headers"]]
        assert [v for k, v in headers if k == "x-frame-options"] == ["DENY"]

    @pytest.mark.asyncio
    async def test_non_http_scope_untouched(self):
        seen = []

        async def app(scope, receive, send):
            seen.append(send)

        _, send = _collector()
        await SecurityHeadersMiddleware(app)({"type": "lifespan"}, _receive, send)
        assert seen == [send]


class TestRequestLogging:
    """One structured access record per completed request"""

    @pytest.mark.asyncio
    async def test_emits_single_record(self, caplog):
        monitor = FakeMonitor()
        app = RequestLoggingMiddleware(_plain_app(status=201, chunks=(b"ab", b"cde")), monitor=monitor)
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER_NAME):
            await app(dict(HTTP_SCOPE), _receive, _collector()[1])

        records = [r for r in caplog.records if r.name == ACCESS_LOGGER_NAME]
        assert len(records) == 1
        record = records[0]
        assert record.getMessage() == "request"
        assert record.method == "GET"
        assert record.path == "/x"
        assert record.status == 201
        assert record.bytes == 5
        assert record.remote == "10.0.0.7:5123"
        assert isinstance(record.dur_ms, int) and record.dur_ms >= 0
        assert monitor.started == 1
        assert monitor.ended == [("GET", "<unmatched>", 201)]

    @pytest.mark.asyncio
    async def test_failure_logged_as_500_and_reraised(self, caplog):
        async def failing(scope, receive, send):
            raise ValueError("bad")

        monitor = FakeMonitor()
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER_NAME):
            with pytest.raises(ValueError):
                await RequestLoggingMiddleware(failing, monitor=monitor)(dict(HTTP_SCOPE), _receive, _collector()[1])

        records = [r for r in caplog.records if r.name == ACCESS_LOGGER_NAME]
        assert [r.status for r in records] == [500]
        assert monitor.ended == [("GET", "<unmatched>", 500)]

    @pytest.mark.asyncio
    async def test_lifespan_not_logged(self, caplog):
        async def app(scope, receive, send):
            pass

        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER_NAME):
            await RequestLoggingMiddleware(app, monitor=FakeMonitor())({"type": "lifespan"}, _receive, _collector()[1])
        assert not [r for r in caplog.records if r.name == ACCESS_LOGGER_NAME]

    def test_logs_through_full_app(self, client: TestClient, caplog):
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER_NAME):
            response = client.get("/healthz")

        records = [r for r in caplog.records if r.name == ACCESS_LOGGER_NAME]
        assert len(records) == 1
        assert records[0].path == "/healthz"
        assert records[0].status == 200
        assert records[0].bytes == len(response.content)

    def test_custom_logger(self, settings, caplog):
        custom = logging.getLogger("tests.access")
        client = TestClient(create_application(settings, logger=custom))
        with caplog.at_level(logging.INFO, logger="tests.access"):
            client.get("/livez")
        assert [r.path for r in caplog.records if r.name == "tests.access"] == ["/livez"]

    @pytest.mark.asyncio
    async def test_ipv6_remote_is_bracketed(self, caplog):
        scope = dict(HTTP_SCOPE, client=("::1", 5123))
        with caplog.at_level(logging.INFO, logger=ACCESS_LOGGER_NAME):
            await RequestLoggingMiddleware(_plain_app(), monitor=FakeMonitor())(scope, _receive, _collector()[1])

        records = [r for r in caplog.records if r.name == ACCESS_LOGGER_NAME]
        assert records[0].remote == "[::1]:5123"

    def test_missing_client_logs_empty_remote(self):
        assert _remote_address({"type": "http"}) == ""


def _path_labels():
    return {
        sample.labels["path"]
        for metric in REQUEST_COUNT.collect()
        for sample in metric.samples
        if sample.name.endswith("_total")
    }


class TestMetricLabels:
    """Request metrics are labelled by route, never by raw path"""

    def test_known_routes_use_their_template(self, client: TestClient):
        client.get("/healthz")
        client.get("/readyz")
        client.get("/static/app.js")
        labels = _path_labels()
        assert {"/healthz", "/readyz", "/static"} <= labels

    def test_random_paths_add_bounded_labels(self, client: TestClient):
        client.get("/static/app.js")
        client.get("/warm-up-unmatched")
        before = _path_labels()

        for i in range(50):
            client.get(f"/{i:08x}deadbeef")
            client.get(f"/static/{i:08x}.js")

        added = _path_labels() - before
        assert added <= {"/static", "<unmatched>"}
        assert not any("deadbeef" in label or label.endswith(".js") for label in _path_labels())
