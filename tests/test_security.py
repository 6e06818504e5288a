"""Tests for middleware: request size limits and request ID."""

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from app.security import MaxBodySizeMiddleware, RequestIDMiddleware


# ---------------------------------------------------------------------------
# Helpers - build minimal FastAPI apps with specific middleware for isolation
# ---------------------------------------------------------------------------

def _make_app_with_body_limit(max_bytes: int) -> FastAPI:
    """Create a minimal app with MaxBodySizeMiddleware configured."""
    test_app = FastAPI()
    test_app.add_middleware(MaxBodySizeMiddleware, max_bytes=max_bytes)

    @test_app.post("/api/analyze")
    async def analyze(request: Request):
        await request.body()
        return {"result": "ok"}

    @test_app.post("/api/other")
    async def other(request: Request):
        await request.body()
        return {"result": "ok"}

    return test_app


def _make_app_with_request_id() -> FastAPI:
    """Create a minimal app with RequestIDMiddleware configured."""
    test_app = FastAPI()
    test_app.add_middleware(RequestIDMiddleware)

    @test_app.get("/health")
    async def health():
        return {"ok": True}

    return test_app


# ---------------------------------------------------------------------------
# Max Body Size Middleware Tests
# ---------------------------------------------------------------------------

class TestMaxBodySizeMiddleware:
    """Tests for upload size limits on the analysis endpoint."""

    def test_small_upload_allowed(self):
        """Uploads under the limit pass through."""
        client = TestClient(_make_app_with_body_limit(1000))

        resp = client.post("/api/analyze", content=b"x" * 500)
        assert resp.status_code == 200

    def test_oversized_upload_rejected(self):
        """Uploads over the limit on /api/analyze return 413 with the error body."""
        client = TestClient(_make_app_with_body_limit(100))

        resp = client.post("/api/analyze", content=b"x" * 200)
        assert resp.status_code == 413
        assert resp.json() == {
            "error": "Request body exceeds maximum allowed size (100 bytes)",
            "errorKind": "RequestTooLarge",
        }

    def test_other_paths_not_guarded(self):
        """Only the analysis endpoint is subject to the upload limit."""
        client = TestClient(_make_app_with_body_limit(100))

        resp = client.post("/api/other", content=b"x" * 200)
        assert resp.status_code == 200

    def test_empty_body_passes(self):
        client = TestClient(_make_app_with_body_limit(100))

        resp = client.post("/api/analyze", content=b"")
        assert resp.status_code == 200


# ---------------------------------------------------------------------------
# Request ID Middleware Tests
# ---------------------------------------------------------------------------

class TestRequestIDMiddleware:
    """Tests for request ID injection."""

    def test_response_has_request_id_header(self):
        """Every response should include an X-Request-ID header."""
        client = TestClient(_make_app_with_request_id())

        resp = client.get("/health")
        assert resp.status_code == 200
        rid = resp.headers["x-request-id"]
        assert len(rid) == 12  # hex[:12]

    def test_request_ids_are_unique(self):
        """Each request gets a distinct ID."""
        client = TestClient(_make_app_with_request_id())

        ids = {client.get("/health").headers["x-request-id"] for _ in range(10)}
        assert len(ids) == 10


# ---------------------------------------------------------------------------
# Integration: middleware with the real app
# ---------------------------------------------------------------------------

class TestMiddlewareIntegration:
    """Test that middleware is wired correctly in the actual app."""

    def test_error_responses_include_request_id(self):
        from app.main import app

        client = TestClient(app)
        resp = client.get("/api/analyze")
        assert resp.status_code == 405
        assert "x-request-id" in resp.headers
        assert resp.headers["allow"] == "POST"
