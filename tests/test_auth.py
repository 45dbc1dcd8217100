"""Tests for bewit authentication middleware."""

from datetime import timedelta

import pytest
from conftest import CLOCK_SEED
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.testclient import TestClient

from hawkish.bewit.request import RequestDescriptor
from hawkish.common.auth import BewitAuthMiddleware, descriptor_from_request, strip_bewit
from hawkish.common.settings import Settings

FILE_URL = "http://testserver/files/report.pdf"


async def download(request: Request) -> Response:
    return JSONResponse(
        {
            "name": request.path_params["name"],
            "expiry": request.state.bewit_expiry.isoformat(),
        }
    )


async def index(request: Request) -> Response:
    return Response("index", media_type="text/plain")


async def health(request: Request) -> Response:
    return Response("healthy", media_type="text/plain")


def _build_app(settings: Settings, **middleware_kwargs) -> Starlette:
    app = Starlette(
        routes=[
            Route("/", index),
            Route("/files/{name}", download),
            Route("/health", health),
        ]
    )
    app.add_middleware(BewitAuthMiddleware, settings=settings, **middleware_kwargs)
    return app


class TestStripBewit:
    """Tests for strip_bewit."""

    def test_no_query(self):
        assert strip_bewit(None) == (None, None)
        assert strip_bewit("") == (None, None)

    def test_only_bewit(self):
        """A query holding only the bewit becomes absent."""
        assert strip_bewit("bewit=abc") == ("abc", None)

    def test_bewit_among_params(self):
        assert strip_bewit("a=1&bewit=abc&b=2") == ("abc", "a=1&b=2")

    def test_no_bewit(self):
        assert strip_bewit("a=1&bewitx=2") == (None, "a=1&bewitx=2")

    def test_custom_param(self):
        assert strip_bewit("sig=abc&bewit=x", param="sig") == ("abc", "bewit=x")

    def test_percent_encoded_bewit(self):
        assert strip_bewit("bewit=ab%2Dc") == ("ab-c", None)


class TestDescriptorFromRequest:
    """Tests for descriptor_from_request."""

    def _request(self, host: bytes, raw_path: bytes, query: bytes) -> Request:
        return Request(
            {
                "type": "http",
                "method": "GET",
                "scheme": "http",
                "path": raw_path.decode(),
                "raw_path": raw_path,
                "query_string": query,
                "headers": [(b"host", host)],
            }
        )

    def test_matches_from_url(self):
        bewit, descriptor = descriptor_from_request(
            self._request(b"example.com:8080", b"/my+file.pdf", b"a=1&bewit=abc")
        )

        assert bewit == "abc"
        assert descriptor == RequestDescriptor.from_url("http://example.com:8080/my%20file.pdf?a=1")

    def test_ipv6_host_bracketed(self):
        _, descriptor = descriptor_from_request(self._request(b"[::1]:8080", b"/abc", b"bewit=abc"))

        assert descriptor == RequestDescriptor.from_url("http://[::1]:8080/abc")
        assert descriptor.host == "[::1]"


class TestBewitAuthMiddleware:
    """Tests for BewitAuthMiddleware."""

    @pytest.fixture
    def client(self, settings, hawk):
        app = _build_app(settings, credentials=settings.credentials(), bewit=hawk)
        return TestClient(app)

    def test_valid_bewit(self, client, hawk, settings):
        """A valid bewit reaches the route with its expiry on request state."""
        bewit = hawk.generate(
            settings.credentials(),
            RequestDescriptor.from_url(FILE_URL),
            timedelta(minutes=10),
        )

        response = client.get(f"/files/report.pdf?bewit={bewit}")

        assert response.status_code == 200
        assert response.json() == {
            "name": "report.pdf",
            "expiry": (CLOCK_SEED + timedelta(minutes=10)).isoformat(),
        }

    @pytest.mark.parametrize(
        "query",
        ["download=1&bewit={bewit}", "bewit={bewit}&download=1"],
    )
    def test_valid_bewit_with_other_params(self, client, hawk, settings, query):
        """Other query parameters stay signed wherever the bewit sits."""
        bewit = hawk.generate(
            settings.credentials(),
            RequestDescriptor.from_url(f"{FILE_URL}?download=1"),
            timedelta(minutes=10),
        )

        response = client.get("/files/report.pdf?" + query.format(bewit=bewit))

        assert response.status_code == 200

    def test_host_only_url(self, client, hawk, settings):
        """A bewit for a URL without a path is accepted on the root path."""
        bewit = hawk.generate(
            settings.credentials(),
            RequestDescriptor.from_url("http://testserver"),
            timedelta(minutes=10),
        )

        response = client.get(f"http://testserver?bewit={bewit}")

        assert response.status_code == 200
        assert response.text == "index"

    def test_missing_bewit(self, client):
        response = client.get("/files/report.pdf")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "missing_bewit"

    def test_malformed_bewit(self, client):
        response = client.get("/files/report.pdf?bewit=!!!")

        assert response.status_code == 400
        assert response.json()["error"] == {
            "code": "invalid_bewit",
            "message": "Illegal bewit format",
        }

    def test_expired_bewit(self, client, hawk, clock, settings):
        bewit = hawk.generate(
            settings.credentials(),
            RequestDescriptor.from_url(FILE_URL),
            timedelta(minutes=1),
        )
        clock.fast_forward(timedelta(minutes=2))

        response = client.get(f"/files/report.pdf?bewit={bewit}")

        assert response.status_code == 401
        error = response.json()["error"]
        assert error["code"] == "bewit_expired"
        assert error["details"]["expiry"] == (CLOCK_SEED + timedelta(minutes=1)).isoformat()

    def test_bewit_for_other_path(self, client, hawk, settings):
        bewit = hawk.generate(
            settings.credentials(),
            RequestDescriptor.from_url("http://testserver/files/other.pdf"),
            timedelta(minutes=10),
        )

        response = client.get(f"/files/report.pdf?bewit={bewit}")

        assert response.status_code == 401
        assert response.json()["error"] == {
            "code": "unauthorized",
            "message": "MAC mismatch",
        }

    def test_added_query_param(self, client, hawk, settings):
        """Parameters added after signing are rejected."""
        bewit = hawk.generate(
            settings.credentials(),
            RequestDescriptor.from_url(FILE_URL),
            timedelta(minutes=10),
        )

        response = client.get(f"/files/report.pdf?bewit={bewit}&admin=1")

        assert response.status_code == 401

    def test_exempt_path(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.text == "healthy"

    def test_credentials_from_settings(self, settings, hawk):
        """Credentials default to the configured key."""
        client = TestClient(_build_app(settings, bewit=hawk))
        bewit = hawk.generate(
            settings.credentials(),
            RequestDescriptor.from_url(FILE_URL),
            timedelta(minutes=10),
        )

        response = client.get(f"/files/report.pdf?bewit={bewit}")

        assert response.status_code == 200

    def test_custom_bewit_param(self, hawk):
        settings = Settings(_env_file=None, key_id="k1", key="secret", bewit_param="sig")
        client = TestClient(_build_app(settings, bewit=hawk))
        bewit = hawk.generate(
            settings.credentials(),
            RequestDescriptor.from_url(FILE_URL),
            timedelta(minutes=10),
        )

        assert client.get(f"/files/report.pdf?sig={bewit}").status_code == 200
        assert client.get(f"/files/report.pdf?bewit={bewit}").status_code == 401

    def test_missing_key(self, hawk):
        """Without a configured key, requests fail closed."""
        settings = Settings(_env_file=None, key=None)
        client = TestClient(_build_app(settings, bewit=hawk))

        response = client.get("/files/report.pdf?bewit=abc")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "server_misconfigured"
