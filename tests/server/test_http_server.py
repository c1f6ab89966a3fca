"""Tests for the HTTP sanitize service."""

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from navguard import __version__
from navguard.sanitization.domain.enums import FailSafePolicy
from navguard.sanitization.domain.models import NavigationRules
from navguard.sanitization.sanitizer import NavigationSanitizer
from navguard.server.http_server import HTTPServer, parse_sanitize_request
from navguard.shared.domain.exceptions import InvalidRequestError


def _server(**kwargs):
    sanitizer = NavigationSanitizer(rules=NavigationRules(), fail_safe=FailSafePolicy.EMPTY)
    return HTTPServer(sanitizer=sanitizer, **kwargs)


@pytest_asyncio.fixture
async def client():
    async with TestClient(TestServer(_server().app)) as test_client:
        yield test_client


class TestParseSanitizeRequest:
    def test_extracts_code(self):
        assert parse_sanitize_request(b'{"code": "go();"}') == "go();"

    @pytest.mark.parametrize("body", [b"", b"{not json", b"\xff\xfe\x00"])
    def test_invalid_json(self, body):
        with pytest.raises(InvalidRequestError, match="Invalid JSON"):
            parse_sanitize_request(body)

    @pytest.mark.parametrize("body", [b"{}", b'{"code": 5}', b'{"code": null}', b'["code"]'])
    def test_code_must_be_string(self, body):
        with pytest.raises(InvalidRequestError, match="must be a string"):
            parse_sanitize_request(body)


class TestSanitizeEndpoint:
    @pytest.mark.asyncio
    async def test_sanitizes_code(self, client):
        resp = await client.post(
            "/sanitize", json={"code": 'go();\nwindow.location = "https://evil.com";'}
        )

        assert resp.status == 200
        assert await resp.json() == {"code": "go();"}

    @pytest.mark.asyncio
    async def test_safe_code_round_trips(self, client):
        code = "const x = 5;\n\nconsole.log(x);\n"

        resp = await client.post("/sanitize", json={"code": code})

        assert (await resp.json())["code"] == code

    @pytest.mark.asyncio
    async def test_unparseable_code_returns_fail_safe(self, client):
        resp = await client.post("/sanitize", json={"code": "function broken( { invalid"})

        assert resp.status == 200
        assert await resp.json() == {"code": ""}

    @pytest.mark.asyncio
    async def test_invalid_json(self, client):
        resp = await client.post("/sanitize", data="{oops")

        assert resp.status == 400
        assert await resp.json() == {"error": "Invalid JSON"}

    @pytest.mark.asyncio
    async def test_non_string_code(self, client):
        resp = await client.post("/sanitize", json={"code": ["location = 1"]})

        assert resp.status == 400
        assert await resp.json() == {"error": "`code` must be a string"}

    @pytest.mark.asyncio
    async def test_other_method_is_not_found(self, client):
        resp = await client.get("/sanitize")

        assert resp.status == 404
        assert await resp.text() == "Not Found"

    @pytest.mark.asyncio
    async def test_unknown_path_is_not_found(self, client):
        resp = await client.post("/elsewhere", json={"code": "x"})

        assert resp.status == 404

    @pytest.mark.asyncio
    async def test_oversized_body_is_refused(self):
        async with TestClient(TestServer(_server(max_request_bytes=64).app)) as small:
            resp = await small.post("/sanitize", json={"code": "x = 1;" * 100})

            assert resp.status == 413


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/health")

        assert resp.status == 200
        data = await resp.json()
        assert data["status"] == "healthy"
        assert data["version"] == __version__
