"""
Artifact Source Tests
Tests for mintlist/client/artifact_source.py and mintlist/http/client.py

HTTP is served by httpx.MockTransport; no network access.
"""
import asyncio
import json

import httpx
import pytest

from generator.artifacts.io import save_artifact
from generator.pipeline import generate_artifact
from mintlist.client.artifact_source import HttpArtifactSource, LocalArtifactSource
from mintlist.client.models import ProofLookup
from mintlist.config.runtime import RuntimeConfig
from mintlist.http.client import AsyncHttpClient, HttpError
from mintlist.schemas.errors import ArtifactFetchException, ErrorCodes

from fixtures import ADDR_1, ADDR_2, THREE_PROOFS, THREE_ROOT, make_records


PROOFS_URL = "https://mint.example/merkle/proofs.json"
ROOT_URL = "https://mint.example/merkle/root.json"


def _documents():
    artifact = generate_artifact(make_records(3))
    return {
        "/merkle/proofs.json": artifact.to_proofs_document(),
        "/merkle/root.json": artifact.to_root_document(),
    }


class Server:
    """Records requests and serves fixed responses by path."""

    def __init__(self, routes=None):
        self.routes = routes if routes is not None else {
            path: httpx.Response(200, json=doc) for path, doc in _documents().items()
        }
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404)
        if isinstance(route, Exception):
            raise route
        return httpx.Response(route.status_code, headers=route.headers, content=route.content)

    def client(self) -> AsyncHttpClient:
        return AsyncHttpClient(transport=httpx.MockTransport(self))


def _run(coro):
    return asyncio.run(coro)


class TestAsyncHttpClient:

    def test_get_json(self):
        server = Server()

        async def go():
            async with server.client() as client:
                return await client.get(PROOFS_URL)

        response = _run(go())
        assert response.ok
        assert response.json()[ADDR_1]["maxAllowed"] == "10"

    def test_non_2xx(self):
        server = Server(routes={})

        async def go():
            async with server.client() as client:
                return await client.get(PROOFS_URL)

        response = _run(go())
        assert response.status_code == 404
        assert not response.ok

    def test_response_fields(self):
        server = Server()

        async def go():
            async with server.client() as client:
                return await client.get(PROOFS_URL, params={"v": "1"})

        response = _run(go())
        assert response.url == PROOFS_URL + "?v=1"
        assert response.headers["content-type"] == "application/json"

    def test_transport_error_wrapped(self):
        server = Server(routes={"/merkle/proofs.json": httpx.ConnectError("refused")})

        async def go():
            async with server.client() as client:
                await client.get(PROOFS_URL)

        with pytest.raises(HttpError, match="refused"):
            _run(go())


class TestHttpArtifactSource:

    def test_lookup_found(self):
        server = Server()

        async def go():
            async with HttpArtifactSource(PROOFS_URL, root_url=ROOT_URL, client=server.client()) as source:
                return await source.lookup(ADDR_1), await source.fetch_root()

        lookup, root = _run(go())
        assert lookup.found
        assert lookup.max_allowed == 10
        assert list(lookup.proof) == THREE_PROOFS[ADDR_1]
        assert root == THREE_ROOT

    def test_lookup_not_found(self):
        server = Server()

        async def go():
            async with HttpArtifactSource(PROOFS_URL, client=server.client()) as source:
                return await source.lookup("0x" + "b" * 40)

        lookup = _run(go())
        assert not lookup.found
        assert lookup.max_allowed == 0
        assert lookup.proof == ()

    def test_version_query_param_and_no_store(self):
        server = Server()

        async def go():
            async with HttpArtifactSource(PROOFS_URL, version="7", client=server.client()) as source:
                await source.lookup(ADDR_1)

        _run(go())
        request = server.requests[0]
        assert request.url.params["v"] == "7"
        assert request.headers["cache-control"] == "no-store"

    def test_no_version_no_param(self):
        server = Server()

        async def go():
            async with HttpArtifactSource(PROOFS_URL, client=server.client()) as source:
                await source.lookup(ADDR_1)

        _run(go())
        assert "v" not in server.requests[0].url.params

    def test_cache_hit(self):
        server = Server()

        async def go():
            async with HttpArtifactSource(PROOFS_URL, client=server.client()) as source:
                first = await source.lookup(ADDR_1)
                second = await source.lookup(ADDR_1.upper().replace("0X", "0x"))
                return first, second

        first, second = _run(go())
        assert first == second
        assert len(server.requests) == 1

    def test_invalidate_refetches(self):
        server = Server()

        async def go():
            async with HttpArtifactSource(PROOFS_URL, client=server.client()) as source:
                await source.lookup(ADDR_1)
                source.invalidate(ADDR_1)
                await source.lookup(ADDR_1)

        _run(go())
        assert len(server.requests) == 2

    def test_http_error_status(self):
        server = Server(routes={"/merkle/proofs.json": httpx.Response(503)})

        async def go():
            async with HttpArtifactSource(PROOFS_URL, client=server.client()) as source:
                await source.lookup(ADDR_1)

        with pytest.raises(ArtifactFetchException) as exc_info:
            _run(go())
        assert exc_info.value.details["status_code"] == 503
        assert exc_info.value.retryable

    def test_failures_not_cached(self):
        server = Server(routes={"/merkle/proofs.json": httpx.ConnectError("down")})

        async def go():
            async with HttpArtifactSource(PROOFS_URL, client=server.client()) as source:
                for _ in range(2):
                    with pytest.raises(ArtifactFetchException):
                        await source.lookup(ADDR_1)

        _run(go())
        assert len(server.requests) == 2

    def test_invalid_json(self):
        server = Server(routes={"/merkle/proofs.json": httpx.Response(200, content=b"<html>")})

        async def go():
            async with HttpArtifactSource(PROOFS_URL, client=server.client()) as source:
                await source.lookup(ADDR_1)

        with pytest.raises(ArtifactFetchException) as exc_info:
            _run(go())
        assert exc_info.value.code == ErrorCodes.ARTIFACT_MALFORMED

    def test_malformed_entry(self):
        doc = {ADDR_1: {"maxAllowed": "10", "proof": ["0x1234"]}}
        server = Server(routes={"/merkle/proofs.json": httpx.Response(200, json=doc)})

        async def go():
            async with HttpArtifactSource(PROOFS_URL, client=server.client()) as source:
                await source.lookup(ADDR_1)

        with pytest.raises(ArtifactFetchException) as exc_info:
            _run(go())
        assert exc_info.value.code == ErrorCodes.ARTIFACT_MALFORMED

    def test_embedded_root(self):
        doc = dict(_documents()["/merkle/proofs.json"])
        doc["root"] = THREE_ROOT.upper().replace("0X", "0x")
        server = Server(routes={"/merkle/proofs.json": httpx.Response(200, json=doc)})

        async def go():
            async with HttpArtifactSource(PROOFS_URL, client=server.client()) as source:
                return await source.lookup(ADDR_2)

        lookup = _run(go())
        assert lookup.root == THREE_ROOT
        assert lookup.found

    def test_from_config(self):
        config = RuntimeConfig.from_dict({
            "artifact": {"proofs_url": PROOFS_URL, "root_url": ROOT_URL, "version": "2"},
            "cache": {"ttl_seconds": 60},
        })
        source = HttpArtifactSource.from_config(config)

        assert source.proofs_url == PROOFS_URL
        assert source.root_url == ROOT_URL
        assert source.version == "2"
        _run(source.aclose())

    def test_from_config_requires_url(self):
        with pytest.raises(ValueError, match="proofs_url"):
            HttpArtifactSource.from_config(RuntimeConfig())


class TestLocalArtifactSource:

    def test_reads_generated_artifact(self, three_records, tmp_path):
        save_artifact(generate_artifact(three_records), tmp_path)

        async def go():
            async with LocalArtifactSource(tmp_path) as source:
                return await source.lookup(ADDR_2), await source.fetch_root()

        lookup, root = _run(go())
        assert lookup.found
        assert list(lookup.proof) == THREE_PROOFS[ADDR_2]
        assert root == THREE_ROOT

    def test_missing_directory(self, tmp_path):
        async def go():
            await LocalArtifactSource(tmp_path / "nope").lookup(ADDR_1)

        with pytest.raises(ArtifactFetchException):
            _run(go())

    def test_missing_root_file(self, tmp_path):
        (tmp_path / "proofs.json").write_text(json.dumps({}))

        async def go():
            return await LocalArtifactSource(tmp_path).fetch_root()

        assert _run(go()) is None


class TestProofLookup:

    def test_not_an_object(self):
        with pytest.raises(ArtifactFetchException):
            ProofLookup.from_document(ADDR_1, ["not", "a", "dict"])

    def test_bad_root(self):
        with pytest.raises(ArtifactFetchException, match="root"):
            ProofLookup.from_document(ADDR_1, {"root": "0x12"})
