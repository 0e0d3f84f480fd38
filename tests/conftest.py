"""Pytest configuration and shared fixtures for mcasset_tools tests."""

from __future__ import annotations

import io
import json
import zipfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest

from mcasset_tools.core.client import MetaClient

MANIFEST_URL = "https://meta.example/mc/game/version_manifest.json"
RESOURCE_URL = "http://resources.example"
META_URL = "https://example/meta.json"
LEGACY_META_URL = "https://example/legacy.json"
INDEX_URL = "https://example/indexes/1.16.json"
CLIENT_URL = "https://example/client.jar"


def build_jar(entries: dict[str, bytes]) -> bytes:
    """Build an in-memory zip with the given entries."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as jar:
        for name, data in entries.items():
            jar.writestr(name, data)
    return buffer.getvalue()


class FakeLauncherService:
    """Serves manifest, metadata, asset index, objects and client jar."""

    MANIFEST_URL = MANIFEST_URL
    RESOURCE_URL = RESOURCE_URL
    META_URL = META_URL
    INDEX_URL = INDEX_URL
    CLIENT_URL = CLIENT_URL

    def __init__(self) -> None:
        self.manifest: dict[str, Any] = {
            "latest": {"release": "1.16.3", "snapshot": "1.16.3"},
            "versions": [
                {
                    "id": "1.16.3",
                    "type": "release",
                    "url": META_URL,
                    "time": "2020-09-10T13:44:27+00:00",
                    "releaseTime": "2020-09-10T13:42:37+00:00",
                },
                {
                    "id": "1.5.2",
                    "type": "release",
                    "url": LEGACY_META_URL,
                    "time": "2019-06-28T07:06:16+00:00",
                    "releaseTime": "2013-04-25T15:45:00+00:00",
                },
            ],
        }
        self.metadata: dict[str, Any] = {
            "id": "1.16.3",
            "assets": "1.16",
            "assetIndex": {"id": "1.16", "url": INDEX_URL, "totalSize": 2048},
            "downloads": {"client": {"url": CLIENT_URL, "sha1": "00", "size": 1}},
        }
        self.legacy_metadata: dict[str, Any] = {
            "id": "1.5.2",
            "assets": "pre-1.6",
            "assetIndex": {"id": "pre-1.6", "url": "https://example/indexes/pre-1.6.json", "totalSize": 1},
            "downloads": {"client": {"url": CLIENT_URL}},
        }
        self.asset_index: dict[str, Any] = {
            "objects": {
                "pack.mcmeta": {"hash": "h1", "size": 4},
                "minecraft/sounds/x.ogg": {"hash": "h2", "size": 5},
            }
        }
        self.objects: dict[str, bytes] = {
            "h1": b"meta",
            "h2": b"sound",
        }
        self.client_jar = build_jar({
            "net/minecraft/client/Main.class": b"\xca\xfe\xba\xbe",
            "pack.png": b"\x89PNG icon",
            "assets/.mcassetsroot": b"",
            "assets/minecraft/lang/en_us.json": b'{"key": "value"}',
        })
        self.failures: dict[str, int] = {}
        self.requests: list[str] = []

    def _json(self, data: Any) -> httpx.Response:
        return httpx.Response(200, content=json.dumps(data).encode())

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)

        if url in self.failures:
            return httpx.Response(self.failures[url])
        if url == MANIFEST_URL:
            return self._json(self.manifest)
        if url == META_URL:
            return self._json(self.metadata)
        if url == LEGACY_META_URL:
            return self._json(self.legacy_metadata)
        if url == INDEX_URL:
            return self._json(self.asset_index)
        if url == CLIENT_URL:
            return httpx.Response(200, content=self.client_jar)
        if url.startswith(RESOURCE_URL + "/"):
            hash_str = url.rsplit("/", 1)[1]
            if hash_str in self.objects:
                return httpx.Response(200, content=self.objects[hash_str])
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def launcher_service() -> FakeLauncherService:
    """Fake launcher services with a single supported version."""
    return FakeLauncherService()


@pytest.fixture
def make_client(launcher_service: FakeLauncherService) -> Callable[..., MetaClient]:
    """Factory for MetaClients wired to the fake services."""

    def factory(**kwargs: Any) -> MetaClient:
        kwargs.setdefault("manifest_url", MANIFEST_URL)
        kwargs.setdefault("resource_base_url", RESOURCE_URL)
        return MetaClient(transport=launcher_service.transport, **kwargs)

    return factory


@pytest.fixture
def meta_client(make_client: Callable[..., MetaClient]) -> Generator[MetaClient, None, None]:
    """MetaClient wired to the fake services."""
    with make_client() as client:
        yield client


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Temporary directory for output archives."""
    return tmp_path
