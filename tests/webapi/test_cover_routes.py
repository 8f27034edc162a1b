from __future__ import annotations

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from mangashelf.services.covers.cache import CoverCache
from mangashelf.services.covers.clients.base import BaseCoverSource
from mangashelf.services.covers.registry import CoverSourceRegistry
from mangashelf.services.covers.resolver import CoverResolver
from mangashelf.services.covers.types import CoverSource, SourceResult
from mangashelf.webapi.application import create_app
from mangashelf.webapi.dependencies import get_cover_resolver

pytestmark = pytest.mark.webapi


class _TableSource(BaseCoverSource):
    name = CoverSource.MANGA_DATABASE

    def __init__(self) -> None:
        self.calls = 0

    async def search(self, title: str, author: Optional[str] = None) -> Optional[SourceResult]:
        self.calls += 1
        if title == "Unknown":
            return None
        return SourceResult(url=f"https://example.com/{title.lower()}.jpg", score=0.8, source=self.name)


def _create_client() -> tuple:
    app = create_app()
    source = _TableSource()
    resolver = CoverResolver(CoverSourceRegistry([source]), CoverCache(), batch_delay_seconds=0)
    app.dependency_overrides[get_cover_resolver] = lambda: resolver
    return TestClient(app), source, resolver


def test_lookup_cover_returns_url() -> None:
    client, _, _ = _create_client()

    response = client.get("/covers", params={"title": " Naruto ", "author": "Masashi Kishimoto"})

    assert response.status_code == 200
    assert response.json() == {
        "title": "Naruto",
        "author": "Masashi Kishimoto",
        "url": "https://example.com/naruto.jpg",
    }


def test_lookup_cover_falls_back_to_placeholder() -> None:
    client, _, _ = _create_client()

    response = client.get("/covers", params={"title": "Unknown"})

    assert response.status_code == 200
    assert response.json()["url"] == "https://via.placeholder.com/192x288/DDA0DD/FFFFFF?text=U"


def test_lookup_cover_force_bypasses_cache() -> None:
    client, source, _ = _create_client()

    client.get("/covers", params={"title": "Naruto"})
    client.get("/covers", params={"title": "Naruto"})
    client.get("/covers", params={"title": "Naruto", "force": "true"})

    assert source.calls == 2


@pytest.mark.parametrize("params", [{}, {"title": ""}, {"title": "   "}])
def test_lookup_cover_requires_title(params) -> None:
    client, source, _ = _create_client()

    response = client.get("/covers", params=params)

    assert response.status_code == 422
    assert source.calls == 0


def test_batch_lookup() -> None:
    client, _, _ = _create_client()

    response = client.post(
        "/covers/batch",
        json={"items": [{"title": "Naruto"}, {"title": "Bleach", "author": "Tite Kubo"}]},
    )

    assert response.status_code == 200
    assert response.json() == {
        "covers": {
            "Naruto": "https://example.com/naruto.jpg",
            "Bleach": "https://example.com/bleach.jpg",
        }
    }


def test_batch_lookup_rejects_blank_titles() -> None:
    client, _, _ = _create_client()

    response = client.post("/covers/batch", json={"items": [{"title": "  "}]})

    assert response.status_code == 422


def test_cache_stats_and_clear() -> None:
    client, _, _ = _create_client()
    client.get("/covers", params={"title": "Naruto"})
    client.get("/covers", params={"title": "Unknown"})

    stats = client.get("/covers/cache/stats")
    assert stats.status_code == 200
    assert stats.json() == {"total": 2, "valid": 2, "expired": 0, "version_mismatch": 0}

    cleared = client.delete("/covers/cache")
    assert cleared.status_code == 200
    assert cleared.json() == {"cleared": 2}
    assert client.get("/covers/cache/stats").json()["total"] == 0


def test_healthcheck() -> None:
    client, _, _ = _create_client()
    assert client.get("/_health").json() == {"status": "ok"}
