from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, Iterator, Optional

import pytest

from mangashelf import config_manager as cfg

_DEFAULT_THUMBNAIL = (
    "http://books.google.com/books/content?id={id}&printsec=frontcover"
    "&img=1&zoom=1&edge=curl&source=gbs_api"
)

_SETTINGS_VARIABLES = (
    "GOOGLE_BOOKS_API_KEY",
    "MANGASHELF_GOOGLE_BOOKS_API_KEY",
    "MANGASHELF_GOOGLE_BOOKS_BASE_URL",
    "MANGASHELF_GOOGLE_BOOKS_REQUEST_TIMEOUT_SECONDS",
    "MANGASHELF_GOOGLE_BOOKS_TIME_BUDGET_SECONDS",
    "MANGASHELF_COVER_SOURCE_TIMEOUT_SECONDS",
    "MANGASHELF_COVER_CACHE_TTL_HOURS",
    "MANGASHELF_COVER_CACHE_MAX_ENTRIES",
    "MANGASHELF_COVER_BATCH_SIZE",
    "MANGASHELF_COVER_BATCH_DELAY_SECONDS",
    "MANGASHELF_COVER_SOURCES",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep settings from the developer environment out of the tests."""

    for variable in _SETTINGS_VARIABLES:
        monkeypatch.delenv(variable, raising=False)
    cfg.reset_settings()
    yield
    cfg.reset_settings()


class FakeClock:
    """Settable clock for cache tests."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def volume_item() -> Callable[..., Dict[str, Any]]:
    """Build a Google Books ``items[]`` entry."""

    def _build(
        title: Optional[str],
        *,
        volume_id: str = "vol1",
        language: Optional[str] = "en",
        subtitle: Optional[str] = None,
        description: Optional[str] = None,
        authors: Optional[Iterable[str]] = None,
        categories: Optional[Iterable[str]] = ("Comics & Graphic Novels",),
        thumbnail: Optional[str] = "",
        page_count: Optional[int] = 200,
        published_date: Optional[str] = "2010-05-04",
    ) -> Dict[str, Any]:
        info: Dict[str, Any] = {}
        if title is not None:
            info["title"] = title
        if subtitle is not None:
            info["subtitle"] = subtitle
        if description is not None:
            info["description"] = description
        if language is not None:
            info["language"] = language
        if authors is not None:
            info["authors"] = list(authors)
        if categories is not None:
            info["categories"] = list(categories)
        if page_count is not None:
            info["pageCount"] = page_count
        if published_date is not None:
            info["publishedDate"] = published_date
        if thumbnail == "":
            thumbnail = _DEFAULT_THUMBNAIL.format(id=volume_id)
        if thumbnail is not None:
            info["imageLinks"] = {"thumbnail": thumbnail}
        return {"id": volume_id, "volumeInfo": info}

    return _build
