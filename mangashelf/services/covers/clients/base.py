"""Base class for cover image sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..types import CoverSource, SourceResult


class BaseCoverSource(ABC):
    """Abstract base class for cover image sources.

    Every source implements :meth:`search`, which returns a
    :class:`SourceResult` when it has a cover for the title and None
    otherwise. Implementations should not raise; network and parsing
    failures are reported as None.
    """

    # Subclasses must set this class attribute
    name: CoverSource

    # Total time the resolver allows one search; None means the resolver default.
    time_budget_seconds: Optional[float] = None

    @property
    def is_available(self) -> bool:
        """Return True if this source can be queried."""
        return True

    @abstractmethod
    async def search(self, title: str, author: Optional[str] = None) -> Optional[SourceResult]:
        """Look up a cover for ``title`` (and optionally ``author``).

        Args:
            title: The manga title as entered by the caller.
            author: Optional author name used to disambiguate results.

        Returns:
            A SourceResult if a cover is found, None otherwise.
        """
        ...

    async def aclose(self) -> None:
        """Release resources."""

    async def __aenter__(self) -> "BaseCoverSource":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name.value!r})"


__all__ = ["BaseCoverSource"]
