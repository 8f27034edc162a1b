"""Filter, score and select book candidates for a requested title."""

from __future__ import annotations

from typing import Iterable, Optional

from mangashelf import logging_manager as log_mgr
from mangashelf.config_manager.constants import DEFAULT_BEST_MATCH_THRESHOLD
from .classification import (
    author_matches,
    combine_text,
    has_english_edition_phrase,
    is_complete_set,
    is_first_volume,
    is_manga_content,
    title_similarity,
)
from .types import DEFAULT_WEIGHTS, Candidate, ScoredCandidate, ScoringWeights

logger = log_mgr.get_logger().getChild("services.covers.scoring")

MIN_TITLE_SIMILARITY = 0.7
# Similarity above which the manga-keyword check is skipped.
CONTENT_CHECK_BYPASS_SIMILARITY = 0.95
# Similarity above which an author mismatch is tolerated.
AUTHOR_CHECK_BYPASS_SIMILARITY = 0.9


def rejection_reason(candidate: Candidate, title: str, author: Optional[str] = None) -> Optional[str]:
    """Return why ``candidate`` is filtered out, or None if it survives.

    Checks run in a fixed order and stop at the first failure.
    """
    if not candidate.title:
        return "missing_title"
    if candidate.language != "en":
        return "not_english"
    if not is_first_volume(candidate.title, candidate.subtitle, candidate.description):
        return "not_first_volume"

    similarity = title_similarity(candidate.title, title)
    if similarity < CONTENT_CHECK_BYPASS_SIMILARITY and not is_manga_content(
        candidate.title, candidate.subtitle, candidate.description, candidate.categories
    ):
        return "not_manga"
    if (
        author
        and candidate.authors
        and similarity < AUTHOR_CHECK_BYPASS_SIMILARITY
        and not author_matches(candidate.authors, author)
    ):
        return "author_mismatch"
    if is_complete_set(candidate.title, candidate.subtitle, candidate.description):
        return "complete_set"
    if similarity < MIN_TITLE_SIMILARITY:
        return "low_title_similarity"
    return None


def passes_filters(candidate: Candidate, title: str, author: Optional[str] = None) -> bool:
    return rejection_reason(candidate, title, author) is None


def score_candidate(
    candidate: Candidate,
    title: str,
    author: Optional[str] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
) -> float:
    """Return an additive relevance score clamped to ``[0, 1]``."""
    similarity = title_similarity(candidate.title, title)
    score = similarity * weights.title_similarity

    if is_first_volume(candidate.title or "", candidate.subtitle, candidate.description):
        score += weights.first_volume_bonus
    else:
        score -= weights.not_first_volume_penalty

    if candidate.language == "en":
        score += weights.english_bonus
    elif candidate.language == "ja":
        score -= weights.japanese_penalty
    elif candidate.language:
        score -= weights.other_language_penalty

    if has_english_edition_phrase(combine_text(candidate.title, candidate.subtitle, candidate.description)):
        score += weights.english_edition_bonus

    if author and author_matches(candidate.authors, author):
        score += weights.author_match_bonus

    low, high = weights.page_count_range
    if candidate.page_count is not None and low <= candidate.page_count <= high:
        score += weights.page_count_bonus

    if candidate.published_year is not None and candidate.published_year >= weights.recent_publication_year:
        score += weights.recent_publication_bonus

    return max(0.0, min(1.0, score))


def select_best(
    candidates: Iterable[Candidate],
    title: str,
    author: Optional[str] = None,
    weights: ScoringWeights = DEFAULT_WEIGHTS,
    min_score: float = DEFAULT_BEST_MATCH_THRESHOLD,
) -> Optional[ScoredCandidate]:
    """Pick the highest-scoring candidate that survives every filter.

    Ties keep the earliest candidate. Returns None when nothing survives or
    the best score is below ``min_score``.
    """
    best: Optional[ScoredCandidate] = None
    rejected = 0
    for candidate in candidates:
        reason = rejection_reason(candidate, title, author)
        if reason is not None:
            rejected += 1
            logger.debug("Rejected candidate %r: %s", candidate.title, reason)
            continue
        scored = ScoredCandidate(
            candidate=candidate,
            score=score_candidate(candidate, title, author, weights),
            title_similarity=title_similarity(candidate.title, title),
        )
        if best is None or scored.score > best.score:
            best = scored

    if best is None:
        logger.debug("No candidate survived filtering for %r (%d rejected)", title, rejected)
        return None
    if best.score < min_score:
        logger.debug(
            "Best candidate %r for %r scored %.2f, below %.2f",
            best.candidate.title,
            title,
            best.score,
            min_score,
        )
        return None
    return best


__all__ = [
    "MIN_TITLE_SIMILARITY",
    "passes_filters",
    "rejection_reason",
    "score_candidate",
    "select_best",
]
