"""Filtering and statistics over a snippet collection.

All functions are pure: they never mutate the input and return new lists
that keep the input order.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence

from .models import Snippet

logger = logging.getLogger(__name__)


def snippets_search(snippets: Iterable[Snippet], term: str | None) -> list[Snippet]:
    """Case-insensitive substring match on title, code or any tag.

    A blank or missing *term* returns every snippet.
    """
    if not term or not term.strip():
        return list(snippets)
    term = term.lower()
    return [s for s in snippets if s.matches_text(term)]


def snippets_with_all_tags(snippets: Iterable[Snippet], tags: Iterable[str] | None) -> list[Snippet]:
    """Keep snippets carrying every tag in *tags*. No tags keeps everything."""
    wanted = set(tags or [])
    if not wanted:
        return list(snippets)
    return [s for s in snippets if wanted.issubset(s.tags or [])]


def snippets_with_any_tag(snippets: Iterable[Snippet], tags: Iterable[str] | None) -> list[Snippet]:
    """Keep snippets carrying at least one tag in *tags*. No tags keeps everything."""
    wanted = set(tags or [])
    if not wanted:
        return list(snippets)
    return [s for s in snippets if not wanted.isdisjoint(s.tags or [])]


def snippets_favorites(snippets: Iterable[Snippet], favorites_only: bool = True) -> list[Snippet]:
    """Keep favorite snippets, or everything when *favorites_only* is False."""
    if not favorites_only:
        return list(snippets)
    return [s for s in snippets if s.is_favorite]


def snippets_filter(
    snippets: Sequence[Snippet],
    search_text: str | None = None,
    selected_tags: Iterable[str] | None = None,
    favorites_only: bool = False,
) -> list[Snippet]:
    """Return the visible snippets for the given search, tag and favorite filters.

    Filters run in a fixed order (text, tags, favorites). Tag selection uses
    OR semantics: a snippet is kept if it has any selected tag. Use
    ``snippets_with_all_tags`` for AND semantics.
    """
    visible = snippets_search(snippets, search_text)
    logger.debug("Text filter %r kept %d of %d snippets", search_text, len(visible), len(snippets))

    selected = set(selected_tags or [])
    if selected:
        before = len(visible)
        visible = snippets_with_any_tag(visible, selected)
        logger.debug("Tag filter %s kept %d of %d snippets", sorted(selected), len(visible), before)

    if favorites_only:
        before = len(visible)
        visible = snippets_favorites(visible)
        logger.debug("Favorites filter kept %d of %d snippets", len(visible), before)

    return visible


def snippets_tags(snippets: Iterable[Snippet]) -> list[str]:
    """Return every distinct non-empty tag, sorted ascending."""
    tags = set()
    for snippet in snippets:
        tags.update(tag for tag in snippet.tags or [] if tag)
    return sorted(tags)


def snippets_stats(snippets: Sequence[Snippet]) -> dict:
    """Return a dictionary of collection statistics."""
    if not snippets:
        return {
            "num_snippets": 0,
            "num_favorites": 0,
            "num_tags": 0,
            "avg_snippet_size": 0,
            "languages": {},
            "tags": {},
        }

    languages = Counter(s.language or "" for s in snippets)
    tags = Counter(tag for s in snippets for tag in s.tags or [] if tag)

    return {
        "num_snippets": len(snippets),
        "num_favorites": sum(1 for s in snippets if s.is_favorite),
        "num_tags": len(tags),
        "avg_snippet_size": sum(len(s.code or "") for s in snippets) / len(snippets),
        "languages": dict(languages.most_common()),
        "tags": dict(tags.most_common()),
    }
