"""Edit-distance similarity and near-duplicate detection for snippets.

Each comparison costs O(len(a) * len(b)) in the Levenshtein computation,
so checking a candidate against the whole collection is O(n * m^2) for n
snippets of length m. That is fine for a personal library of a few hundred
snippets; large code bodies dominate the cost.
"""

from __future__ import annotations

from collections.abc import Iterable

from rapidfuzz.distance import Levenshtein

from .models import Snippet

TITLE_WEIGHT = 0.4
CODE_WEIGHT = 0.6
DUPLICATE_THRESHOLD = 0.70


def string_similarity(a: str | None, b: str | None) -> float:
    """Return ``1 - distance / max(len(a), len(b))`` clamped to [0.0, 1.0].

    Strings equal ignoring case score 1.0; an empty or missing string
    scores 0.0 against anything.
    """
    if not a or not b:
        return 0.0
    if a.lower() == b.lower():
        return 1.0
    distance = Levenshtein.distance(a, b)
    return max(0.0, 1.0 - distance / max(len(a), len(b)))


def snippet_similarity(
    first: Snippet,
    second: Snippet,
    title_weight: float = TITLE_WEIGHT,
    code_weight: float = CODE_WEIGHT,
) -> float:
    """Return the weighted title/code similarity of two snippets.

    A component is skipped when either side has a blank value for it. The
    remaining weights are not rescaled, so a pair compared on code alone
    can reach at most ``code_weight``.
    """
    score = 0.0
    if (first.title or "").strip() and (second.title or "").strip():
        score += string_similarity(first.title.lower(), second.title.lower()) * title_weight
    if (first.code or "").strip() and (second.code or "").strip():
        score += string_similarity(first.code.lower(), second.code.lower()) * code_weight
    return score


def snippet_find_duplicates(
    candidate: Snippet | None,
    snippets: Iterable[Snippet],
    threshold: float = DUPLICATE_THRESHOLD,
    title_weight: float = TITLE_WEIGHT,
    code_weight: float = CODE_WEIGHT,
) -> list[tuple[Snippet, float]]:
    """Return ``(snippet, score)`` pairs scoring at least *threshold* against *candidate*.

    Snippets sharing the candidate's id are skipped so an edited snippet
    never matches itself. Results are sorted by descending score; ties keep
    collection order.
    """
    if candidate is None:
        return []

    matches = []
    for existing in snippets:
        if existing.id == candidate.id:
            continue
        score = snippet_similarity(existing, candidate, title_weight, code_weight)
        if score >= threshold:
            matches.append((existing, score))

    matches.sort(key=lambda match: match[1], reverse=True)
    return matches
