"""Benchmark suite for copypasta core operations using pytest-benchmark."""

import random

import pytest

from copypasta.models import Snippet
from copypasta.query import snippets_filter
from copypasta.samples import sample_snippets_create
from copypasta.similarity import snippet_find_duplicates, string_similarity

_RNG = random.Random(1234)
_WORDS = ["for", "item", "in", "items", "print", "return", "if", "else", "def", "class", "import"]


def _random_code(lines: int) -> str:
    return "\n".join(
        " ".join(_RNG.choice(_WORDS) for _ in range(8)) for _ in range(lines)
    )


def _library(size: int) -> list[Snippet]:
    return [
        Snippet(
            title=f"Snippet {i}",
            code=_random_code(10),
            tags=_RNG.sample(["python", "bash", "css", "sql", "java"], 2),
            is_favorite=i % 7 == 0,
        )
        for i in range(size)
    ]


_SAMPLE_CODE = sample_snippets_create()[0].code


def test_bench_string_similarity(benchmark):
    """Benchmark one edit-distance comparison of a sample snippet."""
    other = _SAMPLE_CODE.replace("count", "total")
    result = benchmark(string_similarity, _SAMPLE_CODE, other)
    assert 0.0 < result < 1.0


@pytest.mark.parametrize("size", [50, 200])
def test_bench_find_duplicates(benchmark, size):
    """Benchmark duplicate detection against a whole library."""
    library = _library(size)
    candidate = library[0].model_copy(update={"id": "candidate"})
    matches = benchmark(snippet_find_duplicates, candidate, library)
    assert matches[0][0].id == library[0].id


def test_bench_filter(benchmark):
    """Benchmark the combined search/tag/favorite filter."""
    library = _library(1000)
    result = benchmark(snippets_filter, library, "print", {"python", "sql"}, True)
    assert all(s.is_favorite for s in result)
