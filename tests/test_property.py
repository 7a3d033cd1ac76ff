"""Property-based tests for the similarity engine using hypothesis."""

import unittest

from hypothesis import given, settings
from hypothesis import strategies as st

from copypasta.models import Snippet
from copypasta.similarity import snippet_find_duplicates, snippet_similarity, string_similarity

code_text = st.text(
    alphabet=st.sampled_from(list("abcdefghijklmnopqrstuvwxyzABCXYZ0123456789 ()[]{};:=\n\t")),
    min_size=0,
    max_size=200,
)


class TestPropertyStringSimilarity(unittest.TestCase):
    """Property-based tests for string_similarity()."""

    @given(a=code_text, b=code_text)
    @settings(max_examples=200, deadline=2000)
    def test_in_unit_interval(self, a: str, b: str) -> None:
        score = string_similarity(a, b)
        self.assertGreaterEqual(score, 0.0)
        self.assertLessEqual(score, 1.0)

    @given(a=code_text, b=code_text)
    @settings(max_examples=200, deadline=2000)
    def test_symmetric(self, a: str, b: str) -> None:
        self.assertAlmostEqual(string_similarity(a, b), string_similarity(b, a))

    @given(a=code_text.filter(bool))
    @settings(max_examples=100, deadline=2000)
    def test_identical_is_one(self, a: str) -> None:
        self.assertEqual(string_similarity(a, a), 1.0)
        self.assertEqual(string_similarity(a, a.upper()), 1.0)

    @given(a=code_text)
    @settings(max_examples=100, deadline=2000)
    def test_empty_is_zero(self, a: str) -> None:
        self.assertEqual(string_similarity(a, ""), 0.0)


class TestPropertyDuplicates(unittest.TestCase):
    """Property-based tests for the duplicate detector."""

    @given(title_a=code_text, code_a=code_text, title_b=code_text, code_b=code_text)
    @settings(max_examples=100, deadline=2000)
    def test_weighted_score_bounded(self, title_a, code_a, title_b, code_b) -> None:
        a = Snippet(title=title_a, code=code_a)
        b = Snippet(title=title_b, code=code_b)
        score = snippet_similarity(a, b)
        self.assertGreaterEqual(score, 0.0)
        self.assertLessEqual(score, 1.0 + 1e-9)

    @given(title=code_text, code=code_text)
    @settings(max_examples=100, deadline=2000)
    def test_never_matches_itself(self, title, code) -> None:
        snippet = Snippet(title=title, code=code)
        self.assertEqual(snippet_find_duplicates(snippet, [snippet]), [])


if __name__ == "__main__":
    unittest.main()
