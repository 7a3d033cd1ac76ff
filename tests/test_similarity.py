"""Tests for edit-distance similarity and duplicate detection."""

import unittest

from copypasta.models import Snippet
from copypasta.similarity import (
    CODE_WEIGHT,
    TITLE_WEIGHT,
    snippet_find_duplicates,
    snippet_similarity,
    string_similarity,
)
from tests.utils import make_snippet


# ---------------------------------------------------------------------------
# String similarity
# ---------------------------------------------------------------------------


class TestStringSimilarity(unittest.TestCase):
    """Tests for string_similarity()."""

    def test_identical_strings(self):
        self.assertEqual(string_similarity("hello", "hello"), 1.0)

    def test_identical_ignoring_case(self):
        """Strings equal ignoring case short-circuit to 1.0."""
        self.assertEqual(string_similarity("Hello", "hELLO"), 1.0)

    def test_empty_side_scores_zero(self):
        self.assertEqual(string_similarity("hello", ""), 0.0)
        self.assertEqual(string_similarity("", "hello"), 0.0)
        self.assertEqual(string_similarity("", ""), 0.0)

    def test_none_scores_zero(self):
        self.assertEqual(string_similarity(None, "hello"), 0.0)

    def test_single_substitution(self):
        """'abc' vs 'abd' is one edit over length 3."""
        self.assertAlmostEqual(string_similarity("abc", "abd"), 1 - 1 / 3)

    def test_normalized_by_longer_string(self):
        """Two insertions over a length-6 string."""
        self.assertAlmostEqual(string_similarity("abcd", "abcdef"), 1 - 2 / 6)

    def test_completely_different(self):
        self.assertEqual(string_similarity("abc", "xyz"), 0.0)

    def test_comparison_is_case_sensitive_otherwise(self):
        """Only the exact case-insensitive match short-circuits."""
        self.assertAlmostEqual(string_similarity("abcX", "ABCY"), 0.0)


# ---------------------------------------------------------------------------
# Weighted snippet similarity
# ---------------------------------------------------------------------------


class TestSnippetSimilarity(unittest.TestCase):
    """Tests for snippet_similarity()."""

    def test_identical_snippets_score_one(self):
        a = make_snippet("Flexbox", "display: flex;")
        b = make_snippet("Flexbox", "display: flex;")
        self.assertAlmostEqual(snippet_similarity(a, b), 1.0)

    def test_weights(self):
        """Title counts 40% and code 60%."""
        a = make_snippet("same", "abc")
        b = make_snippet("same", "xyz")
        self.assertAlmostEqual(snippet_similarity(a, b), TITLE_WEIGHT)
        c = make_snippet("aaaa", "code")
        d = make_snippet("zzzz", "code")
        self.assertAlmostEqual(snippet_similarity(c, d), CODE_WEIGHT)

    def test_compares_lowercased(self):
        a = make_snippet("Hello World", "PRINT(1)")
        b = make_snippet("hello world", "print(1)")
        self.assertAlmostEqual(snippet_similarity(a, b), 1.0)

    def test_blank_title_is_not_renormalized(self):
        """With one title blank only the code component counts, capped at 0.6."""
        a = Snippet(title="", code="print('x')")
        b = Snippet(title="Printer", code="print('x')")
        self.assertAlmostEqual(snippet_similarity(a, b), CODE_WEIGHT)

    def test_blank_code_is_not_renormalized(self):
        a = Snippet(title="Same", code="   ")
        b = Snippet(title="Same", code="x = 1")
        self.assertAlmostEqual(snippet_similarity(a, b), TITLE_WEIGHT)

    def test_both_blank_scores_zero(self):
        self.assertEqual(snippet_similarity(Snippet(), Snippet()), 0.0)


# ---------------------------------------------------------------------------
# Duplicate detection
# ---------------------------------------------------------------------------


class TestFindDuplicates(unittest.TestCase):
    """Tests for snippet_find_duplicates()."""

    CODE = "for item in items:\n    print(item.name)\n" * 2

    def _near_copy(self):
        # Change 5% of the characters.
        chars = list(self.CODE)
        step = 20
        for i in range(0, len(chars), step):
            chars[i] = "#"
        return "".join(chars)

    def test_near_copies_find_each_other(self):
        a = make_snippet("Print names", self.CODE)
        b = make_snippet("Print names", self._near_copy())
        self.assertGreaterEqual(snippet_similarity(a, b), 0.70)

        self.assertEqual([s.id for s, _ in snippet_find_duplicates(a, [a, b])], [b.id])
        self.assertEqual([s.id for s, _ in snippet_find_duplicates(b, [a, b])], [a.id])

    def test_excludes_same_id(self):
        """Editing a snippet never flags the stored version of itself."""
        stored = make_snippet("Print names", self.CODE)
        edited = stored.model_copy(update={"code": self.CODE + "\n"})
        self.assertEqual(snippet_find_duplicates(edited, [stored]), [])

    def test_threshold_is_inclusive(self):
        a = make_snippet("abcd", "same code")
        b = make_snippet("abzz", "same code")
        # 0.4 * 0.5 + 0.6 * 1.0 = 0.8
        score = snippet_similarity(a, b)
        self.assertEqual(len(snippet_find_duplicates(a, [b], threshold=score)), 1)
        self.assertEqual(snippet_find_duplicates(a, [b], threshold=score + 0.01), [])

    def test_single_signal_never_reaches_default_threshold(self):
        """Identical code without a comparable title tops out at 0.6."""
        a = Snippet(title="", code="SELECT * FROM users;")
        b = Snippet(title="Users query", code="SELECT * FROM users;")
        self.assertEqual(snippet_find_duplicates(a, [b]), [])

    def test_sorted_by_descending_score(self):
        candidate = make_snippet("List files", "ls -la /tmp")
        weak = make_snippet("List filez", "ls -la /var")
        strong = make_snippet("List files", "ls -la /tmp ")
        matches = snippet_find_duplicates(candidate, [weak, strong])
        self.assertEqual([s.id for s, _ in matches], [strong.id, weak.id])
        self.assertGreaterEqual(matches[0][1], matches[1][1])

    def test_none_candidate(self):
        self.assertEqual(snippet_find_duplicates(None, [make_snippet()]), [])

    def test_no_match(self):
        a = make_snippet("CSS center", ".x { margin: auto; }")
        b = make_snippet("Bash loop", "for f in *; do echo $f; done")
        self.assertEqual(snippet_find_duplicates(a, [b]), [])


if __name__ == "__main__":
    unittest.main()
