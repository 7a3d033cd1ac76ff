"""Test utilities for the copypasta test suite."""

import os
import tempfile
from contextlib import contextmanager

from copypasta.models import Snippet
from copypasta.store import SnippetStore


@contextmanager
def temp_store(snippets=None):
    """Yield a loaded store backed by a file in a temporary directory.

    With *snippets* the document is pre-populated; otherwise the store is
    emptied so tests start from a known collection.
    """
    with tempfile.TemporaryDirectory() as temp_dir:
        path = os.path.join(temp_dir, "snippets.json")
        store = SnippetStore.open(path)
        for snippet in store.get_all():
            store.delete(snippet.id)
        for snippet in snippets or []:
            store.add(snippet)
        yield store


def make_snippet(title="Untitled", code="pass", tags=None, **kwargs):
    """Build a snippet with sensible defaults for tests."""
    return Snippet(title=title, code=code, tags=tags or [], **kwargs)
