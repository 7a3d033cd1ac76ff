"""Top-level package for the copypasta code-snippet manager.

copypasta can be used both as a CLI tool (``copypasta``) and as a Python library::

    from copypasta import SnippetStore, Snippet, snippet_find_duplicates
"""

from .errors import (
    CopyPastaError,
    DeserializationError,
    InvalidSnippetError,
    PersistenceError,
    SnippetImportError,
    StoreNotLoadedError,
)
from .models import Snippet, tags_parse
from .query import (
    snippets_filter,
    snippets_search,
    snippets_stats,
    snippets_tags,
    snippets_with_all_tags,
    snippets_with_any_tag,
)
from .similarity import snippet_find_duplicates, snippet_similarity, string_similarity
from .store import SnippetStore

__all__ = [
    "CopyPastaError",
    "DeserializationError",
    "InvalidSnippetError",
    "PersistenceError",
    "SnippetImportError",
    "StoreNotLoadedError",
    "Snippet",
    "SnippetStore",
    "snippet_find_duplicates",
    "snippet_similarity",
    "snippets_filter",
    "snippets_search",
    "snippets_stats",
    "snippets_tags",
    "snippets_with_all_tags",
    "snippets_with_any_tag",
    "string_similarity",
    "tags_parse",
]
