"""The snippet store: the canonical, persisted snippet collection.

A store is opened explicitly::

    from copypasta import SnippetStore

    store = SnippetStore.open()          # or SnippetStore.open("lib.json")
    store.add(Snippet(title="hello", code="print('hi')"))
    store.filter(search_text="hello", selected_tags={"python"})

Every mutation rewrites the whole document. Mutations on one store are
serialized by an internal lock; two processes writing the same file still
race (last writer wins).

Reads never fail: a missing document is seeded with the sample snippets and
an unreadable one is replaced in memory by the samples. Writes raise
``PersistenceError`` but keep the in-memory change.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from . import query
from .errors import (
    DeserializationError,
    InvalidSnippetError,
    PersistenceError,
    SnippetImportError,
    StoreNotLoadedError,
)
from .models import Snippet, snippet_id_new, tags_normalize, utc_now
from .samples import sample_snippets_create
from .similarity import CODE_WEIGHT, DUPLICATE_THRESHOLD, TITLE_WEIGHT, snippet_find_duplicates
from .storage import data_path_get, document_load, document_save

logger = logging.getLogger(__name__)

IMPORT_MODES = ("merge", "replace")


class SnippetStore:
    """Owns the snippet collection and its backing JSON document."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path or data_path_get()
        self._snippets: list[Snippet] = []
        self._loaded = False
        self._lock = threading.RLock()

    @classmethod
    def open(cls, path: str | None = None) -> "SnippetStore":
        """Return a loaded store for *path* (default: the user's data file)."""
        store = cls(path)
        store.load()
        return store

    # --- Loading and persisting ---

    def load(self) -> None:
        """(Re)load the collection from disk.

        Seeds and persists the samples when no document exists. Falls back to
        the samples, without writing, when the document cannot be read.
        """
        with self._lock:
            try:
                snippets = document_load(self.path)
            except (PersistenceError, DeserializationError) as e:
                logger.warning("Could not load %s, using sample snippets instead: %s", self.path, e)
                self._snippets = sample_snippets_create()
                self._loaded = True
                return

            if snippets is None:
                logger.info("No snippet document at %s, creating sample snippets", self.path)
                self._snippets = sample_snippets_create()
                self._loaded = True
                try:
                    self._persist()
                except PersistenceError:
                    # Samples stay usable in memory.
                    pass
                return

            self._snippets = snippets
            self._loaded = True

    @property
    def loaded(self) -> bool:
        """True once ``load()`` has run."""
        return self._loaded

    def _require_loaded(self) -> None:
        if not self._loaded:
            raise StoreNotLoadedError("Snippet store is not loaded; call load() first.")

    def _persist(self) -> None:
        try:
            document_save(self.path, self._snippets)
        except PersistenceError as e:
            logger.error("%s", e)
            raise

    def _index_of(self, snippet_id: str) -> int | None:
        for index, snippet in enumerate(self._snippets):
            if snippet.id == snippet_id:
                return index
        return None

    # --- Reads ---

    def get_all(self) -> list[Snippet]:
        """Return copies of every snippet, in collection order."""
        with self._lock:
            self._require_loaded()
            return [s.model_copy(deep=True) for s in self._snippets]

    def get_by_id(self, snippet_id: str) -> Snippet | None:
        """Return a copy of the snippet with *snippet_id*, or ``None``."""
        with self._lock:
            self._require_loaded()
            index = self._index_of(snippet_id)
            if index is None:
                return None
            return self._snippets[index].model_copy(deep=True)

    def __len__(self) -> int:
        with self._lock:
            self._require_loaded()
            return len(self._snippets)

    def all_tags(self) -> list[str]:
        """Return every distinct non-empty tag, sorted ascending."""
        return query.snippets_tags(self.get_all())

    def search(self, term: str | None) -> list[Snippet]:
        """Return snippets whose title, code or a tag contains *term* (any case)."""
        return query.snippets_search(self.get_all(), term)

    def by_tags(self, tags: Iterable[str] | None) -> list[Snippet]:
        """Return snippets carrying *every* tag in *tags*."""
        return query.snippets_with_all_tags(self.get_all(), tags)

    def filter(
        self,
        search_text: str | None = None,
        selected_tags: Iterable[str] | None = None,
        favorites_only: bool = False,
    ) -> list[Snippet]:
        """Return the visible snippets for a search, an OR tag selection and a favorites flag."""
        return query.snippets_filter(self.get_all(), search_text, selected_tags, favorites_only)

    def find_duplicates(
        self,
        candidate: Snippet | None,
        threshold: float = DUPLICATE_THRESHOLD,
        title_weight: float = TITLE_WEIGHT,
        code_weight: float = CODE_WEIGHT,
    ) -> list[tuple[Snippet, float]]:
        """Return stored snippets that look like near-duplicates of *candidate*."""
        return snippet_find_duplicates(
            candidate, self.get_all(), threshold, title_weight, code_weight
        )

    def stats(self) -> dict:
        """Return collection statistics."""
        return query.snippets_stats(self.get_all())

    # --- Mutations ---

    def add(self, snippet: Snippet) -> Snippet:
        """Append *snippet* and persist the collection.

        ``updated_at`` is set to now. Returns a copy of the stored snippet.
        Raises ``InvalidSnippetError`` for a non-snippet or an id already in
        the collection, and ``PersistenceError`` if the write fails (the
        snippet stays in memory).
        """
        if not isinstance(snippet, Snippet):
            raise InvalidSnippetError(f"Expected a Snippet, got {type(snippet).__name__}.")

        with self._lock:
            self._require_loaded()
            if self._index_of(snippet.id) is not None:
                raise InvalidSnippetError(f"A snippet with id {snippet.id} already exists.")

            stored = snippet.model_copy(deep=True)
            stored.tags = tags_normalize(stored.tags)
            stored.updated_at = max(utc_now(), stored.created_at)
            self._snippets.append(stored)
            self._persist()
            return stored.model_copy(deep=True)

    def update(self, snippet: Snippet) -> Snippet | None:
        """Overwrite the stored snippet sharing *snippet*'s id and persist.

        Title, language, tags, code and favorite flag are copied over; id and
        ``created_at`` are kept and ``updated_at`` is set to now. Updating an
        id that is not in the collection is a no-op and returns ``None``.
        """
        if not isinstance(snippet, Snippet):
            raise InvalidSnippetError(f"Expected a Snippet, got {type(snippet).__name__}.")

        with self._lock:
            self._require_loaded()
            index = self._index_of(snippet.id)
            if index is None:
                logger.debug("Update ignored: snippet %s not found", snippet.id)
                return None

            existing = self._snippets[index]
            existing.title = snippet.title
            existing.language = snippet.language
            existing.tags = tags_normalize(snippet.tags)
            existing.code = snippet.code
            existing.is_favorite = snippet.is_favorite
            existing.updated_at = max(utc_now(), existing.created_at)
            self._persist()
            return existing.model_copy(deep=True)

    def delete(self, snippet_id: str) -> bool:
        """Remove the snippet with *snippet_id*; return False if there was none."""
        with self._lock:
            self._require_loaded()
            index = self._index_of(snippet_id)
            if index is None:
                logger.debug("Delete ignored: snippet %s not found", snippet_id)
                return False

            del self._snippets[index]
            logger.info("Snippet %s deleted.", snippet_id)
            self._persist()
            return True

    def reset(self) -> list[Snippet]:
        """Replace the collection with fresh sample snippets and persist it."""
        with self._lock:
            self._snippets = sample_snippets_create()
            self._loaded = True
            logger.info("Snippet store reset to %d sample snippets", len(self._snippets))
            self._persist()
            return self.get_all()

    # --- Import / export ---

    def export_to(self, path: str) -> int:
        """Write the whole collection to *path*; return the number of records."""
        snippets = self.get_all()
        document_save(path, snippets)
        logger.info("Exported %d snippets to %s", len(snippets), path)
        return len(snippets)

    def import_from(self, path: str, mode: str = "merge") -> int:
        """Import the snippets in the document at *path*.

        Every imported record gets a fresh id. ``"merge"`` appends them to the
        collection, ``"replace"`` discards the current collection first.
        Raises ``SnippetImportError`` (leaving the collection untouched) when
        the document is missing, malformed or empty, or when any record lacks
        a title or code.
        """
        if mode not in IMPORT_MODES:
            raise ValueError(f"Unknown import mode {mode!r}; expected one of {IMPORT_MODES}.")

        try:
            records = document_load(path)
        except (PersistenceError, DeserializationError) as e:
            raise SnippetImportError(str(e)) from e
        if records is None:
            raise SnippetImportError(f"Import file not found: {path}")
        if not records:
            raise SnippetImportError(f"No snippets found in {path}.")
        for index, record in enumerate(records):
            if not record.has_content():
                raise SnippetImportError(
                    f"Record {index} in {path} has no title or no code."
                )

        now = utc_now()
        imported = [
            record.model_copy(update={"id": snippet_id_new(), "updated_at": max(now, record.created_at)})
            for record in records
        ]

        with self._lock:
            self._require_loaded()
            if mode == "replace":
                self._snippets = imported
            else:
                self._snippets.extend(imported)
            logger.info("Imported %d snippets from %s (%s)", len(imported), path, mode)
            self._persist()
        return len(imported)
