"""Reading and writing the snippet document on disk.

The whole collection lives in one JSON document: an array of snippet
records. Every write replaces the file atomically, so a crash mid-write
leaves the previous document intact.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable

from pydantic import ValidationError

from .config import config_dir_get
from .errors import DeserializationError, PersistenceError
from .models import Snippet

logger = logging.getLogger(__name__)

DATA_FILE_NAME = "snippets.json"


def data_path_get() -> str:
    """Return the snippet document path.

    ``COPYPASTA_DATA_FILE`` overrides the default location inside the
    config directory (useful for tests and for keeping several libraries).
    """
    override = os.environ.get("COPYPASTA_DATA_FILE")
    if override:
        return os.path.expanduser(override)
    return os.path.join(config_dir_get(), DATA_FILE_NAME)


def document_dumps(snippets: Iterable[Snippet]) -> str:
    """Serialize *snippets* to the document text."""
    return json.dumps([s.to_record() for s in snippets], indent=2)


def document_loads(text: str) -> list[Snippet]:
    """Parse document text into snippets.

    Raises ``DeserializationError`` for anything but a JSON array of valid
    snippet records.
    """
    try:
        records = json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise DeserializationError(f"Snippet document is not valid JSON: {e}") from e

    if not isinstance(records, list):
        raise DeserializationError(
            f"Snippet document must be an array, not {type(records).__name__}."
        )

    snippets = []
    for index, record in enumerate(records):
        try:
            snippets.append(Snippet.from_record(record))
        except (TypeError, ValidationError) as e:
            raise DeserializationError(f"Invalid snippet record at index {index}: {e}") from e
    return snippets


def document_load(path: str) -> list[Snippet] | None:
    """Read the document at *path*, or return ``None`` if it does not exist."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise PersistenceError(f"Could not read snippet document {path}: {e}") from e

    snippets = document_loads(text)
    logger.debug("Loaded %d snippets from %s", len(snippets), path)
    return snippets


def document_save(path: str, snippets: Iterable[Snippet]) -> None:
    """Write *snippets* to *path* atomically, creating the directory if needed."""
    text = document_dumps(snippets)
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=directory, suffix=".tmp", delete=False
        ) as tmp:
            tmp_path = tmp.name
            tmp.write(text)
        os.replace(tmp_path, path)
    except (OSError, ValueError) as e:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise PersistenceError(f"Could not write snippet document {path}: {e}") from e
    logger.debug("Saved snippet document %s", path)
