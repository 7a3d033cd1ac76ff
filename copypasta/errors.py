"""Exceptions raised by the copypasta snippet store."""


class CopyPastaError(Exception):
    """Base class for all copypasta errors."""


class PersistenceError(CopyPastaError):
    """The snippet document could not be read from or written to disk."""


class DeserializationError(CopyPastaError):
    """The snippet document exists but is not a valid array of records."""


class InvalidSnippetError(CopyPastaError, ValueError):
    """A store operation received something that is not a usable snippet."""


class SnippetImportError(CopyPastaError):
    """An import document was missing, malformed, or held no records."""


class StoreNotLoadedError(CopyPastaError):
    """A store operation was called before ``load()``."""
