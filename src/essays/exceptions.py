"""Custom exceptions for essays."""


class EssaysError(Exception):
    """Base exception for essays operations."""


class AuthoringError(EssaysError):
    """Document content violates an integrity rule."""


class MalformedBlockError(AuthoringError):
    """A block was constructed with a missing or invalid payload field."""


class DanglingFootnoteError(AuthoringError):
    """A footnote reference has no matching note."""


class DuplicateFootnoteError(AuthoringError):
    """Two notes in one document share an identifier."""


class MultipleFootnoteListsError(AuthoringError):
    """A document declares more than one footnote list."""


class DocumentNotFoundError(EssaysError):
    """No document exists for the requested identifier."""
