"""Core content model for essays: typed blocks, inline spans and documents."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from essays.exceptions import AuthoringError, DuplicateFootnoteError, MalformedBlockError


def _as_children(value: object) -> tuple:
    if isinstance(value, str):
        return (value,) if value else ()
    children = tuple(value) if isinstance(value, (list, tuple)) else (value,)
    for child in children:
        if not isinstance(child, INLINE_TYPES):
            raise MalformedBlockError(f"Unsupported inline content: {type(child).__name__}")
    return children


def _require_text(owner: str, field_name: str, value: object) -> None:
    if not isinstance(value, str) or not value.strip():
        raise MalformedBlockError(f"{owner} requires a non-empty {field_name}")


# ---------------------------------------------------------------------------
# Inline-only spans
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Strong:
    children: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _as_children(self.children))


@dataclass(frozen=True, slots=True)
class Emphasis:
    children: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _as_children(self.children))


@dataclass(frozen=True, slots=True)
class LineBreak:
    pass


# ---------------------------------------------------------------------------
# Blocks
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Paragraph:
    children: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _as_children(self.children))


@dataclass(frozen=True, slots=True)
class Heading:
    level: int
    children: tuple = ()

    def __post_init__(self) -> None:
        if not isinstance(self.level, int) or not 1 <= self.level <= 6:
            raise MalformedBlockError(f"Heading level must be between 1 and 6, got {self.level!r}")
        object.__setattr__(self, "children", _as_children(self.children))


@dataclass(frozen=True, slots=True)
class InlineCode:
    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise MalformedBlockError("InlineCode text must be a string")


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """Preformatted code. ``text`` is kept exactly as authored."""

    text: str
    language: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise MalformedBlockError("CodeBlock text must be a string")


@dataclass(frozen=True, slots=True)
class Quote:
    children: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", _as_children(self.children))


@dataclass(frozen=True, slots=True)
class Image:
    """An image asset. ``is_window`` only adds a decorative frame."""

    path: str
    width: int | None = None
    is_window: bool = False
    alt: str = ""

    def __post_init__(self) -> None:
        _require_text("Image", "path", self.path)
        width = self.width
        if width is not None:
            if isinstance(width, str) and width.strip().isdigit():
                width = int(width)
            if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
                raise MalformedBlockError(f"Image width must be a positive integer, got {self.width!r}")
            object.__setattr__(self, "width", width)


@dataclass(frozen=True, slots=True)
class Rule:
    pass


@dataclass(frozen=True, slots=True)
class Link:
    href: str
    children: tuple = ()

    def __post_init__(self) -> None:
        _require_text("Link", "href", self.href)
        children = _as_children(self.children)
        object.__setattr__(self, "children", children or (self.href,))

    @property
    def is_internal(self) -> bool:
        return self.href.startswith("/") and not self.href.startswith("//")


@dataclass(frozen=True, slots=True)
class FootNoteRef:
    id: str

    def __post_init__(self) -> None:
        _require_text("FootNoteRef", "id", self.id)


@dataclass(frozen=True, slots=True)
class FootNote:
    id: str
    children: tuple = ()

    def __post_init__(self) -> None:
        _require_text("FootNote", "id", self.id)
        object.__setattr__(self, "children", _as_children(self.children))


@dataclass(frozen=True, slots=True)
class FootNoteList:
    notes: tuple[FootNote, ...] = ()

    def __post_init__(self) -> None:
        notes = tuple(self.notes)
        seen: set[str] = set()
        for note in notes:
            if not isinstance(note, FootNote):
                raise MalformedBlockError(f"FootNoteList accepts FootNote entries only, got {type(note).__name__}")
            if note.id in seen:
                raise DuplicateFootnoteError(f"Duplicate footnote id: {note.id!r}")
            seen.add(note.id)
        object.__setattr__(self, "notes", notes)


Block = Paragraph | Heading | InlineCode | CodeBlock | Quote | Image | Rule | Link | FootNoteRef | FootNoteList
Inline = str | Strong | Emphasis | InlineCode | Link | FootNoteRef | LineBreak

INLINE_TYPES: tuple[type, ...] = (str, Strong, Emphasis, InlineCode, Link, FootNoteRef, LineBreak)

BLOCK_TYPES: tuple[type, ...] = (
    Paragraph,
    Heading,
    InlineCode,
    CodeBlock,
    Quote,
    Image,
    Rule,
    Link,
    FootNoteRef,
    FootNoteList,
)


@dataclass(frozen=True, slots=True)
class Document:
    """One essay: an ordered sequence of blocks plus its metadata."""

    id: str
    blocks: tuple[Block, ...] = ()
    title: str | None = None
    back: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise AuthoringError("Document requires a non-empty id")
        blocks = tuple(self.blocks)
        for block in blocks:
            if not isinstance(block, BLOCK_TYPES):
                raise MalformedBlockError(f"Unsupported block type in document {self.id!r}: {type(block).__name__}")
        object.__setattr__(self, "blocks", blocks)

    def walk(self) -> Iterator[object]:
        """Yield every block and inline node depth-first, in source order."""
        for block in self.blocks:
            yield from walk(block)


def walk(node: object) -> Iterator[object]:
    yield node
    if isinstance(node, FootNoteList):
        for note in node.notes:
            yield from walk(note)
        return
    for child in getattr(node, "children", ()):
        yield from walk(child)
