"""Content model package."""

from .base import (
    Block,
    CodeBlock,
    Document,
    Emphasis,
    FootNote,
    FootNoteList,
    FootNoteRef,
    Heading,
    Image,
    Inline,
    InlineCode,
    LineBreak,
    Link,
    Paragraph,
    Quote,
    Rule,
    Strong,
)
from .catalog import DocumentCatalog
from .md_parser import MarkdownParser

__all__ = [
    "Block",
    "CodeBlock",
    "Document",
    "DocumentCatalog",
    "Emphasis",
    "FootNote",
    "FootNoteList",
    "FootNoteRef",
    "Heading",
    "Image",
    "Inline",
    "InlineCode",
    "LineBreak",
    "Link",
    "MarkdownParser",
    "Paragraph",
    "Quote",
    "Rule",
    "Strong",
]
