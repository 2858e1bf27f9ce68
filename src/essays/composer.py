"""Compose a Document into a rendered HTML page."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from essays.config import SiteConfig
from essays.content.base import Document, FootNote, FootNoteList, FootNoteRef
from essays.exceptions import DanglingFootnoteError, DuplicateFootnoteError, MultipleFootnoteListsError
from essays.renderer.html_renderer import HTMLRenderer, RenderContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PageShell:
    """Navigation affordance and ``<title>`` text wrapped around one document."""

    title: str
    back: str
    closer: bool = False


@dataclass(frozen=True, slots=True)
class RenderedPage:
    document_id: str
    title: str
    html: str


@dataclass(frozen=True, slots=True)
class FootnoteIndex:
    notes: tuple[FootNote, ...]
    referenced: frozenset[str]


def index_footnotes(document: Document) -> FootnoteIndex:
    """Collect footnotes and check every reference against them.

    Runs before any rendering so that integrity errors abort the page as a whole.

    Raises:
        MultipleFootnoteListsError: If the document declares more than one list.
        DuplicateFootnoteError: If two notes share an id.
        DanglingFootnoteError: If a reference has no matching note.
    """
    nodes = list(document.walk())

    lists = [node for node in nodes if isinstance(node, FootNoteList)]
    if len(lists) > 1:
        raise MultipleFootnoteListsError(
            f"Document {document.id!r} declares {len(lists)} footnote lists; at most one is allowed"
        )

    notes = lists[0].notes if lists else ()
    note_ids: set[str] = set()
    for note in notes:
        if note.id in note_ids:
            raise DuplicateFootnoteError(f"Duplicate footnote id {note.id!r} in document {document.id!r}")
        note_ids.add(note.id)

    referenced: list[str] = []
    for node in nodes:
        if not isinstance(node, FootNoteRef):
            continue
        if node.id not in note_ids:
            raise DanglingFootnoteError(f"Footnote reference {node.id!r} in document {document.id!r} has no matching note")
        referenced.append(node.id)

    unused = [note.id for note in notes if note.id not in referenced]
    if unused:
        logger.warning("Document %s has unreferenced footnotes: %s", document.id, ", ".join(unused))

    return FootnoteIndex(notes=notes, referenced=frozenset(referenced))


class DocumentComposer:
    """Render documents into complete pages using explicit site configuration."""

    def __init__(self, config: SiteConfig | None = None, renderer: HTMLRenderer | None = None) -> None:
        self.config = config or SiteConfig()
        self.renderer = renderer or HTMLRenderer()

    def shell_for(self, document: Document, *, closer: bool = False) -> PageShell:
        return PageShell(
            title=self.config.page_title(document.title),
            back=document.back or self.config.back_target,
            closer=closer,
        )

    def compose(self, document: Document, *, closer: bool = False) -> RenderedPage:
        footnotes = index_footnotes(document)
        shell = self.shell_for(document, closer=closer)

        context = RenderContext.for_notes(footnotes.notes, footnotes.referenced)
        if shell.back.startswith("/") and not shell.back.startswith("//"):
            context.add_prefetch(shell.back)

        body = self.renderer.render_blocks(document.blocks, context)
        page = self.renderer.render_page(shell, body, context, lang=self.config.lang)

        logger.debug("Composed document %s (%d blocks, %d footnotes)", document.id, len(document.blocks), len(footnotes.notes))
        return RenderedPage(document_id=document.id, title=shell.title, html=page)

    def render(self, document: Document, *, closer: bool = False) -> str:
        return self.compose(document, closer=closer).html
