"""Render essay content blocks into a self-contained HTML page."""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, FileSystemLoader

from essays.content.base import (
    CodeBlock,
    Emphasis,
    FootNote,
    FootNoteList,
    FootNoteRef,
    Heading,
    Image,
    InlineCode,
    LineBreak,
    Link,
    Paragraph,
    Quote,
    Rule,
    Strong,
)

if TYPE_CHECKING:
    from essays.composer import PageShell


@dataclass(slots=True)
class RenderContext:
    """Per-render state: footnote numbering, used anchors and prefetch targets.

    A new context is created for every page so renders never share state.
    """

    footnote_numbers: dict[str, int] = field(default_factory=dict)
    ref_counts: dict[str, int] = field(default_factory=dict)
    referenced: frozenset[str] = frozenset()
    used_anchors: set[str] = field(default_factory=set)
    prefetch: list[str] = field(default_factory=list)

    @classmethod
    def for_notes(cls, notes: tuple[FootNote, ...], referenced: frozenset[str] = frozenset()) -> RenderContext:
        # Footnote anchors are reserved before any heading is slugged.
        reserved = {f"fn-{note.id}" for note in notes} | {f"fnref-{note.id}" for note in notes}
        return cls(
            footnote_numbers={note.id: idx for idx, note in enumerate(notes, start=1)},
            referenced=referenced,
            used_anchors=reserved,
        )

    def add_prefetch(self, href: str) -> None:
        if href not in self.prefetch:
            self.prefetch.append(href)


class HTMLRenderer:
    """Render content blocks and wrap them in the essay page template."""

    def __init__(self, template_path: Path | None = None) -> None:
        if template_path is None:
            template_path = Path(__file__).resolve().parent / "template" / "essay.html"

        loader = FileSystemLoader(str(template_path.parent))
        self._env = Environment(loader=loader, autoescape=True, trim_blocks=True, lstrip_blocks=True)
        self._template_name = template_path.name

    def render_page(self, shell: PageShell, body_html: str, context: RenderContext, *, lang: str = "en") -> str:
        template = self._env.get_template(self._template_name)
        return template.render(
            lang=lang,
            page_title=shell.title,
            back_target=shell.back,
            back_closer=shell.closer,
            prefetch=context.prefetch,
            body=body_html,
        )

    def render_blocks(self, blocks, context: RenderContext) -> str:
        return "\n".join(self.render_block(block, context) for block in blocks)

    def render_block(self, block, context: RenderContext) -> str:
        if isinstance(block, Paragraph):
            return f"<p>{self.render_inline(block.children, context)}</p>"

        if isinstance(block, Heading):
            text = _plain_text(block.children)
            anchor = _dedupe_anchor(_slugify(text), context.used_anchors)
            tag = f"h{block.level}"
            return f'<{tag} id="{anchor}">{self.render_inline(block.children, context)}</{tag}>'

        if isinstance(block, InlineCode):
            return self._render_inline_code(block)

        if isinstance(block, CodeBlock):
            return self._render_code_block(block)

        if isinstance(block, Quote):
            return f"<blockquote>{self.render_inline(block.children, context)}</blockquote>"

        if isinstance(block, Image):
            return self._render_image(block)

        if isinstance(block, Rule):
            return "<hr />"

        if isinstance(block, Link):
            return self._render_link(block, context)

        if isinstance(block, FootNoteRef):
            return self._render_footnote_ref(block, context)

        if isinstance(block, FootNoteList):
            return self._render_footnote_list(block, context)

        raise TypeError(f"Unsupported block type: {type(block).__name__}")

    def render_inline(self, children, context: RenderContext) -> str:
        parts: list[str] = []
        for child in children:
            if isinstance(child, str):
                parts.append(html.escape(child, quote=False))
            elif isinstance(child, Strong):
                parts.append(f"<b>{self.render_inline(child.children, context)}</b>")
            elif isinstance(child, Emphasis):
                parts.append(f"<em>{self.render_inline(child.children, context)}</em>")
            elif isinstance(child, InlineCode):
                parts.append(self._render_inline_code(child))
            elif isinstance(child, Link):
                parts.append(self._render_link(child, context))
            elif isinstance(child, FootNoteRef):
                parts.append(self._render_footnote_ref(child, context))
            elif isinstance(child, LineBreak):
                parts.append("<br />")
            else:
                raise TypeError(f"Unsupported inline content: {type(child).__name__}")
        return "".join(parts)

    def _render_inline_code(self, block: InlineCode) -> str:
        return f"<code>{html.escape(block.text, quote=False)}</code>"

    def _render_code_block(self, block: CodeBlock) -> str:
        lang_attr = f' class="language-{html.escape(block.language)}"' if block.language else ""
        return f"<pre><code{lang_attr}>{html.escape(block.text, quote=False)}</code></pre>"

    def _render_image(self, block: Image) -> str:
        width_attr = f' width="{block.width}"' if block.width else ""
        image_html = f'<img src="{html.escape(block.path)}" alt="{html.escape(block.alt)}"{width_attr} />'
        if block.is_window:
            return (
                '<figure class="image window">'
                '<span class="window-bar"><i></i><i></i><i></i></span>'
                f"{image_html}</figure>"
            )
        return f'<figure class="image">{image_html}</figure>'

    def _render_link(self, block: Link, context: RenderContext) -> str:
        if block.is_internal:
            context.add_prefetch(block.href)
        label = self.render_inline(block.children, context)
        return f'<a href="{html.escape(block.href)}">{label}</a>'

    def _render_footnote_ref(self, block: FootNoteRef, context: RenderContext) -> str:
        # Resolution is validated before rendering starts; a miss here is a bug.
        number = context.footnote_numbers[block.id]
        note_id = html.escape(block.id)
        count = context.ref_counts.get(block.id, 0) + 1
        context.ref_counts[block.id] = count
        anchor = f"fnref-{note_id}" if count == 1 else f"fnref-{note_id}-{count}"
        return (
            f'<sup class="footnote-ref" id="{anchor}">'
            f'<a href="#fn-{note_id}" data-footnote-id="{note_id}">{number}</a></sup>'
        )

    def _render_footnote_list(self, block: FootNoteList, context: RenderContext) -> str:
        items: list[str] = []
        for note in block.notes:
            note_id = html.escape(note.id)
            body = self.render_inline(note.children, context)
            back_link = f' <a class="footnote-back" href="#fnref-{note_id}">↩</a>' if note.id in context.referenced else ""
            items.append(f'<li id="fn-{note_id}">{body}{back_link}</li>')
        return '<ol class="footnotes">' + "".join(items) + "</ol>"


def _plain_text(children) -> str:
    parts: list[str] = []
    for child in children:
        if isinstance(child, str):
            parts.append(child)
        elif isinstance(child, InlineCode):
            parts.append(child.text)
        else:
            parts.append(_plain_text(getattr(child, "children", ())))
    return "".join(parts)


def _slugify(text: str) -> str:
    cleaned = re.sub(r"[^a-zA-Z0-9\s-]", "", text or "")
    cleaned = re.sub(r"[\s-]+", "-", cleaned.strip())
    return cleaned.lower().strip("-") or "section"


def _dedupe_anchor(anchor: str, used: set[str]) -> str:
    if anchor not in used:
        used.add(anchor)
        return anchor

    idx = 2
    while True:
        candidate = f"{anchor}-{idx}"
        if candidate not in used:
            used.add(candidate)
            return candidate
        idx += 1
