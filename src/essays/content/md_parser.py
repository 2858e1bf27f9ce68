"""Markdown parser that turns an essay source file into a Document."""

from __future__ import annotations

import re
from pathlib import Path

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
    InlineCode,
    LineBreak,
    Link,
    Paragraph,
    Quote,
    Rule,
    Strong,
)


class MarkdownParser:
    """Parse a Markdown essay into the Document content model."""

    def parse(self, input_path: Path, *, document_id: str | None = None) -> Document:
        input_path = Path(input_path)
        raw = input_path.read_text(encoding="utf-8")
        default_id = input_path.parent.name if input_path.stem == "index" else input_path.stem
        return self.parse_text(raw, document_id=document_id or default_id)

    def parse_text(self, raw: str, *, document_id: str) -> Document:
        frontmatter, body = _split_frontmatter(raw.replace("\r\n", "\n"))
        meta = _parse_frontmatter(frontmatter)

        title = meta.get("title") or None

        # Without a frontmatter title, a leading ``# Title`` heading provides it.
        if title is None:
            heading_title, body = _extract_title_heading(body)
            title = heading_title or None

        footnote_defs = _extract_footnote_definitions(body)
        body = _remove_footnote_definitions(body)

        blocks = _parse_blocks(body)
        if footnote_defs:
            notes = [FootNote(id=label, children=parse_inline(content)) for label, content in footnote_defs]
            blocks.append(FootNoteList(notes=tuple(notes)))

        return Document(
            id=meta.get("id") or document_id,
            blocks=tuple(blocks),
            title=title,
            back=meta.get("back") or None,
        )


# ---------------------------------------------------------------------------
# YAML frontmatter
# ---------------------------------------------------------------------------

def _split_frontmatter(text: str) -> tuple[str, str]:
    """Split leading YAML frontmatter from body text."""
    if not text.startswith("---\n"):
        return "", text
    end = text.find("\n---", 3)
    if end == -1:
        return "", text
    closing_end = text.find("\n", end + 1)
    frontmatter = text[4:end].strip()
    body = text[closing_end + 1:] if closing_end != -1 else ""
    return frontmatter, body


def _parse_frontmatter(raw: str) -> dict[str, str]:
    """Minimal ``key: value`` frontmatter parser."""
    if not raw:
        return {}

    result: dict[str, str] = {}
    for line in raw.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        m = re.match(r"^([a-zA-Z_]\w*)\s*:\s*(.*)", line)
        if not m:
            continue

        key = m.group(1).lower()
        value = m.group(2).strip()

        # Strip surrounding quotes.
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]

        if key in ("title", "id", "back"):
            result[key] = value

    return result


# ---------------------------------------------------------------------------
# Title extraction from body
# ---------------------------------------------------------------------------

def _extract_title_heading(body: str) -> tuple[str, str]:
    """Extract a top-level ``# Title`` heading and return (title, remaining_body)."""
    m = re.match(r"^\s*#[ \t]+(.+?)[ \t]*$", body, re.MULTILINE)
    if m and not body[:m.start()].strip():
        title = m.group(1).strip()
        return title, body[m.end():]
    return "", body


# ---------------------------------------------------------------------------
# Footnote definitions
# ---------------------------------------------------------------------------

_FOOTNOTE_DEF_RE = re.compile(r"^\[\^([^\]]+)\]:\s*(.+)$", re.MULTILINE)


def _extract_footnote_definitions(text: str) -> list[tuple[str, str]]:
    """Extract ``[^label]: content`` definitions."""
    return [(m.group(1), m.group(2).strip()) for m in _FOOTNOTE_DEF_RE.finditer(_mask_fences(text))]


def _remove_footnote_definitions(text: str) -> str:
    masked = _mask_fences(text)
    spans = [m.span() for m in _FOOTNOTE_DEF_RE.finditer(masked)]
    for start, end in reversed(spans):
        text = text[:start] + text[end:]
    return text


def _mask_fences(text: str) -> str:
    """Blank out fenced code so definitions inside code samples are ignored."""
    def _blank(m: re.Match[str]) -> str:
        return re.sub(r"[^\n]", " ", m.group(0))

    return re.sub(r"^(`{3,}|~{3,}).*?^\1[ \t]*$", _blank, text, flags=re.MULTILINE | re.DOTALL)


# ---------------------------------------------------------------------------
# Block parsing
# ---------------------------------------------------------------------------

_FENCE_RE = re.compile(r"^(`{3,}|~{3,})\s*([\w+-]*)\s*$")
_HEADING_RE = re.compile(r"^(#{1,6})\s+(.+?)\s*#*\s*$")
_RULE_RE = re.compile(r"^(-{3,}|\*{3,}|_{3,})$")
_IMAGE_RE = re.compile(r"^!\[([^\]]*)\]\(([^)\s]*)\)\s*(?:\{([^}]*)\})?$")


def _parse_blocks(text: str) -> list[Block]:
    """Parse Markdown body text into blocks in source order."""
    blocks: list[Block] = []
    lines = text.split("\n")
    i = 0

    while i < len(lines):
        line = lines[i]
        stripped = line.strip()

        if not stripped:
            i += 1
            continue

        fence_m = _FENCE_RE.match(stripped)
        if fence_m and not line.startswith((" ", "\t")):
            marker = fence_m.group(1)
            language = fence_m.group(2) or None
            code_lines: list[str] = []
            i += 1
            while i < len(lines) and lines[i].rstrip() != marker[0] * len(marker):
                code_lines.append(lines[i])
                i += 1
            i += 1  # closing fence
            blocks.append(CodeBlock(text="\n".join(code_lines), language=language))
            continue

        heading_m = _HEADING_RE.match(stripped)
        if heading_m:
            level = len(heading_m.group(1))
            blocks.append(Heading(level=level, children=parse_inline(heading_m.group(2))))
            i += 1
            continue

        if _RULE_RE.match(stripped):
            blocks.append(Rule())
            i += 1
            continue

        if stripped.startswith(">"):
            quote_lines: list[str] = []
            while i < len(lines) and lines[i].strip().startswith(">"):
                quote_lines.append(lines[i].strip()[1:].strip())
                i += 1
            blocks.append(Quote(children=_quote_children(quote_lines)))
            continue

        image_m = _IMAGE_RE.match(stripped)
        if image_m:
            blocks.append(_make_image(image_m.group(2), image_m.group(1), image_m.group(3) or ""))
            i += 1
            continue

        paragraph_lines = [stripped]
        i += 1
        while i < len(lines) and _continues_paragraph(lines[i]):
            paragraph_lines.append(lines[i].strip())
            i += 1
        blocks.append(Paragraph(children=parse_inline(" ".join(paragraph_lines))))

    return blocks


def _continues_paragraph(line: str) -> bool:
    stripped = line.strip()
    if not stripped:
        return False
    if stripped.startswith(">") or _HEADING_RE.match(stripped) or _RULE_RE.match(stripped):
        return False
    if _FENCE_RE.match(stripped) or _IMAGE_RE.match(stripped):
        return False
    return True


def _quote_children(lines: list[str]) -> tuple:
    """Join quote lines; an empty ``>`` line becomes a paragraph break."""
    children: list = []
    current: list[str] = []
    for line in lines:
        if line:
            current.append(line)
            continue
        if current:
            children.extend(parse_inline(" ".join(current)))
            children.extend([LineBreak(), LineBreak()])
            current = []
    if current:
        children.extend(parse_inline(" ".join(current)))
    while children and isinstance(children[-1], LineBreak):
        children.pop()
    return tuple(children)


def _make_image(src: str, alt: str, attrs: str) -> Image:
    width: str | None = None
    is_window = False
    for token in attrs.split():
        if token == "window":
            is_window = True
        elif token.startswith("width="):
            width = token.split("=", 1)[1].strip("\"'")
    return Image(path=src, width=width, is_window=is_window, alt=alt)


# ---------------------------------------------------------------------------
# Inline parsing
# ---------------------------------------------------------------------------

_INLINE_RE = re.compile(
    r"`(?P<code>[^`]+)`"
    r"|\[\^(?P<ref>[^\]]+)\]"
    r"|\[(?P<label>[^\]]+)\]\((?P<href>[^)\s]+)\)"
    r"|\*\*(?P<strong>.+?)\*\*"
    r"|\*(?P<em>[^*]+?)\*"
)


def parse_inline(text: str) -> tuple:
    """Parse inline Markdown spans into inline content nodes."""
    children: list = []
    last = 0
    for m in _INLINE_RE.finditer(text):
        if m.start() > last:
            children.append(text[last:m.start()])
        if m.group("code") is not None:
            children.append(InlineCode(text=m.group("code")))
        elif m.group("ref") is not None:
            children.append(FootNoteRef(id=m.group("ref")))
        elif m.group("href") is not None:
            children.append(Link(href=m.group("href"), children=parse_inline(m.group("label"))))
        elif m.group("strong") is not None:
            children.append(Strong(children=parse_inline(m.group("strong"))))
        else:
            children.append(Emphasis(children=parse_inline(m.group("em"))))
        last = m.end()
    if last < len(text):
        children.append(text[last:])
    return tuple(children)
