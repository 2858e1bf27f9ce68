import logging

import pytest

from essays.composer import DocumentComposer, index_footnotes
from essays.config import SiteConfig
from essays.content.base import (
    CodeBlock,
    Document,
    FootNote,
    FootNoteList,
    FootNoteRef,
    Heading,
    Link,
    Paragraph,
    Quote,
    Rule,
)
from essays.exceptions import DanglingFootnoteError, DuplicateFootnoteError, MultipleFootnoteListsError


def _hello_document() -> Document:
    return Document(
        id="post-1",
        title="Hello",
        blocks=[Paragraph("Hi"), FootNoteRef("a"), FootNoteList([FootNote("a", "Detail")])],
    )


def test_renders_shell_paragraph_marker_and_note() -> None:
    page = DocumentComposer(SiteConfig(title_suffix="Leo Lamprecht")).compose(_hello_document())

    assert page.document_id == "post-1"
    assert page.title == "Hello — Leo Lamprecht"
    assert "<title>Hello — Leo Lamprecht</title>" in page.html
    assert "<p>Hi</p>" in page.html
    assert '<a href="#fn-a" data-footnote-id="a">1</a>' in page.html
    assert '<ol class="footnotes"><li id="fn-a">Detail' in page.html
    assert page.html.count("<li ") == 1


def test_rendering_is_deterministic() -> None:
    composer = DocumentComposer()
    document = _hello_document()

    assert composer.render(document) == composer.render(document)
    assert DocumentComposer().render(document) == composer.render(document)


def test_untitled_document_uses_site_suffix() -> None:
    html = DocumentComposer(SiteConfig(title_suffix="My Site")).render(Document(id="untitled", blocks=[Paragraph("x")]))
    assert "<title>My Site</title>" in html


def test_block_order_is_preserved() -> None:
    document = Document(
        id="ordered",
        blocks=[
            Heading(2, "First"),
            Paragraph("second"),
            CodeBlock("third"),
            Quote("fourth"),
            Rule(),
            Paragraph("sixth"),
        ],
    )
    html = DocumentComposer().render(document)
    markers = ['id="first"', "<p>second</p>", "<code>third</code>", "<blockquote>fourth", "<hr />", "<p>sixth</p>"]
    positions = [html.index(marker) for marker in markers]

    assert positions == sorted(positions)


def test_code_block_is_emitted_verbatim() -> None:
    code = "if True:\n        pass\n\n\tindented with tab\n"
    html = DocumentComposer().render(Document(id="code", blocks=[CodeBlock(code, language="python")]))
    assert f'<code class="language-python">{code}</code>' in html


def test_dangling_reference_fails() -> None:
    with pytest.raises(DanglingFootnoteError, match="'x'"):
        DocumentComposer().render(Document(id="broken", blocks=[FootNoteRef("x")]))


def test_dangling_reference_inside_paragraph_fails() -> None:
    document = Document(
        id="broken",
        blocks=[Paragraph(["text", FootNoteRef("missing")]), FootNoteList([FootNote("other", "note")])],
    )
    with pytest.raises(DanglingFootnoteError):
        DocumentComposer().compose(document)


def test_multiple_footnote_lists_fail() -> None:
    document = Document(
        id="broken",
        blocks=[FootNoteList([FootNote("a", "one")]), FootNoteList([FootNote("b", "two")])],
    )
    with pytest.raises(MultipleFootnoteListsError, match="2 footnote lists"):
        DocumentComposer().render(document)


def test_duplicate_note_ids_fail_at_construction() -> None:
    with pytest.raises(DuplicateFootnoteError):
        Document(id="dup", blocks=[FootNoteList([FootNote("a", "one"), FootNote("a", "two")])])


def test_index_collects_referenced_notes() -> None:
    index = index_footnotes(_hello_document())

    assert [note.id for note in index.notes] == ["a"]
    assert index.referenced == frozenset({"a"})


def test_unreferenced_notes_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    document = Document(id="quiet", blocks=[FootNoteList([FootNote("lonely", "never cited")])])

    with caplog.at_level(logging.WARNING, logger="essays.composer"):
        html = DocumentComposer().render(document)

    assert "lonely" in caplog.text
    assert "never cited" in html


def test_back_target_defaults_and_overrides() -> None:
    composer = DocumentComposer(SiteConfig(back_target="/essays"))

    default_html = composer.render(Document(id="a", blocks=[]))
    custom_html = composer.render(Document(id="b", blocks=[], back="/2017"))

    assert '<a href="/essays">' in default_html
    assert '<link rel="prefetch" href="/essays" />' in default_html
    assert '<a href="/2017">' in custom_html


def test_closer_back_button() -> None:
    html = DocumentComposer().render(Document(id="a", blocks=[]), closer=True)
    assert '<div class="back closer">' in html


def test_internal_links_become_prefetch_hints() -> None:
    document = Document(
        id="links",
        blocks=[Paragraph([Link("/other-essay", "other"), " and ", Link("https://zeit.co", "ZEIT")])],
    )
    html = DocumentComposer().render(document)

    assert '<link rel="prefetch" href="/other-essay" />' in html
    assert 'rel="prefetch" href="https://zeit.co"' not in html


def test_site_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESSAYS_TITLE_SUFFIX", "Notebook")
    monkeypatch.setenv("ESSAYS_BACK_TARGET", "/index")
    config = SiteConfig.from_env()

    assert config.title_suffix == "Notebook"
    assert config.back_target == "/index"
    assert config.page_title("Post") == "Post — Notebook"
    assert config.page_title(None) == "Notebook"
