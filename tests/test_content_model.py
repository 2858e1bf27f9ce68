import pytest

from essays.content.base import (
    CodeBlock,
    Document,
    FootNote,
    FootNoteList,
    FootNoteRef,
    Heading,
    Image,
    InlineCode,
    Link,
    Paragraph,
    Rule,
    Strong,
)
from essays.exceptions import AuthoringError, DuplicateFootnoteError, MalformedBlockError


def test_paragraph_accepts_plain_text() -> None:
    assert Paragraph("Hi").children == ("Hi",)
    assert Paragraph(["Hi ", Strong("there")]).children == ("Hi ", Strong(("there",)))


def test_blocks_are_immutable() -> None:
    block = CodeBlock("x = 1")
    with pytest.raises(AttributeError):
        block.text = "y = 2"  # type: ignore[misc]


def test_image_requires_path() -> None:
    with pytest.raises(MalformedBlockError, match="path"):
        Image(path="")


def test_image_width_normalised_from_string() -> None:
    assert Image(path="/static/a.gif", width="380").width == 380


@pytest.mark.parametrize("width", [0, -5, "wide", True])
def test_image_rejects_invalid_width(width: object) -> None:
    with pytest.raises(MalformedBlockError, match="width"):
        Image(path="/static/a.gif", width=width)  # type: ignore[arg-type]


def test_link_requires_href() -> None:
    with pytest.raises(MalformedBlockError, match="href"):
        Link(href="", children="label")


def test_link_label_defaults_to_href() -> None:
    assert Link(href="https://example.com").children == ("https://example.com",)


def test_link_internal_detection() -> None:
    assert Link("/essays/other").is_internal
    assert not Link("https://example.com").is_internal
    assert not Link("//cdn.example.com/x").is_internal


@pytest.mark.parametrize("level", [0, 7])
def test_heading_level_bounds(level: int) -> None:
    with pytest.raises(MalformedBlockError):
        Heading(level=level, children="Title")


def test_footnote_ids_required() -> None:
    with pytest.raises(MalformedBlockError):
        FootNoteRef("")
    with pytest.raises(MalformedBlockError):
        FootNote(id=" ", children="body")


def test_footnote_list_rejects_duplicates() -> None:
    with pytest.raises(DuplicateFootnoteError, match="'a'"):
        FootNoteList((FootNote("a", "one"), FootNote("a", "two")))


def test_document_rejects_unknown_blocks() -> None:
    with pytest.raises(MalformedBlockError, match="str"):
        Document(id="post", blocks=["not a block"])  # type: ignore[list-item]


def test_document_requires_id() -> None:
    with pytest.raises(AuthoringError):
        Document(id="", blocks=[])


def test_document_walk_visits_nested_content_in_order() -> None:
    doc = Document(
        id="post",
        blocks=[
            Paragraph(["a", Link("/x", [InlineCode("b")]), FootNoteRef("n")]),
            FootNoteList([FootNote("n", ["c", FootNoteRef("n")])]),
        ],
    )
    refs = [node for node in doc.walk() if isinstance(node, FootNoteRef)]
    codes = [node.text for node in doc.walk() if isinstance(node, InlineCode)]

    assert len(refs) == 2
    assert codes == ["b"]


@pytest.mark.parametrize(
    "build",
    [
        lambda: Paragraph([Rule()]),
        lambda: Paragraph([None]),
        lambda: Link("/x", None),
        lambda: Strong([Paragraph("nested block")]),
        lambda: FootNote("a", [CodeBlock("x")]),
    ],
)
def test_inline_children_are_checked_on_construction(build) -> None:
    with pytest.raises(MalformedBlockError, match="Unsupported inline content"):
        build()


def test_inline_code_requires_string() -> None:
    with pytest.raises(MalformedBlockError, match="InlineCode"):
        InlineCode(None)  # type: ignore[arg-type]
