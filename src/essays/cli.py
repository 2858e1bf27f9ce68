"""essays CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from essays.composer import DocumentComposer
from essays.config import SiteConfig
from essays.content.base import Document
from essays.content.catalog import DocumentCatalog
from essays.content.md_parser import MarkdownParser
from essays.exceptions import EssaysError


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Render essays written as Markdown into standalone HTML pages."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("source", type=str)
@click.option("--output", "-o", type=click.Path(path_type=Path), required=True, help="Output HTML path")
@click.option(
    "--content-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Resolve SOURCE as a document id inside this directory",
)
@click.option("--title", type=str, default=None, help="Override document title")
@click.option("--back", type=str, default=None, help="Override back-navigation target")
@click.option("--closer", is_flag=True, help="Place the back button closer to the corner on small screens")
def render(
    source: str,
    output: Path,
    content_dir: Path | None,
    title: str | None,
    back: str | None,
    closer: bool,
) -> None:
    """Render one essay SOURCE (a Markdown file or a document id) to HTML."""
    try:
        document = _load_document(source, content_dir)
        if title is not None or back is not None:
            document = Document(
                id=document.id,
                blocks=document.blocks,
                title=title if title is not None else document.title,
                back=back if back is not None else document.back,
            )
        html = DocumentComposer(SiteConfig.from_env()).render(document, closer=closer)
    except EssaysError as exc:
        raise click.ClickException(str(exc)) from exc

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")

    click.echo(f"Rendered: {output}")


@main.command("list")
@click.option(
    "--content-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=True,
    help="Directory holding essay sources",
)
def list_documents(content_dir: Path) -> None:
    """List the document ids available in a content directory."""
    for document_id in DocumentCatalog(content_dir).ids():
        click.echo(document_id)


def _load_document(source: str, content_dir: Path | None) -> Document:
    if content_dir is not None:
        return DocumentCatalog(content_dir).get(source)

    path = Path(source)
    if not path.is_file():
        raise click.ClickException(f"Source file not found: {source}")
    if path.suffix.lower() not in (".md", ".markdown"):
        raise click.ClickException(f"Unsupported input type: {path.name} (expected .md or .markdown)")
    return MarkdownParser().parse(path)


if __name__ == "__main__":  # pragma: no cover
    main()
