"""Look up essay documents by identifier in a content directory."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from essays.exceptions import DocumentNotFoundError

from .base import Document
from .md_parser import MarkdownParser

logger = logging.getLogger(__name__)

_DOCUMENT_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*(?:/[A-Za-z0-9][A-Za-z0-9._-]*)*$")
_SOURCE_SUFFIXES = (".md", ".markdown")


class DocumentCatalog:
    """Map document identifiers to Markdown sources under ``root``.

    An identifier ``2017/multithreading-node`` resolves to
    ``root/2017/multithreading-node.md`` or ``root/2017/multithreading-node/index.md``.
    """

    def __init__(self, root: Path, parser: MarkdownParser | None = None) -> None:
        self.root = Path(root)
        self.parser = parser or MarkdownParser()

    def ids(self) -> list[str]:
        if not self.root.is_dir():
            return []
        root = self.root.resolve()
        found: set[str] = set()
        for path in self.root.rglob("*"):
            if not path.is_file() or path.suffix.lower() not in _SOURCE_SUFFIXES:
                continue
            if not path.resolve().is_relative_to(root):
                continue
            relative = path.relative_to(self.root).with_suffix("")
            if relative.name == "index" and relative.parent != Path("."):
                relative = relative.parent
            document_id = relative.as_posix()
            if _DOCUMENT_ID_RE.match(document_id):
                found.add(document_id)
        return sorted(found)

    def source_path(self, document_id: str) -> Path:
        if not _DOCUMENT_ID_RE.match(document_id or "") or ".." in document_id.split("/"):
            raise DocumentNotFoundError(f"Invalid document id: {document_id!r}")

        root = self.root.resolve()
        for suffix in _SOURCE_SUFFIXES:
            for candidate in (self.root / f"{document_id}{suffix}", self.root / document_id / f"index{suffix}"):
                if not candidate.is_file():
                    continue
                if not candidate.resolve().is_relative_to(root):
                    raise DocumentNotFoundError(f"Document path outside content directory: {document_id}")
                return candidate

        raise DocumentNotFoundError(f"Document not found: {document_id}")

    def get(self, document_id: str) -> Document:
        path = self.source_path(document_id)
        logger.debug("Loading document %s from %s", document_id, path)
        return self.parser.parse(path, document_id=document_id)
