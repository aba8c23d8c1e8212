"""Source specifications and loaders for heterogeneous document inputs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from grounded_chat.errors import SourceLoadError
from grounded_chat.types import Document


class SourceKind(str, Enum):
    FILE = "file"
    URL = "url"


@dataclass(frozen=True, slots=True)
class SourceSpec:
    location: str
    kind: SourceKind

    def __str__(self) -> str:
        return self.location


def parse_source(value: str | Path | SourceSpec) -> SourceSpec:
    """Classify a raw source string as an http(s) URL or a local file path."""

    if isinstance(value, SourceSpec):
        return value
    text = str(value).strip()
    parsed = urlparse(text)
    if parsed.scheme in {"http", "https"} and parsed.netloc:
        return SourceSpec(location=text, kind=SourceKind.URL)
    return SourceSpec(location=text, kind=SourceKind.FILE)


class Loader(ABC):
    """Base loader interface used by the ingest pipeline."""

    extensions: tuple[str, ...] = ()

    @abstractmethod
    def load(self, source: SourceSpec) -> list[Document]:
        """Load a source into one or more documents."""


class TextFileLoader(Loader):
    """Loader for plain text and markdown files."""

    extensions = (".txt", ".text", ".md", ".markdown")

    def load(self, source: SourceSpec) -> list[Document]:
        path = Path(source.location)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceLoadError(source.location, str(exc)) from exc
        fmt = "markdown" if path.suffix.lower() in {".md", ".markdown"} else "text"
        return [
            Document(
                doc_id=path.stem,
                text=text,
                metadata={"source": str(path), "format": fmt},
            )
        ]


class PdfLoader(Loader):
    """Loader for PDF files, one document per page (LangChain `PyPDFLoader`)."""

    extensions = (".pdf",)

    def load(self, source: SourceSpec) -> list[Document]:
        path = Path(source.location)
        try:
            from langchain_community.document_loaders import PyPDFLoader

            pages = PyPDFLoader(str(path)).load()
        except Exception as exc:
            raise SourceLoadError(source.location, str(exc)) from exc

        documents: list[Document] = []
        for page in pages:
            page_number = int(page.metadata.get("page", len(documents))) + 1
            documents.append(
                Document(
                    doc_id=f"{path.stem}-p{page_number}",
                    text=page.page_content,
                    metadata={
                        **_stringify(page.metadata),
                        "source": str(path),
                        "format": "pdf",
                        "page": str(page_number),
                    },
                )
            )
        return documents


class WebPageLoader(Loader):
    """Loader for http(s) pages (LangChain `WebBaseLoader`, BeautifulSoup parsing)."""

    def load(self, source: SourceSpec) -> list[Document]:
        try:
            from langchain_community.document_loaders import WebBaseLoader

            pages = WebBaseLoader(source.location).load()
        except Exception as exc:
            raise SourceLoadError(source.location, str(exc)) from exc

        documents: list[Document] = []
        for index, page in enumerate(pages):
            doc_id = source.location if len(pages) == 1 else f"{source.location}#{index}"
            documents.append(
                Document(
                    doc_id=doc_id,
                    text=page.page_content,
                    metadata={
                        **_stringify(page.metadata),
                        "source": source.location,
                        "format": "html",
                    },
                )
            )
        return documents


class LoaderRegistry:
    """Maps file extensions (and URLs) to loader implementations."""

    def __init__(
        self,
        loaders: list[Loader] | None = None,
        *,
        url_loader: Loader | None = None,
    ) -> None:
        self._loaders: dict[str, Loader] = {}
        for loader in loaders or [TextFileLoader(), PdfLoader()]:
            self.register(loader)
        self._url_loader = url_loader or WebPageLoader()

    def register(self, loader: Loader) -> None:
        for extension in loader.extensions:
            self._loaders[extension.lower()] = loader

    def load(self, source: SourceSpec) -> list[Document]:
        if source.kind is SourceKind.URL:
            return self._url_loader.load(source)

        path = Path(source.location)
        if not path.is_file():
            raise SourceLoadError(source.location, "file not found")
        loader = self._loaders.get(path.suffix.lower())
        if loader is None:
            raise SourceLoadError(
                source.location, f"unsupported format: {path.suffix or '<none>'}"
            )
        return loader.load(source)


def _stringify(metadata: dict[str, Any]) -> dict[str, str]:
    return {str(key): str(value) for key, value in metadata.items()}
