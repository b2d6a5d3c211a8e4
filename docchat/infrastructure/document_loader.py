# docchat/infrastructure/document_loader.py

import asyncio
import html as html_entities
import re
from pathlib import Path
from typing import List
from urllib.parse import urlparse

import docx
import httpx

from docchat.application.text_processing import DEFAULT_MAX_CHARS_PER_CHUNK, chunk_text
from docchat.domain.interfaces import DocumentReaderPort
from docchat.domain.models import Chunk


# Only the entities web pages use all the time; the rest stay as-is.
COMMON_ENTITIES = ("&nbsp;", "&amp;", "&lt;", "&gt;", "&quot;", "&#39;")


class PdfReader(DocumentReaderPort):
    """
    Page-aware PDF reader. pdfplumber first, PyMuPDF as fallback.
    Each page is chunked on its own and chunks are numbered across the
    document, so a normal-sized page maps to exactly one chunk.
    """

    def __init__(self, max_chars_per_chunk: int = DEFAULT_MAX_CHARS_PER_CHUNK):
        self._max_chars = max_chars_per_chunk

    async def read(self, location: str) -> List[Chunk]:
        return await asyncio.to_thread(self.read_file, Path(location))

    def read_file(self, file_path: Path) -> List[Chunk]:
        if not file_path.exists():
            raise FileNotFoundError(f"PDF not found: {file_path}")

        pages = self._extract_pages_pdfplumber(file_path)
        if not pages:
            pages = self._extract_pages_pymupdf(file_path)

        chunks: List[Chunk] = []
        for _, text in pages:
            chunks.extend(chunk_text(text, self._max_chars, first_page=len(chunks) + 1))

        print(f"[DocumentLoader] Loaded {len(chunks)} chunks from {file_path.name}")
        return chunks

    # ─── Private: PDF Extractors ──────────────────────────────────────────────

    def _extract_pages_pdfplumber(self, file_path: Path) -> List[tuple[int, str]]:
        try:
            import pdfplumber
        except ImportError:
            return []
        try:
            pages = []
            with pdfplumber.open(str(file_path)) as pdf:
                for i, page in enumerate(pdf.pages):
                    text = page.extract_text(x_tolerance=2, y_tolerance=2)
                    if text:
                        pages.append((i + 1, text))
            return pages
        except Exception as error:
            print(f"[DocumentLoader] pdfplumber error on {file_path.name}: {error}")
            return []

    def _extract_pages_pymupdf(self, file_path: Path) -> List[tuple[int, str]]:
        import fitz

        pages = []
        with fitz.open(str(file_path)) as pdf:
            for i, page in enumerate(pdf):
                pages.append((i + 1, page.get_text() or ""))
        return pages


class DocxReader(DocumentReaderPort):
    """Word (.docx) reader: non-empty paragraphs joined by newlines, then chunked."""

    def __init__(self, max_chars_per_chunk: int = DEFAULT_MAX_CHARS_PER_CHUNK):
        self._max_chars = max_chars_per_chunk

    async def read(self, location: str) -> List[Chunk]:
        return await asyncio.to_thread(self.read_file, Path(location))

    def read_file(self, file_path: Path) -> List[Chunk]:
        if not str(file_path).strip():
            raise ValueError("Word path is empty.")

        document = docx.Document(str(file_path))
        lines = [p.text.strip() for p in document.paragraphs]
        text = "\n".join(line for line in lines if line)

        chunks = chunk_text(text, self._max_chars)
        print(f"[DocumentLoader] Loaded {len(chunks)} sections from {file_path.name}")
        return chunks


class WebReader(DocumentReaderPort):
    """Fetches a page over HTTP and chunks its visible text."""

    def __init__(
        self,
        max_chars_per_chunk: int = DEFAULT_MAX_CHARS_PER_CHUNK,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._max_chars = max_chars_per_chunk
        self._timeout = timeout
        self._transport = transport

    async def read(self, location: str) -> List[Chunk]:
        url = (location or "").strip()
        if not url:
            raise ValueError("URL is empty.")

        parsed = urlparse(url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError(f"URL is invalid: {url}")

        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()

        chunks = chunk_text(html_to_text(response.text), self._max_chars)
        print(f"[DocumentLoader] Loaded {len(chunks)} chunks from {parsed.netloc}")
        return chunks


def html_to_text(markup: str) -> str:
    """Strip scripts, styles and tags; keep paragraph breaks."""
    if not markup or not markup.strip():
        return ""

    text = re.sub(r"<script[\s\S]*?</script>", "", markup, flags=re.IGNORECASE)
    text = re.sub(r"<style[\s\S]*?</style>", "", text, flags=re.IGNORECASE)

    text = re.sub(r"<br\s*/?>", "\n", text, flags=re.IGNORECASE)
    text = re.sub(r"</p>", "\n", text, flags=re.IGNORECASE)

    text = re.sub(r"<[^>]+>", " ", text)

    for entity in COMMON_ENTITIES:
        text = text.replace(entity, html_entities.unescape(entity).replace("\xa0", " "))

    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
