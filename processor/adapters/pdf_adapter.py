"""
PDF adapter.

Text is pulled page by page with PyMuPDF. The metadata carries a rough
``text_coverage`` score so callers can tell a scanned handout (little or no
text layer) from a born-digital one.
"""

from typing import List, Dict, BinaryIO

import fitz  # PyMuPDF

from . import ContentAdapter, ContentProcessingError, InvalidFileError

PREVIEW_CHARS = 500


def _open(data: bytes) -> "fitz.Document":
    try:
        return fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise InvalidFileError(filename="document.pdf", message=f"Failed to read PDF file: {e}") from e


class PDFAdapter(ContentAdapter):
    """Adapter for PDF files."""

    @classmethod
    def supported_mime_types(cls) -> List[str]:
        return [
            'application/pdf',
            'application/x-pdf',
        ]

    async def extract_text(self, file: BinaryIO, **kwargs) -> str:
        file.seek(0)
        with _open(file.read()) as doc:
            try:
                pages = [page.get_text("text") for page in doc]
            except RuntimeError as e:
                raise ContentProcessingError(f"Error extracting text from PDF: {e}") from e
        return "\n\n".join(pages)

    async def extract_metadata(self, file: BinaryIO) -> Dict:
        file.seek(0)
        data = file.read()
        file.seek(0)

        with _open(data) as doc:
            info = doc.metadata or {}
            page_count = doc.page_count
            preview = ""
            total_chars = 0
            pages_with_text = 0
            for i, page in enumerate(doc):
                text = page.get_text("text") or ""
                if i == 0:
                    preview = text[:PREVIEW_CHARS]
                total_chars += len(text)
                if text.strip():
                    pages_with_text += 1

        return {
            'page_count': page_count,
            'title': info.get('title', ''),
            'author': info.get('author', ''),
            'subject': info.get('subject', ''),
            'creation_date': info.get('creationDate', ''),
            'preview': preview,
            'size_bytes': len(data),
            'char_count': total_chars,
            'text_coverage': round(pages_with_text / page_count, 2) if page_count else 0.0,
        }

    async def is_valid(self, file: BinaryIO) -> bool:
        """Check the PDF magic number."""
        try:
            file.seek(0)
            return file.read(4) == b'%PDF'
        finally:
            file.seek(0)
