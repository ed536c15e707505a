"""
Plain text adapter (notes, markdown, CSV and JSON study material).
"""

import codecs
from typing import List, Dict, BinaryIO

from . import ContentAdapter, ContentProcessingError

PREVIEW_LINES = 5


class TextAdapter(ContentAdapter):
    """Adapter for UTF-8 text files."""

    @classmethod
    def supported_mime_types(cls) -> List[str]:
        return [
            'text/plain',
            'text/markdown',
            'text/csv',
            'application/json',
        ]

    async def extract_text(self, file: BinaryIO, **kwargs) -> str:
        file.seek(0)
        try:
            return file.read().decode('utf-8')
        except UnicodeDecodeError as e:
            raise ContentProcessingError(f"Failed to decode text file: {e}") from e

    async def extract_metadata(self, file: BinaryIO) -> Dict:
        file.seek(0)
        data = file.read()
        file.seek(0)

        text = data.decode('utf-8', errors='replace')
        lines = text.splitlines()
        return {
            'size_bytes': len(data),
            'line_count': len(lines),
            'word_count': len(text.split()),
            'preview': '\n'.join(line.strip() for line in lines[:PREVIEW_LINES]),
            'encoding': 'utf-8',
        }

    async def is_valid(self, file: BinaryIO) -> bool:
        """A text file is valid if its first kilobyte decodes as UTF-8."""
        try:
            file.seek(0)
            chunk = file.read(1024)
            # A multi-byte sequence may be cut at the chunk boundary
            codecs.getincrementaldecoder('utf-8')().decode(chunk, final=len(chunk) < 1024)
            return True
        except UnicodeDecodeError:
            return False
        finally:
            file.seek(0)
