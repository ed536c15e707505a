"""
Format adapters for uploaded study material.

Each adapter turns one family of file formats (plain text, PDF, DOCX) into
text plus a small metadata dict. ``get_adapter`` picks one by the MIME type
guessed from the filename.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, List, BinaryIO
import mimetypes

# Not registered by default on every platform
mimetypes.add_type('text/markdown', '.md')
mimetypes.add_type('application/vnd.openxmlformats-officedocument.wordprocessingml.document', '.docx')


class ContentProcessingError(Exception):
    """Base exception for content processing errors."""
    pass


class UnsupportedFileTypeError(ContentProcessingError):
    """Raised when a file type is not supported."""
    def __init__(self, file_type: str, message: str = ""):
        self.file_type = file_type
        self.message = message or f"Unsupported file type: {file_type}"
        super().__init__(self.message)


class InvalidFileError(ContentProcessingError):
    """Raised when a file is invalid or corrupted."""
    def __init__(self, filename: str, message: str = ""):
        self.filename = filename
        self.message = message or f"Invalid or corrupted file: {filename}"
        super().__init__(self.message)


class ContentAdapter(ABC):
    """Abstract base class for format adapters."""

    @classmethod
    @abstractmethod
    def supported_mime_types(cls) -> List[str]:
        """Return a list of MIME types this adapter can handle."""
        pass

    @abstractmethod
    async def extract_text(self, file: BinaryIO, **kwargs) -> str:
        """Extract text content from the file."""
        pass

    @abstractmethod
    async def extract_metadata(self, file: BinaryIO) -> Dict:
        """Extract metadata from the file."""
        pass

    @abstractmethod
    async def is_valid(self, file: BinaryIO) -> bool:
        """Check if the file is valid for this adapter."""
        pass


def get_adapter(filename: str) -> Optional[ContentAdapter]:
    """
    Return an adapter instance for ``filename``, or None if the type is not supported.
    """
    # Lazy import to avoid circular imports
    from .text_adapter import TextAdapter
    from .pdf_adapter import PDFAdapter
    from .docx_adapter import DocxAdapter

    mime_type, _ = mimetypes.guess_type(filename)
    if not mime_type:
        return None

    for adapter_cls in [TextAdapter, PDFAdapter, DocxAdapter]:
        if mime_type in adapter_cls.supported_mime_types():
            return adapter_cls()

    return None
