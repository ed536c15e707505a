"""
Content Processing Service

Turns uploaded study material into text with the adapter registered for its
type, and optionally keeps a sanitized copy of the upload on disk.

Example:
    >>> processor = ContentProcessor()
    >>> with open('notes.pdf', 'rb') as f:
    ...     result = await processor.process_file(f, 'notes.pdf')
"""

import io
import os
import time
import logging
import mimetypes
from datetime import datetime, timezone
from typing import Dict, Any, BinaryIO, Iterable, List, Optional, Tuple
from pathlib import Path
from contextlib import asynccontextmanager

from .adapters import (
    get_adapter,
    ContentProcessingError,
    UnsupportedFileTypeError,
    InvalidFileError
)
from .summarize import summarize_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024

# (filename, raw bytes, content type reported by the client)
UploadedFile = Tuple[str, bytes, Optional[str]]


class ContentProcessor:
    """
    Processes uploaded files with the adapter matching their type.

    Args:
        upload_dir: Directory where saved uploads are written, created on first save.
        max_file_size: Maximum allowed file size in bytes (default: 50MB).
    """

    def __init__(self, upload_dir: str = "uploads", max_file_size: int = DEFAULT_MAX_FILE_SIZE):
        self.upload_dir = Path(upload_dir).resolve()
        self.max_file_size = max_file_size
        mimetypes.init()
        logger.info(f"ContentProcessor initialized with upload directory: {self.upload_dir}")

    @asynccontextmanager
    async def _get_file_handle(self, file: BinaryIO):
        try:
            file.seek(0)
            yield file
        finally:
            file.seek(0)

    @staticmethod
    def _file_size(file: BinaryIO) -> int:
        current_pos = file.tell()
        file.seek(0, 2)
        size = file.tell()
        file.seek(current_pos)
        return size

    def _validate_file_size(self, filename: str, size: int) -> None:
        if size > self.max_file_size:
            raise InvalidFileError(
                filename=filename,
                message=f"File {filename} is {size} bytes, the maximum allowed size is {self.max_file_size} bytes"
            )

    async def process_file(
        self,
        file: BinaryIO,
        filename: str,
        save_file: bool = False,
        **adapter_kwargs: Any
    ) -> Dict[str, Any]:
        """
        Process a file using the appropriate adapter.

        Returns:
            Dict with ``filename``, ``file_path`` (relative to the upload dir,
            or None), ``content``, ``metadata``, ``processing_time``,
            ``file_size`` and ``file_type``.

        Raises:
            UnsupportedFileTypeError: If no adapter is available for the file type.
            InvalidFileError: If the file is too large, invalid or corrupted.
            ContentProcessingError: For other processing errors.
        """
        start_time = time.time()
        file_size = self._file_size(file)
        logger.info(f"Processing file: {filename} (size: {file_size} bytes)")

        self._validate_file_size(filename, file_size)

        adapter = get_adapter(filename)
        if not adapter:
            mime_type, _ = mimetypes.guess_type(filename)
            raise UnsupportedFileTypeError(
                file_type=mime_type or 'unknown',
                message=f"Unsupported file type for {filename}: {mime_type or 'unknown'}"
            )

        logger.debug(f"Using adapter: {adapter.__class__.__name__} for {filename}")

        try:
            if not await adapter.is_valid(file):
                raise InvalidFileError(
                    filename=filename,
                    message=f"File {filename} is invalid or corrupted"
                )

            async with self._get_file_handle(file) as f:
                text = await adapter.extract_text(f, **adapter_kwargs)

            async with self._get_file_handle(file) as f:
                metadata = await adapter.extract_metadata(f)

            file_path = None
            if save_file:
                async with self._get_file_handle(file) as f:
                    file_path = await self._save_uploaded_file(f, filename)

        except ContentProcessingError:
            raise

        except Exception as e:
            logger.error(f"Unexpected error processing {filename}: {str(e)}", exc_info=True)
            raise ContentProcessingError(
                f"An unexpected error occurred while processing {filename}: {str(e)}"
            ) from e

        processing_time = time.time() - start_time
        logger.info(f"Successfully processed {filename} in {processing_time:.2f}s")
        return {
            'filename': filename,
            'file_path': str(file_path.relative_to(self.upload_dir)) if file_path else None,
            'content': text,
            'metadata': metadata,
            'processing_time': round(processing_time, 4),
            'file_size': file_size,
            'file_type': mimetypes.guess_type(filename)[0] or 'application/octet-stream'
        }

    async def process_batch(self, files: Iterable[UploadedFile]) -> List[Dict[str, Any]]:
        """
        Extract study text from every file, in order.

        All or nothing: the first file that fails raises and the files after
        it are not looked at. Long extracted text is condensed with
        ``summarize_text``.

        Returns:
            One ``{name, type, size, content, extractedAt}`` dict per file.
        """
        processed = []
        for filename, data, content_type in files:
            result = await self.process_file(io.BytesIO(data), filename)
            processed.append({
                'name': filename,
                'type': content_type or result['file_type'],
                'size': len(data),
                'content': summarize_text(result['content']).strip(),
                'extractedAt': datetime.now(timezone.utc).isoformat(),
            })
        logger.info(f"Processed batch of {len(processed)} file(s)")
        return processed

    async def _generate_unique_filename(self, filename: str) -> Path:
        safe_name = self._get_safe_filename(filename)
        file_path = self.upload_dir / safe_name
        if not file_path.exists():
            return file_path

        name, ext = os.path.splitext(safe_name)
        counter = 1
        while True:
            new_path = self.upload_dir / f"{name}_{counter}{ext}"
            if not new_path.exists():
                return new_path
            counter += 1

    async def _save_uploaded_file(self, file: BinaryIO, filename: str) -> Path:
        """
        Save an upload to the upload directory under a unique, sanitized name.

        Raises:
            ContentProcessingError: If the file cannot be written.
        """
        try:
            file_path = await self._generate_unique_filename(filename)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file.seek(0)
            with open(file_path, 'wb') as f:
                while chunk := file.read(8192):
                    f.write(chunk)
            logger.debug(f"Saved file to {file_path}")
            return file_path
        except OSError as e:
            error_msg = f"Failed to save file {filename}: {str(e)}"
            logger.error(error_msg)
            raise ContentProcessingError(error_msg) from e

    @staticmethod
    def _get_safe_filename(filename: str) -> str:
        """
        Return a filesystem-safe version of the filename.

        Example:
            >>> ContentProcessor._get_safe_filename("Unit 3 (draft).pdf")
            'Unit_3__draft_.pdf'
        """
        if not filename or not isinstance(filename, str):
            return 'unnamed_file'

        keep_chars = ('.', '_', '-')
        safe_chars = []
        for c in filename:
            if c.isalnum() or c in keep_chars:
                safe_chars.append(c)
            elif c.isspace() or c in '*/\\:!@#$%^&()+=[]{};\',~`|"<>?':
                safe_chars.append('_')

        safe_name = ''.join(safe_chars).strip('_.- ')
        if not safe_name:
            return 'unnamed_file'

        max_length = 255
        if len(safe_name) > max_length:
            name, ext = os.path.splitext(safe_name)
            name = name[:max_length - len(ext) - 1]
            safe_name = f"{name}{ext}"
        return safe_name
