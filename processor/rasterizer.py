"""
PDF page rasterizer.

Renders the first pages of a PDF to PNG for vision-based grading. Pages are
rendered one after another; a page that fails to render is logged and left
out, the rest are still returned.
"""

import base64
import logging
from typing import Any, Dict, List

import fitz  # PyMuPDF

from .adapters import InvalidFileError

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 10
RENDER_SCALE = 2.0


def _render_page(doc: "fitz.Document", index: int, scale: float) -> str:
    page = doc.load_page(index)
    pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale))
    return base64.b64encode(pix.tobytes("png")).decode("ascii")


async def convert_pdf_to_images(
    pdf_bytes: bytes,
    max_pages: int = DEFAULT_MAX_PAGES,
    filename: str = "document.pdf",
    scale: float = RENDER_SCALE,
) -> List[Dict[str, Any]]:
    """
    Convert PDF pages to base64 PNG images.

    Args:
        pdf_bytes: PDF file content.
        max_pages: Maximum number of pages to render.
        filename: Used in error messages only.
        scale: Oversampling factor applied to every page.

    Returns:
        One ``{"pageNumber", "imageData", "mimeType"}`` dict per rendered page,
        in page order. ``imageData`` has no data-URL prefix.

    Raises:
        InvalidFileError: If the document cannot be opened at all.
    """
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise InvalidFileError(filename=filename, message=f"Failed to read PDF file: {e}") from e

    images: List[Dict[str, Any]] = []
    with doc:
        page_count = min(doc.page_count, max(0, max_pages))
        for index in range(page_count):
            try:
                image_data = _render_page(doc, index, scale)
            except (RuntimeError, ValueError) as e:
                logger.error(f"Error converting page {index + 1} of {filename}: {e}")
                continue
            images.append({
                "pageNumber": index + 1,
                "imageData": image_data,
                "mimeType": "image/png",
            })

    logger.info(f"Converted {len(images)} of {page_count} PDF pages to images")
    return images
