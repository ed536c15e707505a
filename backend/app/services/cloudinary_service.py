"""Raw file uploads to Cloudinary."""
import base64
import logging
import os
from typing import Optional

import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
import fitz  # PyMuPDF

from ..errors import InvalidInput, UpstreamError

logger = logging.getLogger(__name__)

CLOUDINARY_MAX_BYTES = 10 * 1024 * 1024


def compress_pdf(data: bytes) -> bytes:
    """Re-save a PDF with garbage collection and deflate. Returns the input if that fails."""
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            compressed = doc.tobytes(garbage=4, deflate=True)
    except (RuntimeError, ValueError) as e:
        logger.warning(f"PDF compression failed, using original: {e}")
        return data
    ratio = (len(data) - len(compressed)) / len(data) * 100
    logger.info(
        f"PDF compressed: {len(data) / 1024 / 1024:.1f}MB -> "
        f"{len(compressed) / 1024 / 1024:.1f}MB ({ratio:.1f}% reduction)"
    )
    return compressed


class CloudinaryUploader:
    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        folder: str = "casanovastudy",
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def upload(self, data: bytes, filename: str, folder: Optional[str] = None) -> dict:
        if not self.configured:
            raise UpstreamError("Cloudinary is not configured (CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET)")
        folder = folder or self.folder

        if filename.lower().endswith(".pdf") and len(data) > CLOUDINARY_MAX_BYTES:
            logger.info("PDF is over 10MB, attempting compression...")
            data = compress_pdf(data)
            if len(data) > CLOUDINARY_MAX_BYTES:
                raise InvalidInput("PDF is larger than 10MB even after compression")

        stem = os.path.splitext(filename)[0]
        data_uri = f"data:application/octet-stream;base64,{base64.b64encode(data).decode('ascii')}"
        try:
            result = cloudinary.uploader.upload(
                data_uri,
                public_id=f"{folder}/{stem}",
                resource_type="raw",
                folder=folder,
                use_filename=True,
                unique_filename=True,
                overwrite=False,
                invalidate=True,
                cloud_name=self.cloud_name,
                api_key=self.api_key,
                api_secret=self.api_secret,
            )
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload error: {e}", exc_info=True)
            raise UpstreamError("Failed to upload file") from e

        logger.info(f"File uploaded to Cloudinary: {filename} -> {result.get('public_id')}")
        return {
            "public_id": result.get("public_id"),
            "secure_url": result.get("secure_url"),
            "bytes": result.get("bytes"),
            "format": result.get("format"),
        }
