"""File uploads: text extraction for study guide generation, and raw storage on Cloudinary."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile

from app.auth import get_current_user_id
from app.dependencies import get_cloudinary_uploader, get_content_processor
from app.errors import InvalidInput, ProcessingError
from app.responses import ok
from app.services.cloudinary_service import CloudinaryUploader
from processor.adapters import ContentProcessingError
from processor.service import ContentProcessor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Files"])


async def read_uploads(files: List[UploadFile]) -> list:
    batch = []
    try:
        for file in files:
            batch.append((file.filename or "unnamed_file", await file.read(), file.content_type))
    finally:
        for file in files:
            await file.close()
    return batch


@router.post("/upload")
async def upload_files(
    files: Optional[List[UploadFile]] = File(None),
    processor: ContentProcessor = Depends(get_content_processor),
):
    """
    Extract text from every uploaded file.

    All or nothing: one file that cannot be processed fails the whole request.
    """
    if not files:
        raise InvalidInput("No files uploaded")

    batch = await read_uploads(files)
    try:
        processed = await processor.process_batch(batch)
    except ContentProcessingError as e:
        logger.error(f"File processing failed: {e}", exc_info=True)
        raise ProcessingError(f"Failed to process files: {e}") from e

    return ok(
        {
            "files": processed,
            "totalSize": sum(f["size"] for f in processed),
            "processedCount": len(processed),
        },
        message=f"Successfully processed {len(processed)} file(s)",
    )


@router.post("/upload-to-cloudinary")
async def upload_to_cloudinary(
    file: Optional[UploadFile] = File(None),
    user_id: str = Depends(get_current_user_id),
    uploader: CloudinaryUploader = Depends(get_cloudinary_uploader),
):
    if file is None:
        raise InvalidInput("No file provided")
    try:
        data = await file.read()
    finally:
        await file.close()
    if not data:
        raise InvalidInput("Uploaded file is empty")

    result = uploader.upload(data, file.filename or "upload")
    return ok(result)
