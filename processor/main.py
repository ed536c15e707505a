import os
import io
import logging
from typing import List

from fastapi import FastAPI, UploadFile, File, Form, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .adapters import ContentProcessingError, UnsupportedFileTypeError, InvalidFileError
from .rasterizer import DEFAULT_MAX_PAGES, convert_pdf_to_images
from .service import ContentProcessor

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="CasanovaStudy Content Processor",
    description="Text extraction and page rasterization for uploaded study material",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
processor = ContentProcessor(upload_dir=UPLOAD_DIR)


@app.exception_handler(ContentProcessingError)
async def content_processing_error_handler(request: Request, exc: ContentProcessingError):
    if isinstance(exc, (UnsupportedFileTypeError, InvalidFileError)):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        logger.error(f"Error processing upload on {request.url.path}: {exc}", exc_info=exc)
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(status_code=status_code, content={"success": False, "error": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"success": False, "error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error in {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"},
    )


@app.get("/")
async def root():
    """Root endpoint with service information."""
    return {
        "service": "CasanovaStudy Content Processor",
        "status": "running",
        "version": "0.1.0"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.post("/process")
async def process_file(file: UploadFile = File(...), save_file: bool = False):
    """Extract text and metadata from a single file."""
    try:
        contents = await file.read()
        result = await processor.process_file(
            file=io.BytesIO(contents),
            filename=file.filename,
            save_file=save_file,
        )
    finally:
        await file.close()
    return {"success": True, "data": result}


@app.post("/process/batch")
async def process_files(files: List[UploadFile] = File(...)):
    """
    Extract text from several files. The first failure aborts the batch.
    """
    batch = []
    try:
        for file in files:
            batch.append((file.filename, await file.read(), file.content_type))
    finally:
        for file in files:
            await file.close()

    processed = await processor.process_batch(batch)
    return {
        "success": True,
        "data": {
            "files": processed,
            "totalSize": sum(f["size"] for f in processed),
            "processedCount": len(processed),
        }
    }


@app.post("/rasterize")
async def rasterize(file: UploadFile = File(...), maxPages: int = Form(DEFAULT_MAX_PAGES)):
    """
    Render the first ``maxPages`` pages of a PDF to base64 PNG images.

    Pages that fail to render are skipped; the response holds the rest.
    """
    try:
        contents = await file.read()
    finally:
        await file.close()

    images = await convert_pdf_to_images(contents, max_pages=maxPages, filename=file.filename or "document.pdf")
    return {"success": True, "data": {"images": images, "pageCount": len(images)}}


if __name__ == "__main__":
    import uvicorn
    import argparse

    parser = argparse.ArgumentParser(description="CasanovaStudy Content Processor")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8002, help="Port to listen on")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    args = parser.parse_args()

    uvicorn.run(
        "processor.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info"
    )
