"""Dependencies handing out the clients built in the app lifespan.

Tests swap any of them through ``app.dependency_overrides``.
"""

from fastapi import Request

from processor.service import ContentProcessor
from .llm import CompletionClient
from .services.cloudinary_service import CloudinaryUploader
from .services.sharing import EmailService


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client


def get_cloudinary_uploader(request: Request) -> CloudinaryUploader:
    return request.app.state.cloudinary_uploader


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email_service


def get_content_processor(request: Request) -> ContentProcessor:
    return request.app.state.content_processor
