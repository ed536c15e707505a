"""Success side of the response envelope."""

from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def ok(data: Any = None, status_code: int = status.HTTP_200_OK, **extra: Any) -> JSONResponse:
    """Wrap a payload as ``{"success": true, "data": ...}``.

    ``data`` is left out for plain acknowledgements. Extra keyword arguments
    are added at the top level (e.g. a human readable ``message``).
    """
    content: dict = {"success": True}
    if data is not None:
        content["data"] = data
    content.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def created(data: Optional[Any] = None, **extra: Any) -> JSONResponse:
    return ok(data, status_code=status.HTTP_201_CREATED, **extra)
