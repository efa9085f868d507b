from __future__ import annotations
import logging
from typing import Any, Dict, Optional
from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

log = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    code: str = Field(examples=["validation_error"])
    detail: str = Field(examples=["Title must be between 3 and 100 characters"])
    meta: dict | None = Field(default=None, examples=[{"field": "title", "constraint": "length 3-100"}])


class RecipeShareError(Exception):
    """Base de los errores de dominio; cada subclase fija su status y código."""
    status_code = 500
    code = "error"

    def __init__(self, detail: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(detail)
        self.detail = detail
        self.meta = meta


class ValidationError(RecipeShareError):
    status_code = 400
    code = "validation_error"

    def __init__(self, field: str, constraint: str, detail: Optional[str] = None):
        super().__init__(detail or f"{field}: {constraint}", meta={"field": field, "constraint": constraint})
        self.field = field
        self.constraint = constraint


class ImageMissing(RecipeShareError):
    status_code = 400
    code = "image_missing"

    def __init__(self, detail: str = "image required"):
        super().__init__(detail, meta={"field": "imageUrl"})


class NotFound(RecipeShareError):
    status_code = 404
    code = "not_found"

    def __init__(self, recipe_id: str):
        super().__init__("Recipe not found", meta={"id": recipe_id})
        self.recipe_id = recipe_id


class Forbidden(RecipeShareError):
    status_code = 403
    code = "forbidden"


class Unauthorized(RecipeShareError):
    status_code = 401
    code = "unauthorized"

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail)


def install_exception_handlers(app: FastAPI):
    @app.exception_handler(RecipeShareError)
    async def domain_exception_handler(request: Request, exc: RecipeShareError):
        payload = ErrorResponse(code=exc.code, detail=exc.detail, meta=exc.meta)
        return JSONResponse(status_code=exc.status_code, content=payload.model_dump())

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        code_map: Dict[int, str] = {
            400: "bad_request",
            401: "unauthorized",
            403: "forbidden",
            404: "not_found",
            409: "conflict",
            413: "payload_too_large",
            415: "unsupported_media_type",
            422: "validation_error",
            429: "rate_limited",
            500: "internal_error",
        }
        payload = ErrorResponse(code=code_map.get(exc.status_code, "error"), detail=str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=payload.model_dump(), headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in exc.errors()]
        payload = ErrorResponse(code="validation_error", detail="Validation failed", meta={"errors": errors})
        return JSONResponse(status_code=422, content=payload.model_dump())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        payload = ErrorResponse(code="internal_error", detail="Internal server error")
        return JSONResponse(status_code=500, content=payload.model_dump())
