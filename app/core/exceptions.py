import logging
from typing import Any, Dict, List, Optional
from fastapi.exceptions import RequestValidationError
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BackendAPIError(Exception):
    """The upstream REST backend answered with a non-2xx status or could not be reached."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class BackendUnauthorizedError(BackendAPIError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(401, message)


class FormModeError(Exception):
    """A structural edit was attempted while the project form is in view mode."""


class DraftValidationError(Exception):
    """The draft does not pass submission validation; nothing was sent upstream."""

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__("Draft validation failed")
        self.errors = errors


class DraftNotFoundError(Exception):
    def __init__(self, draft_id: str):
        super().__init__(f"Draft {draft_id} not found")
        self.draft_id = draft_id


class SubmissionInProgressError(Exception):
    def __init__(self, draft_id: Optional[str] = None):
        super().__init__("A save for this draft is already in progress")
        self.draft_id = draft_id


def register_exception_handlers(app):
    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.info("HTTP exception", extra={"status_code": exc.status_code})
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info("Validation error", extra={"errors": exc.errors()})
        return JSONResponse({"error": "Validation error", "details": jsonable_errors(exc.errors())}, status_code=422)

    @app.exception_handler(DraftValidationError)
    async def draft_validation_handler(request: Request, exc: DraftValidationError):
        logger.info("Draft rejected by validation", extra={"errors": exc.errors})
        return JSONResponse({"error": "Validation error", "details": exc.errors}, status_code=422)

    @app.exception_handler(BackendUnauthorizedError)
    async def backend_unauthorized_handler(request: Request, exc: BackendUnauthorizedError):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    @app.exception_handler(BackendAPIError)
    async def backend_error_handler(request: Request, exc: BackendAPIError):
        logger.warning("Backend request failed: %s (%s)", exc.message, exc.status_code)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(DraftNotFoundError)
    async def draft_not_found_handler(request: Request, exc: DraftNotFoundError):
        return JSONResponse({"error": "Draft not found"}, status_code=404)

    @app.exception_handler(FormModeError)
    async def form_mode_handler(request: Request, exc: FormModeError):
        return JSONResponse({"error": str(exc)}, status_code=409)

    @app.exception_handler(SubmissionInProgressError)
    async def submission_in_progress_handler(request: Request, exc: SubmissionInProgressError):
        return JSONResponse({"error": str(exc)}, status_code=409)

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return JSONResponse({"error": "Internal server error"}, status_code=500)


def jsonable_errors(errors) -> List[Dict[str, Any]]:
    """Reduce pydantic error dicts to loc/msg/type, which always serialize."""
    return [
        {"loc": [str(part) for part in e.get("loc", ())], "msg": e.get("msg"), "type": e.get("type")}
        for e in errors
    ]
