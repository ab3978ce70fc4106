"""Exception handlers and request id helpers."""
from __future__ import annotations

import uuid

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from help_queue.exceptions import HelpQueueServiceException, UserError


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def status_for_code(exc: HelpQueueServiceException) -> int:
    if exc.code.endswith("_NOT_FOUND"):
        return status.HTTP_404_NOT_FOUND
    if exc.code.endswith("_CONFLICT"):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, UserError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: dict | None = None,
) -> JSONResponse:
    request_id = get_request_id(request)
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
            },
            "request_id": request_id,
        },
        headers={"X-Request-ID": request_id},
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HelpQueueServiceException)
    async def help_queue_exception_handler(
        request: Request, exc: HelpQueueServiceException
    ) -> JSONResponse:
        return error_response(request, status_for_code(exc), exc.code, exc.message, exc.details)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return error_response(request, exc.status_code, "HTTP_ERROR", str(exc.detail))
