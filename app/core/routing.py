"""Route classes that turn raised errors into each resource's JSON error shape."""

from __future__ import annotations

import logging
from typing import Any, Callable, Coroutine, Dict

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from sqlalchemy.exc import IntegrityError

from app.core.errors import ConflictError, ErrorKind, ServiceError, ValidationFailed
from app.core.validation import format_errors

logger = logging.getLogger("app.http")


class ApiRoute(APIRoute):
    """Renders errors as ``{"error": message}``."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def route_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except RequestValidationError as exc:
                errors = format_errors(exc.errors())
                return self.render_error(ValidationFailed(errors[0] if errors else "Invalid request", errors))
            except ServiceError as exc:
                if exc.kind is ErrorKind.INTERNAL:
                    logger.error("service_error", extra={"path": request.url.path, "error": exc.message})
                return self.render_error(exc)
            except IntegrityError as exc:
                logger.warning("integrity_error", extra={"path": request.url.path, "error": str(exc.orig)})
                return self.render_error(ConflictError("Resource conflicts with an existing record"))
            except Exception as exc:
                logger.exception("unhandled_error", extra={"path": request.url.path})
                return self.render_error(ServiceError(str(exc)))

        return route_handler

    def error_body(self, exc: ServiceError) -> Dict[str, Any]:
        return {"error": exc.message}

    def render_error(self, exc: ServiceError) -> JSONResponse:
        headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHORIZED else None
        return JSONResponse(self.error_body(exc), status_code=exc.status_code, headers=headers)


class EnvelopeRoute(ApiRoute):
    """Renders errors as ``{"success": false, "message": ..., "errors"?: [...]}``."""

    def error_body(self, exc: ServiceError) -> Dict[str, Any]:
        if exc.kind is ErrorKind.VALIDATION:
            return {"success": False, "message": "Validation error", "errors": exc.errors or [exc.message]}
        body: Dict[str, Any] = {"success": False, "message": exc.message}
        if exc.errors:
            body["errors"] = exc.errors
        return body
