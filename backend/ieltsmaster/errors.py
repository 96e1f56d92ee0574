"""Error taxonomy for the HTTP layer.

Handlers raise these; :func:`register_exception_handlers` turns them into
JSON responses. Client payloads carry a short ``detail`` message only, plus
the offending fields for validation errors.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ApiError(Exception):
	status_code = 500
	default_detail = "Internal server error"

	def __init__(self, detail: Optional[str] = None) -> None:
		self.detail = detail or self.default_detail
		super().__init__(self.detail)

	def payload(self) -> Dict[str, Any]:
		return {"detail": self.detail}


class AuthError(ApiError):
	status_code = 401
	default_detail = "Unauthorized"


class ValidationError(ApiError):
	status_code = 400
	default_detail = "Invalid request data"

	def __init__(self, errors: Sequence[Dict[str, Any]] = (), detail: Optional[str] = None) -> None:
		self.errors = list(errors)
		super().__init__(detail)

	def payload(self) -> Dict[str, Any]:
		return {"detail": self.detail, "errors": self.errors}


class NotFoundError(ApiError):
	status_code = 404
	default_detail = "Not found"


class ConflictError(ApiError):
	status_code = 409
	default_detail = "Conflict"


class UpstreamError(ApiError):
	"""Completion service or data store failure; the cause is logged, not returned."""

	status_code = 500


def field_errors(errors: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
	# Pydantic error dicts may carry non-JSON values under "ctx"/"input"
	return [
		{"loc": list(e.get("loc", ())), "msg": str(e.get("msg", "")), "type": str(e.get("type", ""))}
		for e in errors
	]


async def _api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
	headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
	if exc.status_code >= 500:
		logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
	return JSONResponse(status_code=exc.status_code, content=exc.payload(), headers=headers)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
	err = ValidationError(field_errors(exc.errors()))
	logger.info("Rejected %s %s: %s", request.method, request.url.path, err.errors)
	return JSONResponse(status_code=err.status_code, content=err.payload())


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
	logger.exception("Unhandled error on %s %s", request.method, request.url.path)
	return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
	app.add_exception_handler(ApiError, _api_error_handler)
	app.add_exception_handler(RequestValidationError, _request_validation_handler)
	app.add_exception_handler(Exception, _unhandled_error_handler)
