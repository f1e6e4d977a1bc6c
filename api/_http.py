"""Shared plumbing for the JSON serverless handlers (not itself a route)."""

import asyncio
import json
from http.server import BaseHTTPRequestHandler
from typing import Any, Optional
from urllib.parse import parse_qs, urlparse

from pydantic import ValidationError

from protea.models.profile import AuthUser
from protea.services.auth import bearer_token, get_user_from_token
from protea.utils.errors import (
    AccessDeniedError,
    AuthenticationError,
    ListingNotFoundError,
    ListingValidationError,
)
from protea.utils.logging import correlation_context, get_structured_logger
from protea.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)

MAX_BODY_BYTES = 1_000_000


def status_for(error: Exception) -> int:
    """HTTP status for an exception raised while handling a request."""
    if isinstance(error, (ListingValidationError, ValidationError)):
        return 400
    if isinstance(error, AuthenticationError):
        return 401
    if isinstance(error, AccessDeniedError):
        return 403
    if isinstance(error, ListingNotFoundError):
        return 404
    return 500


class JsonHandler(BaseHTTPRequestHandler):
    """Base handler: JSON in, JSON out, errors mapped onto status codes."""

    def send_json(self, status: int, payload: Any) -> None:
        body = json.dumps(payload, default=str).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def send_text(self, status: int, text: str) -> None:
        body = text.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def send_error_json(self, error: Exception) -> None:
        status = status_for(error)
        if status >= 500:
            logger.error("Request failed", path=self.path, error=str(error), exc_info=True)
        else:
            logger.info("Request rejected", path=self.path, status=status, error=str(error))
        payload = {"error": str(error)}
        if isinstance(error, ListingValidationError) and error.field:
            payload["field"] = error.field
        self.send_json(status, payload)

    def query(self) -> dict[str, str]:
        """Query string as single values (last one wins)."""
        params = parse_qs(urlparse(self.path).query, keep_blank_values=True)
        return {key: values[-1] for key, values in params.items()}

    def read_json(self) -> dict:
        """Parse the request body as a JSON object. Raises ListingValidationError."""
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError:
            raise ListingValidationError("Invalid Content-Length")
        if length <= 0:
            raise ListingValidationError("Request body required")
        if length > MAX_BODY_BYTES:
            raise ListingValidationError("Request body too large")

        try:
            payload = json.loads(self.rfile.read(length).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise ListingValidationError("Request body must be JSON")
        if not isinstance(payload, dict):
            raise ListingValidationError("Request body must be a JSON object")
        return payload

    async def authenticate(self) -> AuthUser:
        return await get_user_from_token(bearer_token(self.headers.get("Authorization")))

    def dispatch(self, coro_factory) -> None:
        """Run ``coro_factory()`` to completion inside a correlation context.

        The coroutine returns ``(status, payload)``; a ``str`` payload is sent
        as plain text. Raised errors are mapped by ``status_for``.
        """
        header_id: Optional[str] = self.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER)
        with correlation_context(header_id):
            try:
                status, payload = asyncio.run(coro_factory())
            except Exception as e:
                self.send_error_json(e)
                return

        if isinstance(payload, str):
            self.send_text(status, payload)
        else:
            self.send_json(status, payload)
