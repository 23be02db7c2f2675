"""Gateway Handler — per-event entry point for the serverless deployment.

Set the function handler to ``formapp.handler.handler``. Accepts API Gateway
REST (v1) and HTTP API (v2) proxy events.

Invariants:
    - No state survives between invocations beyond cached settings and logging setup
    - OPTIONS short-circuits to a CORS preflight ack without touching the database
    - Exactly one of list / get / create / delete is matched by method + path; anything else is 404
    - Every branch opens its own unpooled engine and disposes it before returning
    - handler() never raises: FormAppError → its status, anything else → 500
    - Every response carries wildcard CORS headers and a JSON string body
"""

import asyncio
import base64
import binascii
import json
import logging
from typing import Any

from formapp.config import Settings, get_settings
from formapp.core.errors import (
    ErrorSeverity,
    FormAppError,
    MalformedBodyError,
    RouteNotFoundError,
)
from formapp.infrastructure.database import per_invocation
from formapp.infrastructure.observability import setup_logging
from formapp.services import submission_store

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": (
        "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token"
    ),
    "Access-Control-Allow-Methods": "GET,POST,DELETE,OPTIONS",
}

COLLECTION_PATH = "/submissions"

_logging_ready = False


def create_response(status_code: int, body: Any) -> dict:
    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": json.dumps(body, default=str),
    }


# --- Event parsing ------------------------------------------------------------


def _request_method(event: dict) -> str:
    method = event.get("httpMethod")
    if not method:
        method = event.get("requestContext", {}).get("http", {}).get("method", "")
    return method.upper()


def _request_path(event: dict, base_path: str) -> str:
    path = event.get("path") or event.get("rawPath") or "/"
    base_path = base_path.rstrip("/")
    if base_path and (path == base_path or path.startswith(base_path + "/")):
        path = path[len(base_path):] or "/"
    if path == "/api" or path.startswith("/api/"):
        path = path[len("/api"):] or "/"
    if len(path) > 1:
        path = path.rstrip("/")
    return path


def _submission_id(event: dict, path: str) -> str | None:
    """Id from pathParameters, else the single segment after /submissions/."""
    if not path.startswith(COLLECTION_PATH + "/"):
        return None
    params = event.get("pathParameters") or {}
    if params.get("id"):
        return params["id"]
    rest = path[len(COLLECTION_PATH) + 1:]
    return rest if rest and "/" not in rest else None


def parse_body(event: dict) -> Any:
    """Decode the event body (base64 if flagged) and parse it as JSON."""
    raw = event.get("body")
    if raw is None or raw == "":
        raise MalformedBodyError("request body is empty")
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw).decode("utf-8")
        return json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedBodyError(str(e)) from e


# --- Branches -----------------------------------------------------------------


async def _list(settings: Settings) -> dict:
    async with per_invocation(settings) as db_manager:
        async with db_manager.session() as db:
            rows = await submission_store.list_submissions(db)
    return create_response(200, [row.to_json() for row in rows])


async def _get(settings: Settings, submission_id: str) -> dict:
    async with per_invocation(settings) as db_manager:
        async with db_manager.session() as db:
            row = await submission_store.get_submission(db, submission_id)
    return create_response(200, row.to_json())


async def _create(settings: Settings, event: dict) -> dict:
    payload = parse_body(event)
    async with per_invocation(settings) as db_manager:
        async with db_manager.session() as db:
            row = await submission_store.create_submission(db, payload)
    return create_response(201, row.to_json())


async def _delete(settings: Settings, submission_id: str) -> dict:
    async with per_invocation(settings) as db_manager:
        async with db_manager.session() as db:
            await submission_store.delete_submission(db, submission_id)
    return create_response(200, {"message": "Submission deleted successfully"})


# --- Dispatch -----------------------------------------------------------------


async def dispatch(event: dict, settings: Settings) -> dict:
    """Route one event to its branch and turn errors into responses."""
    method = _request_method(event)
    if method == "OPTIONS":
        return create_response(200, {"message": "CORS preflight"})

    path = _request_path(event, settings.api_gateway_base_path)
    submission_id = _submission_id(event, path)
    try:
        if method == "GET" and path == COLLECTION_PATH:
            return await _list(settings)
        if method == "GET" and submission_id:
            return await _get(settings, submission_id)
        if method == "POST" and path == COLLECTION_PATH:
            return await _create(settings, event)
        if method == "DELETE" and submission_id:
            return await _delete(settings, submission_id)
        raise RouteNotFoundError(method, path)
    except FormAppError as e:
        log = logger.error if e.http_status >= 500 else logger.info
        log(
            f"{method} {path} failed: {e.message}",
            extra={"error_code": e.code, "path": path, "method": method},
        )
        return create_response(e.http_status, e.to_response())


def handler(event: dict, context: Any = None) -> dict:
    """Gateway entry point."""
    global _logging_ready
    settings = get_settings()
    if not _logging_ready:
        setup_logging(settings.log_level, settings.log_format)
        _logging_ready = True
    logger.debug(f"Event: {json.dumps(event, default=str)}")
    try:
        return asyncio.run(dispatch(event, settings))
    except Exception as e:
        logger.error(f"Handler error: {e}", exc_info=True)
        return create_response(500, {
            "error": {
                "code": "INTERNAL_ERROR",
                "message": str(e) or "Internal server error",
                "category": "internal",
                "severity": ErrorSeverity.CRITICAL.value,
            },
        })
