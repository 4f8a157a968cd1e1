"""HTTP routes: POST /send, its CORS preflight, and a 404 fallback."""

import json
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from stillgrateful.logging import get_logger
from stillgrateful.pipeline.models import REASON_INVALID_JSON, REASON_UNEXPECTED, ErrorCode

logger = get_logger(__name__, component="api")

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

PREFLIGHT_HEADERS = {**CORS_HEADERS, "Access-Control-Max-Age": "86400"}

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

router = APIRouter()


def json_response(body: Dict[str, Any], status_code: int = 200) -> JSONResponse:
    """JSON response carrying the CORS headers."""
    return JSONResponse(content=body, status_code=status_code, headers=CORS_HEADERS)


def error_response(error: ErrorCode, reason: str, status_code: int) -> JSONResponse:
    return json_response(
        {"success": False, "error": error.value, "reason": reason}, status_code
    )


@router.post("/send")
async def send(request: Request) -> JSONResponse:
    """
    Accept one gratitude message for screening and delivery.

    Body: `{message, recipient_email, context_tag, sender_token}`.

    Returns:
    - 200 `{"success": true}`
    - 400 `validation_error` or `message_rejected`
    - 429 `rate_limited`
    - 500 `server_error`
    """
    try:
        payload = json.loads(await request.body())
    except (ValueError, RecursionError):
        # RecursionError: nesting deeper than the decoder can follow
        logger.info("Request body is not valid JSON", extra={"event": "send.invalid_json"})
        return error_response(ErrorCode.VALIDATION_ERROR, REASON_INVALID_JSON, 400)

    pipeline = request.app.state.pipeline
    try:
        result = await run_in_threadpool(pipeline.process, payload)
    except Exception as e:
        logger.error(
            f"Unhandled error in send pipeline: {type(e).__name__}",
            exc_info=True,
            extra={"event": "send.unhandled_error"},
        )
        return error_response(ErrorCode.SERVER_ERROR, REASON_UNEXPECTED, 500)

    return json_response(result.body(), result.http_status)


@router.options("/send")
async def send_preflight() -> Response:
    """CORS preflight for /send."""
    return Response(status_code=204, headers=PREFLIGHT_HEADERS)


@router.api_route("/{path:path}", methods=ALL_METHODS, include_in_schema=False)
async def not_found(path: str) -> PlainTextResponse:
    return PlainTextResponse("Not Found", status_code=404)
