from typing import Any, Dict, Optional

from fastapi import status
from fastapi.responses import JSONResponse

from app.platform.config import settings


def cors_headers() -> Dict[str, str]:
    """
    CORS headers sent on every response when all origins are allowed.

    CORSMiddleware only decorates requests carrying an Origin header and
    never sees errors rendered by ServerErrorMiddleware, so the wildcard
    policy is attached to the responses themselves.
    """
    if "*" not in settings.CORS_ORIGINS:
        return {}
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET",
        "Access-Control-Allow-Headers": "Content-Type",
    }


def json_response(
    *,
    content: Any,
    status_code: int = status.HTTP_200_OK,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers={**cors_headers(), **(headers or {})})


def error_response(
    *,
    message: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Single source of truth for ALL error responses.
    Body is always {"error": message} served as application/json.
    """
    return json_response(content={"error": message}, status_code=status_code, headers=headers)
