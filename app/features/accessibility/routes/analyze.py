from typing import Optional

import anyio
from fastapi import APIRouter, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder

from app.features.accessibility.exceptions import ResponseEncodingError
from app.features.accessibility.schemas.scan import ScanResponse
from app.features.accessibility.services.scanner import AccessibilityScanner
from app.platform.config import settings
from app.platform.logger import get_logger
from app.platform.response import json_response
from app.platform.utils.url_validator import validate_url

logger = get_logger(__name__)

router = APIRouter(tags=["Accessibility"])

scanner = AccessibilityScanner()

# Each scan owns a whole Chrome process; cap how many run at once.
_session_limiter: Optional[anyio.CapacityLimiter] = None


def get_session_limiter() -> anyio.CapacityLimiter:
    global _session_limiter
    if _session_limiter is None:
        _session_limiter = anyio.CapacityLimiter(settings.MAX_CONCURRENT_SESSIONS)
    return _session_limiter


@router.get(
    "/analyze",
    response_model=ScanResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"description": "Missing or invalid url"}, 500: {"description": "Scan failed"}},
)
async def analyze(url: Optional[str] = Query(default=None, description="Page to scan")):
    """
    Load ``url`` in a headless browser, run axe-core on it and return the
    violations found.
    """
    if url is None or not url.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required query parameter: url",
        )

    is_valid, target_url, error = validate_url(url)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)

    result = await anyio.to_thread.run_sync(scanner.scan, target_url, limiter=get_session_limiter())

    # Rendering the body is the step that can fail (e.g. unencodable text)
    try:
        return json_response(content=jsonable_encoder(result, by_alias=True))
    except (TypeError, ValueError) as e:
        logger.error(f"Failed to encode response for {target_url}: {e}")
        raise ResponseEncodingError(str(e), url=target_url) from e
