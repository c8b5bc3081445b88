import json
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from app.features.accessibility.exceptions import ResultParseError
from app.features.accessibility.schemas.scan import ScanResponse, Violation
from app.platform.logger import get_logger

logger = get_logger(__name__)

_violations_adapter = TypeAdapter(List[Violation])


def parse_violations(raw: Optional[str], url: str = "") -> List[Violation]:
    """Decode the engine's serialized violation array."""
    payload = raw if raw else "[]"

    # json.loads tolerates escaped lone surrogates that pydantic's parser rejects
    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse results for {url}: {e}")
        logger.error(f"Raw JSON: {payload}")
        raise ResultParseError(f"Invalid JSON: {e}", raw=payload, url=url) from e

    try:
        violations = _violations_adapter.validate_python(decoded)
    except ValidationError as e:
        logger.error(f"Failed to parse results for {url}: {e.error_count()} error(s)")
        logger.error(f"Raw JSON: {payload}")
        raise ResultParseError(_describe(e), raw=payload, url=url) from e

    logger.info(f"Successfully parsed {len(violations)} violations for {url}")
    return violations


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def build_scan_response(url: str, violations: List[Violation]) -> ScanResponse:
    """Wrap parsed violations with the requested URL and completion time."""
    timestamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
    return ScanResponse(url=url, timestamp=timestamp, violations=violations)
