from typing import Optional, Tuple
from urllib.parse import urlparse


ALLOWED_SCHEMES = ("http", "https")


def normalize_url(url: str) -> Tuple[str, bool]:
    """Strip whitespace and default to https when no scheme is given."""
    url = url.strip()

    if "://" not in url:
        return f"https://{url}", True

    return url, False


def validate_url(url: Optional[str]) -> Tuple[bool, str, str]:
    """
    Returns:
        (is_valid, normalized_url, error_message)
    """
    if not url or not url.strip():
        return False, "", "URL cannot be empty"

    normalized_url, _ = normalize_url(url)

    try:
        parsed = urlparse(normalized_url)
    except ValueError as e:
        return False, normalized_url, f"URL parsing error: {str(e)}"

    if parsed.scheme not in ALLOWED_SCHEMES:
        return False, normalized_url, f"Invalid URL scheme: {parsed.scheme} (must be http or https)"

    if not parsed.hostname:
        return False, normalized_url, "Invalid URL format: missing domain"

    return True, normalized_url, ""
