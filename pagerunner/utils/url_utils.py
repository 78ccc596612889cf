"""
URL utility functions for pagerunner.

This module provides URL validation and manipulation utilities.
"""

from typing import Optional
from urllib.parse import urlparse


def validate_url(url: str) -> bool:
    """
    Check if a URL is valid and complete.

    Args:
        url: URL to validate

    Returns:
        True if URL is an absolute http(s) URL with a host, False otherwise

    Examples:
        >>> validate_url("https://example.com")
        True

        >>> validate_url("/a/b")
        False

        >>> validate_url("example dot com")
        False
    """
    if not url or not isinstance(url, str):
        return False

    url = url.strip()

    if not url.startswith(('http://', 'https://')):
        return False

    if any(ch.isspace() for ch in url):
        return False

    try:
        result = urlparse(url)
        return bool(result.scheme and result.hostname)
    except ValueError:
        return False


def extract_domain(url: str) -> Optional[str]:
    """
    Extract domain from a URL.

    Examples:
        >>> extract_domain("https://example.com:8080/path")
        'example.com:8080'

        >>> extract_domain("invalid")
        None
    """
    if not url or not isinstance(url, str):
        return None

    try:
        result = urlparse(url)
        return result.netloc.lower() if result.netloc else None
    except ValueError:
        return None
