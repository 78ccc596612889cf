"""
Link filtering for gathered anchors.

Works on raw href attribute values as they appear in the document, so the
output mirrors what the page author wrote (relative paths stay relative).
"""

from typing import Iterable, List
from urllib.parse import urljoin


# Schemes that never point at another page
SKIPPED_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")


def is_navigable(href: str) -> bool:
    """
    Return True if href points at another document.

    Examples:
        >>> is_navigable("/a")
        True
        >>> is_navigable("#x")
        False
        >>> is_navigable("MAILTO:y@z")
        False
    """
    if not href:
        return False
    if href.startswith("#"):
        return False
    return not href.lower().startswith(SKIPPED_SCHEMES)


def filter_links(hrefs: Iterable[str]) -> List[str]:
    """
    Keep navigable links, dropping duplicates while preserving first-seen order.

    Args:
        hrefs: Raw href values in document order

    Returns:
        Filtered list of hrefs

    Example:
        >>> filter_links(["/a", "#x", "mailto:y@z", "/a"])
        ['/a']
    """
    out: List[str] = []
    seen = set()
    for raw in hrefs:
        href = (raw or "").strip()
        if not is_navigable(href) or href in seen:
            continue
        seen.add(href)
        out.append(href)
    return out


def absolutize(base_url: str, hrefs: Iterable[str]) -> List[str]:
    """
    Resolve hrefs against the page URL, deduplicating the resolved form.

    Example:
        >>> absolutize("https://example.com/docs/", ["a", "/b", "a"])
        ['https://example.com/docs/a', 'https://example.com/b']
    """
    out: List[str] = []
    seen = set()
    for href in hrefs:
        resolved = urljoin(base_url, href)
        if resolved in seen:
            continue
        seen.add(resolved)
        out.append(resolved)
    return out
