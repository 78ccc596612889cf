"""
Shared utility functions for pagerunner.

- URL validation
- Link filtering for gathered anchors
"""

from pagerunner.utils.url_utils import validate_url, extract_domain
from pagerunner.utils.links import filter_links, absolutize, is_navigable

__all__ = [
    # URL utilities
    "validate_url",
    "extract_domain",
    # Link utilities
    "filter_links",
    "absolutize",
    "is_navigable",
]
