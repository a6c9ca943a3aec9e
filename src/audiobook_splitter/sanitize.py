"""Filename sanitization for book output names.

Rules, applied in order:
    1. spaces become hyphens
    2. everything except ASCII letters, digits and hyphens is dropped
    3. runs of hyphens collapse to one
    4. leading/trailing hyphens are trimmed
"""

import re

from loguru import logger

log = logger.bind(stage="sanitize")

_UNSAFE_RE = re.compile(r"[^A-Za-z0-9-]+")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")
# "3: Threats" -> "Threats"
_CHAPTER_PREFIX_RE = re.compile(r"^[0-9]+:[ \t]*")


def sanitize_stem(text: str) -> str:
    """Map arbitrary text to a safe filename stem. May return an empty string."""
    sanitized = text.replace(" ", "-")
    sanitized = _UNSAFE_RE.sub("", sanitized)
    sanitized = _HYPHEN_RUN_RE.sub("-", sanitized)
    sanitized = sanitized.strip("-")
    if not sanitized:
        log.debug(f"Sanitized stem of {text!r} is empty")
    return sanitized


def strip_chapter_prefix(title: str) -> str:
    """Remove a leading "<number>:" chapter prefix from a title."""
    return _CHAPTER_PREFIX_RE.sub("", title)
