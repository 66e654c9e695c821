"""Text normalization helpers used while reading package documents."""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def split_tokens(value: str | None) -> list[str]:
    """Split a whitespace-separated attribute value, dropping empty tokens."""

    if not value:
        return []
    return value.split()
