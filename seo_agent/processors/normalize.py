from __future__ import annotations

import re
import unicodedata

_whitespace_re = re.compile(r"\s+")
_control_chars_re = re.compile(r"[\u0000-\u0008\u000B\u000C\u000E-\u001F\u007F]")
# Anything that is not a lowercase ASCII letter, digit or CJK ideograph
_slug_separator_re = re.compile(r"[^\u4e00-\u9fa5a-z0-9]+")

SLUG_MAX_LENGTH = 100


def collapse_whitespace(text: str | None) -> str:
    if not text:
        return ""
    return _whitespace_re.sub(" ", text).strip()


def strip_all_whitespace(text: str | None) -> str:
    return _whitespace_re.sub("", text or "")


def normalize_plain_text(text: str | None) -> str:
    """Normalize scraped text for matching.

    - Strip BOM
    - Unicode normalize (NFKC), which also folds full-width Latin to ASCII
    - Remove control characters
    - Collapse whitespace
    """
    if not text:
        return ""
    if text.startswith("\ufeff"):
        text = text.lstrip("\ufeff")
    text = unicodedata.normalize("NFKC", text)
    text = _control_chars_re.sub(" ", text)
    return collapse_whitespace(text)


def slugify(title: str, *, max_length: int | None = None) -> str:
    """Lowercase, hyphenate every run of non-alphanumeric/non-CJK characters, trim hyphens."""
    slug = _slug_separator_re.sub("-", (title or "").lower()).strip("-")
    if max_length is not None:
        slug = slug[:max_length].rstrip("-")
    return slug
