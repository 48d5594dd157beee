"""
Hashtag headers for free-text notes.

A note may start with a line made only of ``#tags``; that line is stored as
part of the text and split back out when reading.
"""

import re
from collections.abc import Iterable

from markerboard.domain.models import TaggedText

_TAG = re.compile(r"#([\w-]+)")


def slugify_tag(tag: str) -> str:
    """Lower-case, spaces to dashes, drop everything but letters, digits, ``_`` and ``-``."""
    slug = re.sub(r"\s+", "-", tag.strip().lower())
    return re.sub(r"[^\w-]+", "", slug)


def build_tagged_text(tags: Iterable[str], body: str) -> str:
    clean_tags = [t for t in dict.fromkeys(slugify_tag(t) for t in tags) if t]
    header = " ".join(f"#{t}" for t in clean_tags)
    text = f"{header}\n{body.strip()}" if header else body.strip()
    return text.strip()


def parse_tagged_text(text: str | None) -> TaggedText:
    raw = (text or "").strip()
    if not raw:
        return TaggedText()

    lines = raw.split("\n")
    first = lines[0].strip()

    tags = tuple(t for t in dict.fromkeys(m.lower() for m in _TAG.findall(first)) if t)
    header_only = _TAG.sub("", first).strip() == ""

    body = "\n".join(lines[1:]).strip() if header_only else raw
    return TaggedText(tags=tags, body=body)
