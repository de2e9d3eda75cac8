from __future__ import annotations

import re

from timeline.errors import DescriptionFormatError
from timeline.patterns import BLOCK_RE, SINGLE_BLOCK_RE, TAG_RE

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n|\\r\\n")
_INVISIBLE = ("\ufeff", "\u200b")


def _clean_text(body: str) -> str:
    """Drop markup, &nbsp; entities, line breaks and zero-width characters."""
    text = TAG_RE.sub("", body).replace("&nbsp;", "")
    text = _LINE_BREAK_RE.sub("", text)
    for ch in _INVISIBLE:
        text = text.replace(ch, "")
    return text.strip()


def _pair(match: re.Match[str], description: str) -> tuple[str, str]:
    label, body = match.group(1), match.group(2)
    label = TAG_RE.sub("", label).strip()
    if not label:
        raise DescriptionFormatError(
            "The description was not in the expected format, an update has no "
            f"timestamp label:\n{description}"
        )
    return label, _clean_text(body)


def split_updates(description: str | None) -> list[tuple[str, str]]:
    """Split a description into ``(label, text)`` pairs in source order.

    Each ``<div>`` block holds a ``<span>`` label (the update's timestamp,
    e.g. ``3:13 PM PDT``) followed by the update text. A description with
    no ``<div>`` blocks is read as a single span-led update.

    Raises:
        DescriptionFormatError: the description is not empty but holds no
            span-labelled update, or an update has an empty label.
    """
    if not description or not description.strip():
        return []

    blocks = list(BLOCK_RE.finditer(description))
    if blocks:
        return [_pair(m, description) for m in blocks]

    m = SINGLE_BLOCK_RE.search(description)
    if m:
        return [_pair(m, description)]

    raise DescriptionFormatError(
        f"The description was not in the expected format, no update label found:\n{description}"
    )
