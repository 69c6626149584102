"""Tag serialization for the single text column that stores them."""

from __future__ import annotations

import json
from typing import Iterable, List, Optional

EMPTY_TAGS = "[]"

__all__ = ["EMPTY_TAGS", "decode_tags", "encode_tags", "parse_tag_input"]


def encode_tags(tags: Optional[Iterable[str]]) -> str:
    """Serialize tags as a JSON array; missing tags encode to ``[]``, never NULL."""

    if tags is None:
        return EMPTY_TAGS
    return json.dumps(list(tags), ensure_ascii=False)


def decode_tags(encoded: Optional[str]) -> List[str]:
    if not encoded:
        return []
    decoded = json.loads(encoded)
    if not isinstance(decoded, list):
        raise ValueError(f"tag column must hold a JSON array, got {type(decoded).__name__}")
    return [str(tag) for tag in decoded]


def parse_tag_input(raw: Optional[str]) -> List[str]:
    """Split comma-separated form input, e.g. ``"study, family"``."""

    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]
