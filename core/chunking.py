# core/chunking.py
import re
from typing import List

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

MIN_CHUNK_CHARS = 50


def split_into_chunks(text: str, min_chars: int = MIN_CHUNK_CHARS) -> List[str]:
    """
    Split knowledge-base text on blank-line boundaries.

    Pieces are trimmed; anything not longer than `min_chars` is dropped.
    Document order is preserved.
    """
    if not text:
        return []
    pieces = (p.strip() for p in _PARAGRAPH_BREAK.split(text))
    return [p for p in pieces if len(p) > min_chars]
