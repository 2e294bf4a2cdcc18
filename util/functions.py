# util/functions.py
from datetime import datetime, timezone


def preview(text: str, max_chars: int = 100) -> str:
    # Same shape the UI expects in thinking steps: first N chars + "..."
    return text[:max_chars] + "..."


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
