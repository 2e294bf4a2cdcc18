# core/response_parser.py
import re
from typing import Final, NamedTuple, Tuple
from core.entities import GenerationOutput, ParsedResponse


class ResponseLabels(NamedTuple):
    version: int
    category: str
    confidence: str
    reasoning: str


# Label literals the prompt templates ask the model to answer with.
# Bump `version` whenever a pattern changes.
LABELS: Final[ResponseLabels] = ResponseLabels(
    version=1,
    category=r"KATEGORI(?:[ \t]+\w+)?:",
    confidence=r"CONFIDENCE:",
    reasoning=r"ALASAN:",
)

UNKNOWN: Final[str] = "Unknown"
NO_REASONING: Final[str] = "No reasoning provided"
PARTIAL_SUFFIX: Final[str] = " (Partial)"
TRUNCATED_CONFIDENCE: Final[str] = "Low (Truncated)"

TRUNCATED_CATEGORY: Final[str] = "Response Truncated"
UNPARSEABLE_CATEGORY: Final[str] = "Analysis Error"
EMPTY_CATEGORY: Final[str] = "No Response"

TRUNCATED_REPLY: Final[str] = (
    f"KATEGORI HAZARD: {TRUNCATED_CATEGORY}\nCONFIDENCE: Low\n"
    "ALASAN: Analysis was incomplete due to token limits. Please try with a "
    "shorter hazard description or simpler context."
)
UNPARSEABLE_REPLY: Final[str] = (
    f"KATEGORI HAZARD: {UNPARSEABLE_CATEGORY}\nCONFIDENCE: {UNKNOWN}\n"
    "ALASAN: Unable to parse response from API. Please try again."
)
EMPTY_REPLY: Final[str] = (
    f"KATEGORI HAZARD: {EMPTY_CATEGORY}\nCONFIDENCE: {UNKNOWN}\n"
    "ALASAN: No response generated from API."
)

_SENTINEL_CATEGORIES = frozenset(
    {TRUNCATED_CATEGORY, UNPARSEABLE_CATEGORY, EMPTY_CATEGORY}
)

_CATEGORY_RE = re.compile(LABELS.category + r"[ \t]*(.+?)(?:\n|$)", re.IGNORECASE)
_CONFIDENCE_RE = re.compile(
    LABELS.confidence + r"[ \t]*(.+?)(?:\n|$)", re.IGNORECASE
)
_REASONING_RE = re.compile(LABELS.reasoning + r"\s*(.+?)$", re.IGNORECASE | re.DOTALL)


def normalize_reply(output: GenerationOutput) -> Tuple[str, bool]:
    """
    Turn a generation result into (text, partial).

    A truncated reply keeps whatever text arrived; a reply with no usable text
    is replaced by a labelled placeholder so parsing still yields fields.
    """
    text = output.text
    if output.truncated:
        return (text if text and text.strip() else TRUNCATED_REPLY), True
    if text is None:
        return UNPARSEABLE_REPLY, True
    if not text.strip():
        return EMPTY_REPLY, True
    return text, False


def _group(pattern: re.Pattern, text: str) -> str:
    m = pattern.search(text)
    return m.group(1).strip() if m else ""


def parse_response(text: str, partial: bool = False) -> ParsedResponse:
    """
    Best-effort extraction of KATEGORI / CONFIDENCE / ALASAN. Never raises;
    missing labels fall back to placeholders. With `partial`, the category is
    suffixed "(Partial)" and a missing confidence becomes "Low (Truncated)".
    """
    category = _group(_CATEGORY_RE, text) or UNKNOWN
    confidence = _group(_CONFIDENCE_RE, text) or UNKNOWN
    reasoning = _group(_REASONING_RE, text) or NO_REASONING

    if partial:
        if category not in _SENTINEL_CATEGORIES:
            category += PARTIAL_SUFFIX
        if confidence == UNKNOWN:
            confidence = TRUNCATED_CONFIDENCE

    return ParsedResponse(
        category=category, confidence=confidence, reasoning=reasoning, partial=partial
    )
