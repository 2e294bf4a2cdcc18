# core/fallback.py
from dataclasses import dataclass
from typing import Final, Tuple
from util.enums import RiskLevel

HIGH_RISK_KEYWORDS: Final[Tuple[str, ...]] = (
    "kebakaran", "ledakan", "listrik", "ketinggian", "chemical", "kimia",
    "confined space", "ruang terbatas", "crane", "forklift", "hot work",
    "gas", "toxic", "toksik", "fall", "jatuh", "elektrik",
)
MEDIUM_RISK_KEYWORDS: Final[Tuple[str, ...]] = (
    "slip", "trip", "tergelincir", "terpeleset", "machinery", "mesin",
    "noise", "bising", "ergonomic", "ergonomi", "pressure", "tekanan",
)

DUE_DAYS = {RiskLevel.HIGH: 3, RiskLevel.MEDIUM: 7, RiskLevel.LOW: 14}

FALLBACK_CATEGORY: Final[str] = "Kondisi Tidak Aman (Fallback)"
FALLBACK_CONFIDENCE: Final[str] = "Low"


@dataclass(frozen=True)
class FallbackAnalysis:
    category: str
    confidence: str
    reasoning: str
    risk_level: RiskLevel
    due_date_days: int


def assess_risk_level(*texts: str) -> RiskLevel:
    """Substring keyword match, HIGH before MEDIUM; LOW otherwise."""
    haystack = " ".join(t for t in texts if t).lower()
    if any(k in haystack for k in HIGH_RISK_KEYWORDS):
        return RiskLevel.HIGH
    if any(k in haystack for k in MEDIUM_RISK_KEYWORDS):
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def fallback_analysis(hazard_description: str, cause: str) -> FallbackAnalysis:
    level = assess_risk_level(hazard_description)
    return FallbackAnalysis(
        category=FALLBACK_CATEGORY,
        confidence=FALLBACK_CONFIDENCE,
        reasoning=(
            f"AI analysis unavailable ({cause}). Keyword screening rates this "
            f"hazard {level.value}; follow up within {DUE_DAYS[level]} days."
        ),
        risk_level=level,
        due_date_days=DUE_DAYS[level],
    )
