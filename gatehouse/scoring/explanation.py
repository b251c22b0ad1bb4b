"""
Explanation payload for a visitor risk assessment.

Primary reasons:
  1. Every factor scoring at or above REASON_THRESHOLD, strongest first
  2. The descriptions of the top-ranked anomalies

Recommendations are keyed by risk level; one more is added whenever a HIGH
or CRITICAL anomaly is present, whatever the composite says.
"""
from __future__ import annotations

from typing import Sequence

from gatehouse.schemas.enums import RiskLevel
from gatehouse.schemas.risk_decision import Explanation
from gatehouse.schemas.risk_signals import Anomaly

REASON_THRESHOLD = 60.0

FACTOR_REASONS: dict[str, str] = {
    "frequency": "Unusual visit frequency",
    "timing": "Visit at an unusual time",
    "behavior": "Behavior deviates from the visitor's usual pattern",
    "historical": "Prior incidents on record",
}

LEVEL_RECOMMENDATIONS: dict[RiskLevel, list[str]] = {
    RiskLevel.LOW: [
        "Standard entry procedure",
    ],
    RiskLevel.MEDIUM: [
        "Verify visitor identity at the gate",
        "Confirm the visit with the resident",
    ],
    RiskLevel.HIGH: [
        "Require resident confirmation before entry",
        "Record vehicle and ID details",
        "Notify the security supervisor",
    ],
    RiskLevel.CRITICAL: [
        "Deny entry pending security review",
        "Escalate to the security supervisor immediately",
    ],
}

ANOMALY_RECOMMENDATION = "Review the flagged anomalies before granting access"


def build_explanation(
    factor_scores: dict[str, float],
    risk_level: RiskLevel,
    top: Sequence[Anomaly],
    high_risk_anomalies: bool,
    confidence: float,
) -> Explanation:
    elevated = sorted(
        ((name, score) for name, score in factor_scores.items() if score >= REASON_THRESHOLD),
        key=lambda item: item[1],
        reverse=True,
    )
    reasons = [f"{FACTOR_REASONS[name]} (score {score:.0f})" for name, score in elevated]
    reasons.extend(a.description or a.type for a in top)

    recommendations = list(LEVEL_RECOMMENDATIONS[risk_level])
    if high_risk_anomalies:
        recommendations.append(ANOMALY_RECOMMENDATION)

    return Explanation(
        primary_reasons=reasons,
        recommendations=recommendations,
        confidence=confidence,
    )
