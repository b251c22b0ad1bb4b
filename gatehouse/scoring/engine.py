"""
Visitor Risk Scoring Engine

Orchestrates:
  1. Clamp the four factor scores to [0, 100]
  2. Weighted composite score
  3. Risk level from staged thresholds
  4. Anomaly ranking + alert trigger
  5. Explanation payload

Pure computation: no I/O, no shared state. Safe to call from any number of
concurrent callers. Persisting the result is the service layer's job.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

import structlog

from gatehouse.schemas.enums import RiskLevel
from gatehouse.schemas.risk_decision import FactorContribution, RiskEvaluation
from gatehouse.schemas.risk_signals import Anomaly, RiskFactors, RiskSignals
from gatehouse.scoring.explanation import build_explanation

logger = structlog.get_logger()


# ═══════════════════════════════════════════════════════════════
# Factor weights (must sum to 1.0)
#   frequency and behavior are the strongest predictors
# ═══════════════════════════════════════════════════════════════
FACTOR_WEIGHTS: dict[str, float] = {
    "frequency": 0.30,
    "timing": 0.20,
    "behavior": 0.30,
    "historical": 0.20,
}
assert abs(sum(FACTOR_WEIGHTS.values()) - 1.0) < 1e-9, "Weights must sum to 1.0"

SCORE_MIN = 0.0
SCORE_MAX = 100.0


# ═══════════════════════════════════════════════════════════════
# Risk level thresholds (lower bound inclusive)
#   score >= 80  → CRITICAL
#   score >= 60  → HIGH
#   score >= 30  → MEDIUM
#   score <  30  → LOW
# ═══════════════════════════════════════════════════════════════
LEVEL_THRESHOLDS = [
    (80.0, RiskLevel.CRITICAL),
    (60.0, RiskLevel.HIGH),
    (30.0, RiskLevel.MEDIUM),
]

ALERT_LEVELS = frozenset({RiskLevel.HIGH, RiskLevel.CRITICAL})

# Visitors at or above this composite are flagged
FLAG_THRESHOLD = 60.0

HIGH_CONFIDENCE_THRESHOLD = 0.8

DEFAULT_TOP_ANOMALIES = 3


def clamp(value: float, low: float = SCORE_MIN, high: float = SCORE_MAX) -> float:
    """NaN → low; everything else pinned into [low, high]."""
    if value is None or math.isnan(value):
        return low
    return min(max(float(value), low), high)


def _factor_values(factors: RiskFactors) -> dict[str, float]:
    return {
        "frequency": clamp(factors.frequency_score),
        "timing": clamp(factors.timing_score),
        "behavior": clamp(factors.behavior_score),
        "historical": clamp(factors.historical_score),
    }


def calculate_risk_score(factors: RiskFactors) -> float:
    values = _factor_values(factors)
    return sum(values[name] * weight for name, weight in FACTOR_WEIGHTS.items())


def classify_risk_level(score: float) -> RiskLevel:
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.LOW


def level_bounds(level: RiskLevel) -> tuple[float, Optional[float]]:
    """[lower, upper) composite range that classifies as `level`; upper None = open."""
    lower, upper = SCORE_MIN, None
    for threshold, candidate in LEVEL_THRESHOLDS:
        if candidate == level:
            lower = threshold
            break
        upper = threshold
    return lower, upper


def is_flagged(score: float) -> bool:
    return score >= FLAG_THRESHOLD


def has_high_risk_anomalies(anomalies: Sequence[Anomaly]) -> bool:
    return any(a.severity in ALERT_LEVELS for a in anomalies)


def should_trigger_alert(level: RiskLevel, anomalies: Sequence[Anomaly]) -> bool:
    """A low composite still alerts when a single anomaly is HIGH or CRITICAL."""
    return level in ALERT_LEVELS or has_high_risk_anomalies(anomalies)


def is_high_confidence(confidence: float) -> bool:
    return confidence >= HIGH_CONFIDENCE_THRESHOLD


def top_anomalies(anomalies: Sequence[Anomaly], limit: int = DEFAULT_TOP_ANOMALIES) -> list[Anomaly]:
    """Highest confidence first; ties keep their original order. Input is not mutated."""
    ranked = sorted(anomalies, key=lambda a: a.confidence, reverse=True)
    return ranked[:max(limit, 0)]


def aggregate_confidence(anomalies: Sequence[Anomaly], supplied: Optional[float] = None) -> float:
    if supplied is not None:
        return clamp(supplied, 0.0, 1.0)
    if not anomalies:
        return 0.0
    return round(sum(clamp(a.confidence, 0.0, 1.0) for a in anomalies) / len(anomalies), 6)


def evaluate(signals: RiskSignals, top_limit: int = DEFAULT_TOP_ANOMALIES) -> RiskEvaluation:
    """
    Main scoring entry point.
    """
    values = _factor_values(signals)
    risk_score = calculate_risk_score(signals)
    risk_level = classify_risk_level(risk_score)

    contributions = [
        FactorContribution(
            factor_name=name,
            raw_score=values[name],
            weight=weight,
            weighted_score=round(values[name] * weight, 6),
        )
        for name, weight in FACTOR_WEIGHTS.items()
    ]

    anomalies = list(signals.anomalies)
    ranked = top_anomalies(anomalies, top_limit)
    confidence = aggregate_confidence(anomalies, signals.confidence)
    alert = should_trigger_alert(risk_level, anomalies)

    explanation = build_explanation(
        factor_scores=values,
        risk_level=risk_level,
        top=ranked,
        high_risk_anomalies=has_high_risk_anomalies(anomalies),
        confidence=confidence,
    )

    logger.debug(
        "risk_evaluation_complete",
        score=risk_score,
        level=risk_level.value,
        anomalies=len(anomalies),
        alert=alert,
    )

    return RiskEvaluation(
        risk_score=risk_score,
        risk_level=risk_level,
        frequency_score=values["frequency"],
        timing_score=values["timing"],
        behavior_score=values["behavior"],
        historical_score=values["historical"],
        contributions=contributions,
        anomalies=anomalies,
        top_anomalies=ranked,
        explanation=explanation,
        confidence=confidence,
        should_trigger_alert=alert,
        high_confidence=is_high_confidence(confidence),
    )
