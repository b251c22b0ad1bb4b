"""
Outbound payloads.

RiskEvaluation is the engine's pure output. RiskDecision is what the
notification and UI layers read after the assessment has been persisted,
so they never need to recompute anything.
"""
from __future__ import annotations

from pydantic import BaseModel, Field

from gatehouse.schemas.enums import RiskLevel
from gatehouse.schemas.risk_signals import Anomaly


class Explanation(BaseModel):
    primary_reasons: list[str] = []
    recommendations: list[str] = []
    confidence: float = 0.0


class FactorContribution(BaseModel):
    """Individual factor contribution to the composite score."""
    factor_name: str
    raw_score: float
    weight: float
    weighted_score: float


class RiskEvaluation(BaseModel):
    risk_score: float = Field(description="Composite score, 0-100")
    risk_level: RiskLevel
    frequency_score: float
    timing_score: float
    behavior_score: float
    historical_score: float
    contributions: list[FactorContribution]
    anomalies: list[Anomaly]
    top_anomalies: list[Anomaly]
    explanation: Explanation
    confidence: float
    should_trigger_alert: bool
    high_confidence: bool


class RiskDecision(BaseModel):
    assessment_id: str
    visitor_id: str
    risk_score: float
    risk_level: RiskLevel
    should_trigger_alert: bool
    high_confidence: bool
    flagged: bool = Field(description="Visitor flag after the update (risk_score >= 60)")
    explanation: Explanation
    top_anomalies: list[Anomaly]
