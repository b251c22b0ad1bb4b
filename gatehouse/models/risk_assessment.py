"""
Persisted risk assessment. One immutable row per evaluation.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import ConfigDict, Field

from gatehouse.db.serialization import utcnow
from gatehouse.models.base import Entity
from gatehouse.schemas.enums import RiskLevel
from gatehouse.schemas.risk_decision import Explanation, RiskEvaluation
from gatehouse.schemas.risk_signals import Anomaly
from gatehouse.scoring import engine


class RiskAssessment(Entity):
    model_config = ConfigDict(frozen=True)

    TABLE = "risk_assessments"
    JSON_ARRAY_FIELDS = ("anomalies",)
    JSON_OBJECT_FIELDS = ("explanation",)
    DATETIME_FIELDS = ("assessment_time", "created_at", "updated_at")

    visitor_id: str
    assessment_time: datetime = Field(default_factory=utcnow)
    risk_score: float
    risk_level: RiskLevel
    frequency_score: float = 0.0
    timing_score: float = 0.0
    behavior_score: float = 0.0
    historical_score: float = 0.0
    anomalies: list[Anomaly] = []
    explanation: Explanation = Explanation()
    confidence: float = 0.0

    @classmethod
    def from_evaluation(cls, visitor_id: str, evaluation: RiskEvaluation) -> "RiskAssessment":
        return cls(
            visitor_id=visitor_id,
            risk_score=evaluation.risk_score,
            risk_level=evaluation.risk_level,
            frequency_score=evaluation.frequency_score,
            timing_score=evaluation.timing_score,
            behavior_score=evaluation.behavior_score,
            historical_score=evaluation.historical_score,
            anomalies=evaluation.anomalies,
            explanation=evaluation.explanation,
            confidence=evaluation.confidence,
        )

    def has_high_risk_anomalies(self) -> bool:
        return engine.has_high_risk_anomalies(self.anomalies)

    def get_top_anomalies(self, limit: int = engine.DEFAULT_TOP_ANOMALIES) -> list[Anomaly]:
        return engine.top_anomalies(self.anomalies, limit)

    def is_high_confidence(self) -> bool:
        return engine.is_high_confidence(self.confidence)

    def should_trigger_alert(self) -> bool:
        return engine.should_trigger_alert(self.risk_level, self.anomalies)
