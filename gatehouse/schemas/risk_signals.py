"""
Inbound payload from the upstream analysis component.

The analysis service computes the four factor sub-scores and detects
anomalies; this core never derives them itself. Factor scores are expected
in [0, 100] and anomaly confidences in [0, 1]. Values outside those ranges
are not rejected here: the scoring engine clamps them.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from gatehouse.schemas.enums import RiskLevel


class Anomaly(BaseModel):
    """A discrete irregularity, independent of the composite score."""
    type: str
    severity: RiskLevel
    description: str = ""
    confidence: float = Field(0.0, description="Detector confidence, 0-1")


class RiskFactors(BaseModel):
    frequency_score: float = Field(description="Visit frequency anomalies, 0-100")
    timing_score: float = Field(description="Unusual timing, 0-100")
    behavior_score: float = Field(description="Behavioral deviation, 0-100")
    historical_score: float = Field(description="Historical incident weight, 0-100")


class RiskSignals(RiskFactors):
    """Everything the producer supplies for one visitor assessment."""
    anomalies: list[Anomaly] = []
    confidence: Optional[float] = Field(
        None,
        description="Aggregate confidence 0-1; derived from the anomalies when absent",
    )
