"""Pytest configuration and fixtures for gatehouse tests."""

from __future__ import annotations

import pytest
import pytest_asyncio

from gatehouse.db.store import RecordStore
from gatehouse.models.visitor import Visitor
from gatehouse.schemas.enums import RiskLevel
from gatehouse.schemas.risk_signals import Anomaly, RiskSignals


@pytest_asyncio.fixture()
async def store() -> RecordStore:
    """Fully migrated in-memory store."""
    s = RecordStore(":memory:")
    await s.initialize()
    try:
        yield s
    finally:
        await s.close()


@pytest.fixture
def visitor() -> Visitor:
    return Visitor(
        name="Anita Sharma",
        phone_number="+919811111111",
        purpose="Family visit",
        intended_resident="A-101",
    )


@pytest.fixture
def high_risk_signals() -> RiskSignals:
    """Composite 69 → HIGH."""
    return RiskSignals(
        frequency_score=80,
        timing_score=40,
        behavior_score=90,
        historical_score=50,
        anomalies=[
            Anomaly(type="late_night", severity=RiskLevel.MEDIUM,
                    description="Visit after 23:00", confidence=0.7),
            Anomaly(type="repeat_denial", severity=RiskLevel.HIGH,
                    description="Denied twice this week", confidence=0.9),
        ],
    )
