"""
Visitor risk assessment: evaluate, then persist the outcome.

Flow:
  1. Evaluate signals with the pure scoring engine
  2. In ONE transaction:
       a. insert the risk_assessments row
       b. update visitors.risk_score / flagged in a single statement
       c. append the audit row for the visitor change
  3. Return the decision the notification / UI layers act on

If any step fails the transaction is rolled back: no assessment row
without its projection, no projection without its audit row.
"""
from __future__ import annotations

from typing import Optional

import structlog

from gatehouse.core.errors import EntityNotFoundError
from gatehouse.db.store import RecordStore
from gatehouse.models.risk_assessment import RiskAssessment
from gatehouse.repositories.risk_assessments import RiskAssessmentRepository
from gatehouse.repositories.visitors import VisitorRepository
from gatehouse.schemas.enums import AuditAction, EntityType
from gatehouse.schemas.risk_decision import RiskDecision
from gatehouse.schemas.risk_signals import RiskSignals
from gatehouse.scoring.engine import evaluate, is_flagged
from gatehouse.services.audit import AuditContext, record_audit

logger = structlog.get_logger()


async def assess_visitor(
    store: RecordStore,
    visitor_id: str,
    signals: RiskSignals,
    performed_by: str = "system",
    context: Optional[AuditContext] = None,
) -> RiskDecision:
    evaluation = evaluate(signals)
    flagged = is_flagged(evaluation.risk_score)

    visitors = VisitorRepository(store)
    assessments = RiskAssessmentRepository(store)

    async with store.transaction():
        visitor = await visitors.get(visitor_id)
        if visitor is None:
            raise EntityNotFoundError(EntityType.VISITOR.value, visitor_id)

        assessment = RiskAssessment.from_evaluation(visitor_id, evaluation)
        await assessments.insert(assessment)
        await visitors.update_risk_score(visitor_id, evaluation.risk_score)
        await record_audit(
            store,
            EntityType.VISITOR,
            visitor_id,
            AuditAction.UPDATE,
            performed_by,
            old_values={"risk_score": visitor.risk_score, "flagged": visitor.flagged},
            new_values={
                "risk_score": evaluation.risk_score,
                "flagged": flagged,
                "risk_level": evaluation.risk_level.value,
                "assessment_id": assessment.id,
            },
            context=context,
        )

    logger.info(
        "risk_assessment_recorded",
        visitor_id=visitor_id,
        assessment_id=assessment.id,
        score=evaluation.risk_score,
        level=evaluation.risk_level.value,
        alert=evaluation.should_trigger_alert,
    )

    return RiskDecision(
        assessment_id=assessment.id,
        visitor_id=visitor_id,
        risk_score=evaluation.risk_score,
        risk_level=evaluation.risk_level,
        should_trigger_alert=evaluation.should_trigger_alert,
        high_confidence=evaluation.high_confidence,
        flagged=flagged,
        explanation=evaluation.explanation,
        top_anomalies=evaluation.top_anomalies,
    )
