"""
Visitor entry.

risk_score / flagged are a cached projection of the latest risk assessment.
flagged is derived: it always equals risk_score >= 60, both when a model is
built and after update_risk_score().
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from gatehouse.core.errors import InvalidTransitionError
from gatehouse.db.serialization import utcnow
from gatehouse.models.base import Entity
from gatehouse.schemas.enums import ApprovalStatus, SyncStatus
from gatehouse.scoring.engine import is_flagged


class Visitor(Entity):
    TABLE = "visitors"
    DATETIME_FIELDS = ("entry_time", "exit_time", "approval_time", "created_at", "updated_at")
    BOOL_FIELDS = ("flagged",)

    name: str
    phone_number: str
    purpose: str
    intended_resident: str
    vehicle_number: Optional[str] = None

    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None

    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    approved_by: Optional[str] = None
    approval_time: Optional[datetime] = None
    denial_reason: Optional[str] = None

    risk_score: float = Field(0.0, ge=0.0, le=100.0)
    flagged: bool = False
    sync_status: SyncStatus = SyncStatus.LOCAL

    @model_validator(mode="after")
    def _derive_flag(self) -> "Visitor":
        self.flagged = is_flagged(self.risk_score)
        return self

    # ── Approval cycle ──

    def _require_pending(self, action: str) -> None:
        if self.approval_status != ApprovalStatus.PENDING:
            raise InvalidTransitionError(
                f"Cannot {action} visitor {self.id}: already {self.approval_status.value}"
            )

    def approve(self, approved_by: str) -> None:
        self._require_pending("approve")
        self.approval_status = ApprovalStatus.APPROVED
        self.approved_by = approved_by
        self.approval_time = utcnow()
        self.touch()

    def deny(self, reason: str) -> None:
        self._require_pending("deny")
        self.approval_status = ApprovalStatus.DENIED
        self.denial_reason = reason
        self.approval_time = utcnow()
        self.touch()

    def reset_approval(self) -> None:
        """Start a new decision cycle, e.g. when the visitor returns."""
        self.approval_status = ApprovalStatus.PENDING
        self.approved_by = None
        self.approval_time = None
        self.denial_reason = None
        self.touch()

    # ── Gate events (independent of approval) ──

    def mark_entry(self, at: Optional[datetime] = None) -> None:
        self.entry_time = at or utcnow()
        self.touch()

    def mark_exit(self, at: Optional[datetime] = None) -> None:
        self.exit_time = at or utcnow()
        self.touch()

    # ── Risk projection ──

    def update_risk_score(self, score: float) -> None:
        self.risk_score = score
        self.flagged = is_flagged(score)
        self.touch()
