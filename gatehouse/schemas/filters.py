"""
Query filters accepted by the visitor and staff repositories.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from gatehouse.schemas.enums import ApprovalStatus, RiskLevel, ServiceType


class Page(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(50, ge=1, le=500)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class VisitorFilters(Page):
    name: Optional[str] = None                  # substring, case-insensitive
    phone_number: Optional[str] = None
    intended_resident: Optional[str] = None
    approval_status: Optional[ApprovalStatus] = None
    date_from: Optional[datetime] = None        # created_at >= date_from
    date_to: Optional[datetime] = None          # created_at <= date_to
    risk_level: Optional[RiskLevel] = None      # band of the cached risk_score
    flagged: Optional[bool] = None


class StaffFilters(Page):
    name: Optional[str] = None
    service_type: Optional[ServiceType] = None
    active: Optional[bool] = None
    authorized_unit: Optional[str] = None       # staff with "ALL" always match
