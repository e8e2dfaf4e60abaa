from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.discipline import (
    CategorySeverity,
    DeliveryMethod,
    ReviewOutcome,
    WarningLevel,
    WarningStatus,
)


# ---------------------------------------------------------------------------
# Organization
# ---------------------------------------------------------------------------


class OrganizationBase(BaseModel):
    name: str
    timezone_name: str = "Africa/Johannesburg"
    is_active: bool = True


class OrganizationCreate(OrganizationBase):
    pass


class OrganizationRead(OrganizationBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# Employee
# ---------------------------------------------------------------------------


class EmployeeBase(BaseModel):
    organization_id: UUID
    employee_number: str
    first_name: str
    last_name: str
    department: str | None = None
    position: str | None = None
    email: str | None = None
    is_active: bool = True


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    employee_number: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    department: str | None = None
    position: str | None = None
    email: str | None = None
    is_active: bool | None = None


class EmployeeRead(EmployeeBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_at: datetime
    updated_at: datetime


# ---------------------------------------------------------------------------
# WarningCategory
# ---------------------------------------------------------------------------


class WarningCategoryBase(BaseModel):
    organization_id: UUID
    code: str
    name: str
    description: str | None = None
    severity: str = "minor"
    escalation_path: list[str] = Field(default_factory=list)
    required_documents: list[str] = Field(default_factory=list)
    default_validity_months: int = 6
    requires_immediate_action: bool = False
    allows_warning_skipping: bool = False
    lra_section: str | None = None
    schedule8_reference: str | None = None
    escalation_rationale: str | None = None
    common_examples: list[str] = Field(default_factory=list)
    procedural_requirements: list[str] = Field(default_factory=list)
    evidence_required: list[str] = Field(default_factory=list)
    ccma_factors: list[str] = Field(default_factory=list)
    is_active: bool = True


class WarningCategoryCreate(WarningCategoryBase):
    pass


class WarningCategoryUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    severity: str | None = None
    escalation_path: list[str] | None = None
    required_documents: list[str] | None = None
    default_validity_months: int | None = None
    requires_immediate_action: bool | None = None
    allows_warning_skipping: bool | None = None
    lra_section: str | None = None
    schedule8_reference: str | None = None
    escalation_rationale: str | None = None
    common_examples: list[str] | None = None
    procedural_requirements: list[str] | None = None
    evidence_required: list[str] | None = None
    ccma_factors: list[str] | None = None
    is_active: bool | None = None


class WarningCategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    code: str
    name: str
    description: str | None = None
    severity: CategorySeverity
    escalation_path: list[str] | None = None
    required_documents: list[str] | None = None
    default_validity_months: int
    requires_immediate_action: bool
    allows_warning_skipping: bool
    lra_section: str | None = None
    schedule8_reference: str | None = None
    escalation_rationale: str | None = None
    common_examples: list[str] | None = None
    procedural_requirements: list[str] | None = None
    evidence_required: list[str] | None = None
    ccma_factors: list[str] | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class SeedCategoriesRequest(BaseModel):
    organization_id: UUID


# ---------------------------------------------------------------------------
# Warning
# ---------------------------------------------------------------------------


class WarningIssue(BaseModel):
    employee_id: UUID
    category_id: UUID
    level: str | None = None
    issue_date: date | None = None
    incident_date: date | None = None
    incident_time: str | None = None
    incident_location: str | None = None
    description: str | None = None
    additional_notes: str | None = None
    validity_months: int | None = None
    review_date: date | None = None
    issued_by: str | None = None
    delivered: bool = False
    delivery_method: str | None = None


class WarningRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    employee_id: UUID
    category_id: UUID
    level: WarningLevel
    issue_date: date
    incident_date: date
    incident_time: str | None = None
    incident_location: str | None = None
    description: str
    additional_notes: str | None = None
    validity_months: int
    expiry_date: date
    status: WarningStatus
    issued_by: str | None = None
    delivery_method: DeliveryMethod | None = None
    delivered_at: datetime | None = None
    review_date: date | None = None
    review_outcome: ReviewOutcome | None = None
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    review_notes: str | None = None
    recommended_level: WarningLevel | None = None
    escalation_reason: str | None = None
    active_warnings_at_time: int | None = None
    created_at: datetime
    updated_at: datetime


class DeliverRequest(BaseModel):
    delivery_method: str


class OverturnRequest(BaseModel):
    reason: str | None = None


class ReviewRequest(BaseModel):
    outcome: str
    reviewed_by: str
    notes: str | None = None


# ---------------------------------------------------------------------------
# Escalation recommendation
# ---------------------------------------------------------------------------


class ActiveWarningRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    category_id: str
    level: WarningLevel
    issue_date: date
    expiry_date: date
    status: WarningStatus


class EscalationRecommendationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    category_id: str
    category_name: str
    suggested_level: WarningLevel
    suggested_level_label: str
    is_escalation: bool
    category_warning_count: int
    total_active_warnings: int
    reason: str
    escalation_path: list[WarningLevel]
    previous_level: WarningLevel | None = None
    next_expiry_date: date
    active_warnings: list[ActiveWarningRead]
    legal_basis: str = ""
    legal_requirements: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    explanation: str = ""


# ---------------------------------------------------------------------------
# Review follow-up
# ---------------------------------------------------------------------------


class ReviewStatusRead(BaseModel):
    warning_id: str
    state: str
    days_until_review: int | None = None
    days_since_review: int | None = None


class ReviewItemRead(ReviewStatusRead):
    employee_id: str
    review_date: date


class ReviewSummaryRead(BaseModel):
    counts: dict[str, int]
    due_soon: list[ReviewItemRead]
    overdue: list[ReviewItemRead]
    auto_satisfied: list[ReviewItemRead]
