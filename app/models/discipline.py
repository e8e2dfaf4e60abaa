import enum
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db import Base


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class WarningLevel(enum.Enum):
    counselling = "counselling"
    verbal = "verbal"
    first_written = "first_written"
    second_written = "second_written"
    final_written = "final_written"
    suspension = "suspension"
    dismissal = "dismissal"


class CategorySeverity(enum.Enum):
    minor = "minor"
    moderate = "moderate"
    serious = "serious"
    gross_misconduct = "gross_misconduct"


class WarningStatus(enum.Enum):
    issued = "issued"
    delivered = "delivered"
    expired = "expired"
    overturned = "overturned"


class ReviewOutcome(enum.Enum):
    satisfactory = "satisfactory"
    some_concerns = "some_concerns"
    unsatisfactory = "unsatisfactory"


class DeliveryMethod(enum.Enum):
    email = "email"
    whatsapp = "whatsapp"
    print = "print"
    hand_delivery = "hand_delivery"


# ---------------------------------------------------------------------------
# Organizations
# ---------------------------------------------------------------------------


class Organization(Base):
    __tablename__ = "organizations"
    __table_args__ = (UniqueConstraint("name", name="uq_organizations_name"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    timezone_name: Mapped[str] = mapped_column(
        String(64), nullable=False, default="Africa/Johannesburg"
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    employees = relationship("Employee", back_populates="organization")
    categories = relationship("WarningCategory", back_populates="organization")


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (
        UniqueConstraint(
            "organization_id",
            "employee_number",
            name="uq_employees_org_number",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("organizations.id"), nullable=False
    )
    employee_number: Mapped[str] = mapped_column(String(40), nullable=False)
    first_name: Mapped[str] = mapped_column(String(80), nullable=False)
    last_name: Mapped[str] = mapped_column(String(80), nullable=False)
    department: Mapped[str | None] = mapped_column(String(120))
    position: Mapped[str | None] = mapped_column(String(120))
    email: Mapped[str | None] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    organization = relationship("Organization", back_populates="employees")
    warnings = relationship("DisciplinaryWarning", back_populates="employee")


# ---------------------------------------------------------------------------
# Warning Categories (per-organization catalog)
# ---------------------------------------------------------------------------


class WarningCategory(Base):
    __tablename__ = "warning_categories"
    __table_args__ = (
        UniqueConstraint(
            "organization_id", "code", name="uq_warning_categories_org_code"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("organizations.id"), nullable=False
    )
    code: Mapped[str] = mapped_column(String(80), nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    severity: Mapped[CategorySeverity] = mapped_column(
        Enum(CategorySeverity), nullable=False, default=CategorySeverity.minor
    )
    # Ordered list of WarningLevel values; empty means "use the default path".
    escalation_path: Mapped[list | None] = mapped_column(JSON)
    required_documents: Mapped[list | None] = mapped_column(JSON)
    default_validity_months: Mapped[int] = mapped_column(
        Integer, nullable=False, default=6
    )
    requires_immediate_action: Mapped[bool] = mapped_column(Boolean, default=False)
    allows_warning_skipping: Mapped[bool] = mapped_column(Boolean, default=False)

    # Labour Relations Act compliance guidance
    lra_section: Mapped[str | None] = mapped_column(String(200))
    schedule8_reference: Mapped[str | None] = mapped_column(String(200))
    escalation_rationale: Mapped[str | None] = mapped_column(Text)
    common_examples: Mapped[list | None] = mapped_column(JSON)
    procedural_requirements: Mapped[list | None] = mapped_column(JSON)
    evidence_required: Mapped[list | None] = mapped_column(JSON)
    ccma_factors: Mapped[list | None] = mapped_column(JSON)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    organization = relationship("Organization", back_populates="categories")


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------


class DisciplinaryWarning(Base):
    __tablename__ = "warnings"
    __table_args__ = (
        Index("ix_warnings_employee_category", "employee_id", "category_id"),
        Index("ix_warnings_expiry_date", "expiry_date"),
        Index("ix_warnings_review_date", "review_date"),
        Index("ix_warnings_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("organizations.id"), nullable=False
    )
    employee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("employees.id"), nullable=False
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("warning_categories.id"), nullable=False
    )
    level: Mapped[WarningLevel] = mapped_column(Enum(WarningLevel), nullable=False)

    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    incident_date: Mapped[date] = mapped_column(Date, nullable=False)
    incident_time: Mapped[str | None] = mapped_column(String(8))
    incident_location: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, nullable=False)
    additional_notes: Mapped[str | None] = mapped_column(Text)

    validity_months: Mapped[int] = mapped_column(Integer, nullable=False)
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[WarningStatus] = mapped_column(
        Enum(WarningStatus), nullable=False, default=WarningStatus.issued
    )
    issued_by: Mapped[str | None] = mapped_column(String(120))

    delivery_method: Mapped[DeliveryMethod | None] = mapped_column(
        Enum(DeliveryMethod)
    )
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    review_date: Mapped[date | None] = mapped_column(Date)
    review_outcome: Mapped[ReviewOutcome | None] = mapped_column(Enum(ReviewOutcome))
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    reviewed_by: Mapped[str | None] = mapped_column(String(120))
    review_notes: Mapped[str | None] = mapped_column(Text)
    # Set once the auto-satisfied notice has been published for this review.
    auto_satisfied_notified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True)
    )

    # Recommendation snapshot at issuance
    recommended_level: Mapped[WarningLevel | None] = mapped_column(
        Enum(WarningLevel, name="recommendedwarninglevel")
    )
    escalation_reason: Mapped[str | None] = mapped_column(Text)
    active_warnings_at_time: Mapped[int | None] = mapped_column(Integer)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    employee = relationship("Employee", back_populates="warnings")
    category = relationship("WarningCategory")
