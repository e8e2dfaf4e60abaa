"""discipline initial schema

Revision ID: 6b1e2f3a4c5d
Revises:
Create Date: 2026-10-19 08:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

revision = "6b1e2f3a4c5d"
down_revision = None
branch_labels = None
depends_on = None

_LEVELS = (
    "counselling",
    "verbal",
    "first_written",
    "second_written",
    "final_written",
    "suspension",
    "dismissal",
)


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("timezone_name", sa.String(length=64), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_organizations_name"),
    )

    op.create_table(
        "employees",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("employee_number", sa.String(length=40), nullable=False),
        sa.Column("first_name", sa.String(length=80), nullable=False),
        sa.Column("last_name", sa.String(length=80), nullable=False),
        sa.Column("department", sa.String(length=120), nullable=True),
        sa.Column("position", sa.String(length=120), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "organization_id", "employee_number", name="uq_employees_org_number"
        ),
    )

    op.create_table(
        "warning_categories",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("code", sa.String(length=80), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "severity",
            sa.Enum(
                "minor",
                "moderate",
                "serious",
                "gross_misconduct",
                name="categoryseverity",
            ),
            nullable=False,
        ),
        sa.Column("escalation_path", sa.JSON(), nullable=True),
        sa.Column("required_documents", sa.JSON(), nullable=True),
        sa.Column("default_validity_months", sa.Integer(), nullable=False),
        sa.Column("requires_immediate_action", sa.Boolean(), nullable=False),
        sa.Column("allows_warning_skipping", sa.Boolean(), nullable=False),
        sa.Column("lra_section", sa.String(length=200), nullable=True),
        sa.Column("schedule8_reference", sa.String(length=200), nullable=True),
        sa.Column("escalation_rationale", sa.Text(), nullable=True),
        sa.Column("common_examples", sa.JSON(), nullable=True),
        sa.Column("procedural_requirements", sa.JSON(), nullable=True),
        sa.Column("evidence_required", sa.JSON(), nullable=True),
        sa.Column("ccma_factors", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "organization_id", "code", name="uq_warning_categories_org_code"
        ),
    )

    op.create_table(
        "warnings",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("organization_id", sa.UUID(), nullable=False),
        sa.Column("employee_id", sa.UUID(), nullable=False),
        sa.Column("category_id", sa.UUID(), nullable=False),
        sa.Column("level", sa.Enum(*_LEVELS, name="warninglevel"), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("incident_date", sa.Date(), nullable=False),
        sa.Column("incident_time", sa.String(length=8), nullable=True),
        sa.Column("incident_location", sa.String(length=255), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column("validity_months", sa.Integer(), nullable=False),
        sa.Column("expiry_date", sa.Date(), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "issued", "delivered", "expired", "overturned", name="warningstatus"
            ),
            nullable=False,
        ),
        sa.Column("issued_by", sa.String(length=120), nullable=True),
        sa.Column(
            "delivery_method",
            sa.Enum(
                "email",
                "whatsapp",
                "print",
                "hand_delivery",
                name="deliverymethod",
            ),
            nullable=True,
        ),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("review_date", sa.Date(), nullable=True),
        sa.Column(
            "review_outcome",
            sa.Enum(
                "satisfactory",
                "some_concerns",
                "unsatisfactory",
                name="reviewoutcome",
            ),
            nullable=True,
        ),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.String(length=120), nullable=True),
        sa.Column("review_notes", sa.Text(), nullable=True),
        sa.Column(
            "auto_satisfied_notified_at", sa.DateTime(timezone=True), nullable=True
        ),
        sa.Column(
            "recommended_level",
            sa.Enum(*_LEVELS, name="recommendedwarninglevel"),
            nullable=True,
        ),
        sa.Column("escalation_reason", sa.Text(), nullable=True),
        sa.Column("active_warnings_at_time", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["organization_id"], ["organizations.id"]),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"]),
        sa.ForeignKeyConstraint(["category_id"], ["warning_categories.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_warnings_employee_category", "warnings", ["employee_id", "category_id"]
    )
    op.create_index("ix_warnings_expiry_date", "warnings", ["expiry_date"])
    op.create_index("ix_warnings_review_date", "warnings", ["review_date"])
    op.create_index("ix_warnings_status", "warnings", ["status"])


def downgrade() -> None:
    op.drop_index("ix_warnings_status", table_name="warnings")
    op.drop_index("ix_warnings_review_date", table_name="warnings")
    op.drop_index("ix_warnings_expiry_date", table_name="warnings")
    op.drop_index("ix_warnings_employee_category", table_name="warnings")
    op.drop_table("warnings")
    op.drop_table("warning_categories")
    op.drop_table("employees")
    op.drop_table("organizations")

    for enum_name in [
        "recommendedwarninglevel",
        "reviewoutcome",
        "deliverymethod",
        "warningstatus",
        "warninglevel",
        "categoryseverity",
    ]:
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
