"""Initial schema: master data, contacts, campaigns and audience tables.

The audience stored procedures (search_audience, preview_audience,
build_audience, get_audience_results, get_contact_summary) are managed in the
database and are not created here.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ─── Master data ─────────────────────────────────────────────────────────

    op.create_table(
        "city_master",
        sa.Column("city_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("city", sa.Text, nullable=True),
        sa.Column("state", sa.Text, nullable=True),
        sa.Column("region", sa.Text, nullable=True),
        sa.Column("country", sa.Text, nullable=True),
        sa.Column("pincode", sa.Text, nullable=True),
    )

    op.create_table(
        "industry_master",
        sa.Column("industry_id", sa.Integer, primary_key=True, autoincrement=False),
        sa.Column("industry_vertical", sa.Text, nullable=True),
        sa.Column("sub_vertical", sa.Text, nullable=True),
    )

    for table, label in (
        ("department_master", "department_name"),
        ("job_level_master", "job_level_name"),
        ("comp_turnover_master", "turnover_range"),
        ("emp_range_master", "employee_range"),
    ):
        op.create_table(
            table,
            sa.Column("id", sa.Integer, sa.Identity(), primary_key=True),
            sa.Column(label, sa.Text, nullable=False),
        )

    # ─── CRM entities ────────────────────────────────────────────────────────

    op.create_table(
        "organisation_master",
        sa.Column("company_id", sa.BigInteger, sa.Identity(), primary_key=True),
        sa.Column("company_name", sa.Text, nullable=True),
        sa.Column("industry", sa.Text, nullable=True),
        sa.Column("headquarters", sa.Text, nullable=True),
        sa.Column("city_id", sa.Integer, sa.ForeignKey("city_master.city_id"), nullable=True),
        sa.Column("employees", sa.Integer, nullable=True),
        sa.Column("annual_revenue", sa.Numeric(18, 2), nullable=True),
        sa.Column("address_type", sa.Text, nullable=True),
        sa.Column("postal_address_1", sa.Text, nullable=True),
        sa.Column("postal_address_2", sa.Text, nullable=True),
        sa.Column("postal_address_3", sa.Text, nullable=True),
        sa.Column("std", sa.Text, nullable=True),
        sa.Column("phone_1", sa.Text, nullable=True),
        sa.Column("phone_2", sa.Text, nullable=True),
        sa.Column("fax", sa.Text, nullable=True),
        sa.Column("company_mobile_number", sa.Text, nullable=True),
        sa.Column("common_email_id", sa.Text, nullable=True),
        sa.Column("website", sa.Text, nullable=True),
        sa.Column("no_of_employees_total", sa.Integer, nullable=True),
        sa.Column("turn_over_inr_cr", sa.Numeric(14, 2), nullable=True),
        sa.Column("no_of_offices_total", sa.Integer, nullable=True),
        sa.Column("no_of_branch_offices", sa.Integer, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "contact_master",
        sa.Column("contact_id", sa.BigInteger, sa.Identity(), primary_key=True),
        sa.Column(
            "company_id",
            sa.BigInteger,
            sa.ForeignKey("organisation_master.company_id"),
            nullable=True,
        ),
        sa.Column("salute", sa.Text, nullable=True),
        sa.Column("first_name", sa.Text, nullable=True),
        sa.Column("last_name", sa.Text, nullable=True),
        sa.Column("designation", sa.Text, nullable=True),
        sa.Column("department", sa.Text, nullable=True),
        sa.Column("job_level", sa.Text, nullable=True),
        sa.Column("specialization", sa.Text, nullable=True),
        sa.Column("official_email_id", sa.Text, nullable=True),
        sa.Column("personal_email_id", sa.Text, nullable=True),
        sa.Column("mobile_number", sa.Text, nullable=True),
        sa.Column("direct_phone_number", sa.Text, nullable=True),
        sa.Column("gender", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index(
        "ix_contact_master_official_email_id", "contact_master", ["official_email_id"]
    )

    op.create_table(
        "campaigns",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("list_size", sa.Integer, nullable=False, server_default="0"),
        sa.Column("client_name", sa.Text, nullable=False),
        sa.Column("servicing_lead", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("list_size >= 0", name="ck_campaign_list_size"),
        sa.CheckConstraint("end_date >= start_date", name="ck_campaign_dates"),
    )

    # ─── Audience builder ────────────────────────────────────────────────────

    op.create_table(
        "audience_runs",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("filters", postgresql.JSONB, nullable=False),
        sa.Column("status", sa.Text, nullable=False, server_default="draft"),
        sa.Column("total_results", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("status IN ('draft', 'completed')", name="ck_audience_run_status"),
    )

    op.create_table(
        "audience_results",
        sa.Column("id", sa.BigInteger, sa.Identity(), primary_key=True),
        sa.Column(
            "run_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("audience_runs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("contact_id", sa.BigInteger, nullable=False),
        sa.Column("company_id", sa.BigInteger, nullable=True),
        sa.Column("company_name", sa.Text, nullable=True),
        sa.Column("first_name", sa.Text, nullable=True),
        sa.Column("last_name", sa.Text, nullable=True),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column("phone", sa.Text, nullable=True),
        sa.Column("city", sa.Text, nullable=True),
        sa.Column("state", sa.Text, nullable=True),
        sa.Column("industry", sa.Text, nullable=True),
        sa.Column("job_level", sa.Text, nullable=True),
        sa.Column("department", sa.Text, nullable=True),
    )
    op.create_index("ix_audience_results_run_id", "audience_results", ["run_id"])

    op.create_table(
        "campaign_audience_allocations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "run_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("audience_runs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "campaign_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("allocated_count", sa.Integer, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("allocated_count >= 0", name="ck_allocation_count"),
    )

    op.create_table(
        "campaign_files",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "campaign_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("campaigns.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("run_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("file_name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("total_contacts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("allocated_contacts", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )

    op.create_table(
        "campaign_file_contacts",
        sa.Column("id", sa.BigInteger, sa.Identity(), primary_key=True),
        sa.Column(
            "campaign_file_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("campaign_files.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("contact_id", sa.BigInteger, nullable=False),
        sa.Column("company_id", sa.BigInteger, nullable=True),
        sa.Column("first_name", sa.Text, nullable=True),
        sa.Column("last_name", sa.Text, nullable=True),
        sa.Column("full_name", sa.Text, nullable=True),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column("phone", sa.Text, nullable=True),
        sa.Column("company_name", sa.Text, nullable=True),
        sa.Column("city", sa.Text, nullable=True),
        sa.Column("state", sa.Text, nullable=True),
        sa.Column("industry", sa.Text, nullable=True),
        sa.Column("job_level", sa.Text, nullable=True),
        sa.Column("department", sa.Text, nullable=True),
        sa.Column("salute", sa.Text, nullable=True),
        sa.Column("designation", sa.Text, nullable=True),
        sa.Column("personal_email_id", sa.Text, nullable=True),
        sa.Column("direct_phone_number", sa.Text, nullable=True),
        sa.Column("website", sa.Text, nullable=True),
        sa.Column("headquarters", sa.Text, nullable=True),
        sa.Column("employees", sa.Integer, nullable=True),
        sa.Column("turn_over_inr_cr", sa.Numeric(14, 2), nullable=True),
        sa.Column("postal_address_1", sa.Text, nullable=True),
        sa.Column("postal_address_2", sa.Text, nullable=True),
        sa.Column("postal_address_3", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index(
        "ix_campaign_file_contacts_campaign_file_id",
        "campaign_file_contacts",
        ["campaign_file_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_campaign_file_contacts_campaign_file_id", table_name="campaign_file_contacts")
    op.drop_table("campaign_file_contacts")
    op.drop_table("campaign_files")
    op.drop_table("campaign_audience_allocations")
    op.drop_index("ix_audience_results_run_id", table_name="audience_results")
    op.drop_table("audience_results")
    op.drop_table("audience_runs")
    op.drop_table("campaigns")
    op.drop_index("ix_contact_master_official_email_id", table_name="contact_master")
    op.drop_table("contact_master")
    op.drop_table("organisation_master")
    op.drop_table("emp_range_master")
    op.drop_table("comp_turnover_master")
    op.drop_table("job_level_master")
    op.drop_table("department_master")
    op.drop_table("industry_master")
    op.drop_table("city_master")
