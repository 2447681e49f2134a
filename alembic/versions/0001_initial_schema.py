"""initial schema: user, company, event, trend_summary

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _owner():
    return sa.Column(
        "user_id",
        sa.Uuid(),
        sa.ForeignKey("user.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(length=254), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "company",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("company_name", sa.String(length=100), nullable=False),
        sa.Column("normalized_name", sa.String(length=100), nullable=False),
        sa.Column("analysis", _json(), nullable=False),
        sa.Column("analysis_metadata", _json(), nullable=False),
        sa.Column("user_notes", sa.Text(), nullable=False, server_default=""),
        sa.Column("event_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("first_registered_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_event_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_company_user_id", "company", ["user_id"])
    op.create_index(
        "uq_company_user_normalized_name",
        "company",
        ["user_id", "normalized_name"],
        unique=True,
    )

    op.create_table(
        "event",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column(
            "company_id",
            sa.Uuid(),
            sa.ForeignKey("company.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("company_name", sa.String(length=100), nullable=False),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("memo", sa.Text(), nullable=False, server_default=""),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="scheduled"),
        sa.Column("result", sa.String(length=20), nullable=True),
        sa.Column("result_memo", sa.Text(), nullable=False, server_default=""),
        sa.Column("job_position", sa.String(length=100), nullable=True),
        sa.Column("review", _json(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_event_user_id", "event", ["user_id"])
    op.create_index("ix_event_company_id", "event", ["company_id"])
    op.create_index("ix_event_user_starts_at", "event", ["user_id", "starts_at"])

    op.create_table(
        "trend_summary",
        sa.Column("id", sa.Uuid(), primary_key=True),
        _owner(),
        sa.Column("summary", _json(), nullable=False),
        sa.Column("source_companies", _json(), nullable=False),
        sa.Column("review_stats", _json(), nullable=True),
        sa.Column("analyzed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("company_count", sa.Integer(), nullable=False),
        sa.Column("model_used", sa.String(length=100), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_trend_summary_user_id", "trend_summary", ["user_id"])
    op.create_index("uq_trend_summary_user", "trend_summary", ["user_id"], unique=True)


def downgrade() -> None:
    op.drop_index("uq_trend_summary_user", table_name="trend_summary")
    op.drop_index("ix_trend_summary_user_id", table_name="trend_summary")
    op.drop_table("trend_summary")

    op.drop_index("ix_event_user_starts_at", table_name="event")
    op.drop_index("ix_event_company_id", table_name="event")
    op.drop_index("ix_event_user_id", table_name="event")
    op.drop_table("event")

    op.drop_index("uq_company_user_normalized_name", table_name="company")
    op.drop_index("ix_company_user_id", table_name="company")
    op.drop_table("company")

    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
