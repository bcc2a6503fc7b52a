"""Initial schema: developers, projects, properties, feeds, payments, activity

Revision ID: 4f1c2a9e7b30
Revises:
Create Date: 2026-10-17 09:12:41.508113

"""

import sqlalchemy as sa
from alembic import op

from otoraport.models.types import GUID, JSONB

# revision identifiers, used by Alembic.
revision = "4f1c2a9e7b30"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        "developers",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=True),
        sa.Column("company_name", sa.String(length=255), nullable=False),
        sa.Column("nip", sa.String(length=10), nullable=True),
        sa.Column("regon", sa.String(length=14), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("website", sa.String(length=500), nullable=True),
        sa.Column("legal_form", sa.String(length=64), nullable=True),
        sa.Column("krs", sa.String(length=64), nullable=True),
        sa.Column("ceidg", sa.String(length=64), nullable=True),
        sa.Column("street", sa.String(length=120), nullable=True),
        sa.Column("house_number", sa.String(length=64), nullable=True),
        sa.Column("apartment_number", sa.String(length=64), nullable=True),
        sa.Column("postal_code", sa.String(length=64), nullable=True),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.Column("municipality", sa.String(length=120), nullable=True),
        sa.Column("county", sa.String(length=120), nullable=True),
        sa.Column("voivodeship", sa.String(length=120), nullable=True),
        sa.Column("client_id", sa.String(length=40), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("oauth_provider", sa.String(length=64), nullable=True),
        sa.Column("onboarding_completed", sa.Boolean(), nullable=False),
        sa.Column("subscription_plan", sa.String(length=32), nullable=False),
        sa.Column("subscription_status", sa.String(length=32), nullable=False),
        sa.Column("trial_ends_at", sa.DateTime(), nullable=True),
        sa.Column("subscription_end_date", sa.DateTime(), nullable=True),
        sa.Column("ministry_approved", sa.Boolean(), nullable=False),
        sa.Column("ministry_email_sent", sa.Boolean(), nullable=False),
        sa.Column("xml_url", sa.String(length=500), nullable=True),
        sa.Column("md_url", sa.String(length=500), nullable=True),
        sa.Column("email_notifications_sent", JSONB(), nullable=True),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("nip"),
    )
    op.create_index("ix_developers_email", "developers", ["email"], unique=True)
    op.create_index("ix_developers_client_id", "developers", ["client_id"], unique=True)
    op.create_index(
        "ix_developers_subscription_status", "developers", ["subscription_status"]
    )

    op.create_table(
        "projects",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("developer_id", GUID(), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("location", sa.String(length=120), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("postal_code", sa.String(length=64), nullable=True),
        sa.Column("municipality", sa.String(length=120), nullable=True),
        sa.Column("county", sa.String(length=120), nullable=True),
        sa.Column("voivodeship", sa.String(length=120), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["developer_id"], ["developers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("developer_id", "name", name="uq_project_developer_name"),
    )
    op.create_index("ix_projects_developer_id", "projects", ["developer_id"])

    op.create_table(
        "properties",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("project_id", GUID(), nullable=False),
        sa.Column("property_number", sa.String(length=50), nullable=False),
        sa.Column("property_type", sa.String(length=64), nullable=False),
        sa.Column("price_per_m2", sa.Float(), nullable=True),
        sa.Column("total_price", sa.Float(), nullable=True),
        sa.Column("final_price", sa.Float(), nullable=True),
        sa.Column("area", sa.Float(), nullable=True),
        sa.Column("parking_space", sa.String(length=100), nullable=True),
        sa.Column("parking_price", sa.Float(), nullable=True),
        sa.Column("storage_room", sa.String(length=100), nullable=True),
        sa.Column("storage_price", sa.Float(), nullable=True),
        sa.Column("price_valid_from", sa.Date(), nullable=True),
        sa.Column("price_valid_to", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("raw_data", JSONB(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "project_id", "property_number", name="uq_property_project_number"
        ),
    )
    op.create_index("ix_properties_project_id", "properties", ["project_id"])
    op.create_index("ix_properties_status", "properties", ["status"])

    op.create_table(
        "generated_files",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("developer_id", GUID(), nullable=False),
        sa.Column("file_type", sa.String(length=8), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("md5", sa.String(length=32), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("properties_count", sa.Integer(), nullable=False),
        sa.Column("last_generated", sa.DateTime(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["developer_id"], ["developers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "developer_id", "file_type", name="uq_generated_file_developer_type"
        ),
    )
    op.create_index("ix_generated_files_developer_id", "generated_files", ["developer_id"])

    op.create_table(
        "payments",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("developer_id", GUID(), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("plan_type", sa.String(length=32), nullable=False),
        sa.Column("billing_period", sa.String(length=16), nullable=False),
        sa.Column("przelewy24_session_id", sa.String(length=64), nullable=False),
        sa.Column("przelewy24_order_id", sa.String(length=64), nullable=True),
        sa.Column("przelewy24_token", sa.String(length=128), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["developer_id"], ["developers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("przelewy24_session_id"),
    )
    op.create_index("ix_payments_developer_id", "payments", ["developer_id"])
    op.create_index("ix_payments_status", "payments", ["status"])

    op.create_table(
        "activity_logs",
        sa.Column("id", GUID(), nullable=False),
        sa.Column("developer_id", GUID(), nullable=True),
        sa.Column("action", sa.String(length=64), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("records_count", sa.Integer(), nullable=True),
        sa.Column("details", JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["developer_id"], ["developers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_activity_logs_developer_id", "activity_logs", ["developer_id"])
    op.create_index("ix_activity_logs_action", "activity_logs", ["action"])
    op.create_index("ix_activity_logs_created_at", "activity_logs", ["created_at"])


def downgrade():
    op.drop_index("ix_activity_logs_created_at", table_name="activity_logs")
    op.drop_index("ix_activity_logs_action", table_name="activity_logs")
    op.drop_index("ix_activity_logs_developer_id", table_name="activity_logs")
    op.drop_table("activity_logs")
    op.drop_index("ix_payments_status", table_name="payments")
    op.drop_index("ix_payments_developer_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_generated_files_developer_id", table_name="generated_files")
    op.drop_table("generated_files")
    op.drop_index("ix_properties_status", table_name="properties")
    op.drop_index("ix_properties_project_id", table_name="properties")
    op.drop_table("properties")
    op.drop_index("ix_projects_developer_id", table_name="projects")
    op.drop_table("projects")
    op.drop_index(
        "ix_developers_subscription_status", table_name="developers"
    )
    op.drop_index("ix_developers_client_id", table_name="developers")
    op.drop_index("ix_developers_email", table_name="developers")
    op.drop_table("developers")
