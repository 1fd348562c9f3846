"""Initial n8n integration tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _jsonb(name: str, default: str | None) -> sa.Column:
    if default is None:
        return sa.Column(name, postgresql.JSONB(), nullable=True)
    return sa.Column(name, postgresql.JSONB(), nullable=False, server_default=default)


def upgrade() -> None:
    op.create_table(
        "n8n_integrations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("instance_url", sa.String(length=500), nullable=False),
        sa.Column("api_key", sa.String(length=500), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_verified", sa.Boolean(), nullable=False),
        sa.Column("last_verified_at", sa.DateTime(), nullable=True),
        sa.Column("last_sync_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_integrations_organization_id",
        "n8n_integrations",
        ["organization_id"],
        schema="public",
    )

    op.create_table(
        "n8n_workflows",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("integration_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("n8n_workflow_id", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("trigger_type", sa.String(length=20), nullable=False),
        _jsonb("trigger_config", "{}"),
        _jsonb("tags", "[]"),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_synced", sa.Boolean(), nullable=False),
        sa.Column("last_synced_at", sa.DateTime(), nullable=True),
        sa.Column("total_executions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("successful_executions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("failed_executions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("avg_execution_time_ms", sa.Integer(), nullable=True),
        sa.Column("last_execution_at", sa.DateTime(), nullable=True),
        sa.Column("last_execution_status", sa.String(length=20), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["integration_id"], ["public.n8n_integrations.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint(
            "integration_id", "n8n_workflow_id", name="uq_n8n_workflows_integration_remote"
        ),
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_workflows_organization_id",
        "n8n_workflows",
        ["organization_id"],
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_workflows_integration_id",
        "n8n_workflows",
        ["integration_id"],
        schema="public",
    )

    op.create_table(
        "n8n_workflow_executions",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("workflow_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("trigger_source", sa.String(length=20), nullable=False),
        sa.Column("triggered_by", sa.String(length=255), nullable=False),
        _jsonb("input_data", "{}"),
        sa.Column("n8n_execution_id", sa.String(length=100), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        _jsonb("output_data", None),
        sa.Column("error_message", sa.String(length=2000), nullable=True),
        sa.Column("execution_time_ms", sa.Integer(), nullable=True),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("finished_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["workflow_id"], ["public.n8n_workflows.id"], ondelete="CASCADE"),
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_workflow_executions_organization_id",
        "n8n_workflow_executions",
        ["organization_id"],
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_workflow_executions_workflow_id",
        "n8n_workflow_executions",
        ["workflow_id"],
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_workflow_executions_n8n_execution_id",
        "n8n_workflow_executions",
        ["n8n_execution_id"],
        schema="public",
    )
    op.create_index(
        "ix_n8n_executions_org_started",
        "n8n_workflow_executions",
        ["organization_id", "started_at"],
        schema="public",
    )

    op.create_table(
        "n8n_event_mappings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("workflow_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("event_type", sa.String(length=100), nullable=False),
        _jsonb("payload_transform", None),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("trigger_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_triggered_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["workflow_id"], ["public.n8n_workflows.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "workflow_id", "event_type", name="uq_n8n_event_mappings_workflow_event"
        ),
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_event_mappings_organization_id",
        "n8n_event_mappings",
        ["organization_id"],
        schema="public",
    )
    op.create_index(
        "ix_n8n_event_mappings_org_event",
        "n8n_event_mappings",
        ["organization_id", "event_type"],
        schema="public",
    )

    op.create_table(
        "n8n_templates",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=2000), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=False),
        _jsonb("tags", "[]"),
        sa.Column("icon", sa.String(length=50), nullable=True),
        _jsonb("workflow_json", "{}"),
        _jsonb("required_credentials", "[]"),
        sa.Column("author_name", sa.String(length=100), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("is_featured", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("install_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_templates_category",
        "n8n_templates",
        ["category"],
        schema="public",
    )

    op.create_table(
        "n8n_template_installations",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("organization_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("template_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("integration_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("workflow_id", postgresql.UUID(as_uuid=True), nullable=True),
        _jsonb("custom_config", "{}"),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("installed_by", sa.String(length=255), nullable=True),
        sa.Column("installed_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["template_id"], ["public.n8n_templates.id"]),
        sa.ForeignKeyConstraint(
            ["integration_id"], ["public.n8n_integrations.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["workflow_id"], ["public.n8n_workflows.id"], ondelete="SET NULL"),
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_template_installations_organization_id",
        "n8n_template_installations",
        ["organization_id"],
        schema="public",
    )
    op.create_index(
        "ix_public_n8n_template_installations_template_id",
        "n8n_template_installations",
        ["template_id"],
        schema="public",
    )


def downgrade() -> None:
    op.drop_table("n8n_template_installations", schema="public")
    op.drop_table("n8n_templates", schema="public")
    op.drop_table("n8n_event_mappings", schema="public")
    op.drop_table("n8n_workflow_executions", schema="public")
    op.drop_table("n8n_workflows", schema="public")
    op.drop_table("n8n_integrations", schema="public")
