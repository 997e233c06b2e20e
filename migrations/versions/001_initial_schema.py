"""Initial schema: PostGIS extension, users, volunteers, issue types, issues.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from geoalchemy2 import Geometry


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(*, updated: bool = True) -> list[sa.Column]:
    cols = [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        )
    ]
    if updated:
        cols.append(
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
            )
        )
    return cols


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS postgis")

    # ── users ─────────────────────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        *_timestamps(updated=False),
    )

    # ── volunteer_profiles ────────────────────────────────────────────
    op.create_table(
        "volunteer_profiles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.Integer,
            sa.ForeignKey("users.id"),
            unique=True,
            nullable=False,
        ),
        sa.Column("display_name", sa.String(120), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("age", sa.Integer, nullable=False),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("rank", sa.String(20), nullable=False, server_default="beginner"),
        sa.Column("specializations", sa.JSON, nullable=True),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column(
            "location",
            Geometry("POINT", srid=4326, spatial_index=False),
            nullable=True,
        ),
        sa.Column("district", sa.String(80), nullable=False),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column(
            "service_radius_km", sa.Integer, nullable=False, server_default="10"
        ),
        sa.Column(
            "total_resolves", sa.Integer, nullable=False, server_default="0"
        ),
        sa.Column("rating", sa.Float, server_default="5.0"),
        sa.Column(
            "is_available", sa.Boolean, nullable=False, server_default=sa.true()
        ),
        sa.Column(
            "is_verified", sa.Boolean, nullable=False, server_default=sa.false()
        ),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index(
        "idx_volunteers_latlng", "volunteer_profiles", ["latitude", "longitude"]
    )
    op.create_index(
        "idx_volunteers_location",
        "volunteer_profiles",
        ["location"],
        postgresql_using="gist",
    )
    op.create_index(
        "idx_volunteers_dispatchable",
        "volunteer_profiles",
        ["is_available", "is_verified"],
    )
    op.create_index("idx_volunteers_district", "volunteer_profiles", ["district"])

    # ── issue_types ───────────────────────────────────────────────────
    op.create_table(
        "issue_types",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("code", sa.String(40), unique=True, nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "requires_auth", sa.Boolean, nullable=False, server_default=sa.true()
        ),
        sa.Column("default_severity", sa.String(20), server_default="medium"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer, server_default="0"),
    )

    # ── issues ────────────────────────────────────────────────────────
    op.create_table(
        "issues",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "issue_type_id",
            sa.Integer,
            sa.ForeignKey("issue_types.id"),
            nullable=False,
        ),
        sa.Column(
            "reporter_user_id", sa.Integer, sa.ForeignKey("users.id"), nullable=True
        ),
        sa.Column("victim_name", sa.String(120), nullable=True),
        sa.Column("victim_phone", sa.String(20), nullable=False),
        sa.Column("victim_age", sa.Integer, nullable=True),
        sa.Column("victim_gender", sa.String(20), nullable=True),
        sa.Column("reporter_name", sa.String(120), nullable=True),
        sa.Column("reporter_phone", sa.String(20), nullable=True),
        sa.Column("reporter_relation", sa.String(20), nullable=True),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column(
            "location",
            Geometry("POINT", srid=4326, spatial_index=False),
            nullable=True,
        ),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("district", sa.String(80), nullable=True),
        sa.Column("landmark", sa.String(200), nullable=True),
        sa.Column("title", sa.String(200), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("severity", sa.String(20), nullable=False, server_default="medium"),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolution_notes", sa.Text, nullable=True),
        sa.Column("acknowledged_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index("idx_issues_latlng", "issues", ["latitude", "longitude"])
    op.create_index(
        "idx_issues_location", "issues", ["location"], postgresql_using="gist"
    )
    op.create_index("idx_issues_status", "issues", ["status"])
    op.create_index("idx_issues_type", "issues", ["issue_type_id"])
    op.create_index("idx_issues_reporter", "issues", ["reporter_user_id"])
    op.create_index("idx_issues_created", "issues", ["created_at"])

    # ── issue_assignments ─────────────────────────────────────────────
    op.create_table(
        "issue_assignments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "issue_id", sa.String(36), sa.ForeignKey("issues.id"), nullable=False
        ),
        sa.Column(
            "volunteer_id",
            sa.Integer,
            sa.ForeignKey("volunteer_profiles.id"),
            nullable=False,
        ),
        sa.Column("status", sa.String(20), nullable=False, server_default="assigned"),
        sa.Column("equipment_used", sa.Text, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("arrived_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "issue_id", "volunteer_id", name="uq_assignments_issue_volunteer"
        ),
    )
    op.create_index("idx_assignments_issue", "issue_assignments", ["issue_id"])
    op.create_index(
        "idx_assignments_volunteer", "issue_assignments", ["volunteer_id"]
    )


def downgrade() -> None:
    op.drop_table("issue_assignments")
    op.drop_table("issues")
    op.drop_table("issue_types")
    op.drop_table("volunteer_profiles")
    op.drop_table("users")
