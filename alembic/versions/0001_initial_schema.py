"""Initial household inventory schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

# Creation order
TABLES = (
    "users",
    "households",
    "household_members",
    "household_locations",
    "location_photos",
    "storage_containers",
    "consumables",
    "non_consumables",
    "condition_logs",
    "shopping_lists",
    "shopping_list_items",
    "family_activity_log",
    "onboarding_progress",
)

SOFT_DELETE_TABLES = (
    "household_locations",
    "storage_containers",
    "consumables",
    "non_consumables",
    "shopping_lists",
)


def timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    ]


def is_active() -> sa.Column:
    return sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False)


def placement() -> list[sa.Column]:
    return [
        sa.Column("household_id", sa.Integer(), sa.ForeignKey("households.id"), nullable=False),
        sa.Column(
            "location_id", sa.Integer(), sa.ForeignKey("household_locations.id"), nullable=False
        ),
        sa.Column(
            "container_id", sa.Integer(), sa.ForeignKey("storage_containers.id"), nullable=True
        ),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        *timestamps(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "households",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "onboarding_completed", sa.Boolean(), server_default=sa.false(), nullable=False
        ),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *timestamps(),
    )

    op.create_table(
        "household_members",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("household_id", sa.Integer(), sa.ForeignKey("households.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("invited_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column(
            "joined_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        *timestamps(),
        sa.UniqueConstraint("household_id", "user_id", name="uq_household_member"),
    )
    op.create_index("ix_household_members_household_id", "household_members", ["household_id"])
    op.create_index("ix_household_members_user_id", "household_members", ["user_id"])

    op.create_table(
        "household_locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("household_id", sa.Integer(), sa.ForeignKey("households.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("is_primary_storage", sa.Boolean(), server_default=sa.false(), nullable=False),
        is_active(),
        *timestamps(),
    )
    op.create_index(
        "ix_household_locations_household_id", "household_locations", ["household_id"]
    )

    op.create_table(
        "location_photos",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "location_id", sa.Integer(), sa.ForeignKey("household_locations.id"), nullable=False
        ),
        sa.Column("photo_url", sa.String(1024), nullable=False),
        sa.Column("storage_path", sa.String(1024), nullable=True),
        sa.Column("caption", sa.String(255), nullable=True),
        *timestamps(),
    )
    op.create_index("ix_location_photos_location_id", "location_photos", ["location_id"])

    op.create_table(
        "storage_containers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("household_id", sa.Integer(), sa.ForeignKey("households.id"), nullable=False),
        sa.Column(
            "location_id", sa.Integer(), sa.ForeignKey("household_locations.id"), nullable=False
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("container_type", sa.String(20), nullable=False),
        sa.Column("capacity_info", sa.String(255), nullable=True),
        sa.Column("photo_url", sa.String(1024), nullable=True),
        sa.Column("storage_path", sa.String(1024), nullable=True),
        is_active(),
        *timestamps(),
    )
    op.create_index("ix_storage_containers_location_id", "storage_containers", ["location_id"])

    op.create_table(
        "consumables",
        sa.Column("id", sa.Integer(), primary_key=True),
        *placement(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("brand", sa.String(255), nullable=True),
        sa.Column("current_quantity", sa.Integer(), nullable=False),
        sa.Column("reorder_threshold", sa.Integer(), nullable=False),
        sa.Column("unit_cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        is_active(),
        *timestamps(),
        sa.CheckConstraint("current_quantity >= 0", name="ck_consumables_quantity_non_negative"),
    )
    op.create_index("ix_consumables_household_id", "consumables", ["household_id"])
    op.create_index("ix_consumables_location_id", "consumables", ["location_id"])
    op.create_index("ix_consumables_container_id", "consumables", ["container_id"])

    op.create_table(
        "non_consumables",
        sa.Column("id", sa.Integer(), primary_key=True),
        *placement(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("brand", sa.String(255), nullable=True),
        sa.Column("model", sa.String(255), nullable=True),
        sa.Column("serial_number", sa.String(255), nullable=True),
        sa.Column("condition", sa.String(20), nullable=False),
        sa.Column("purchase_date", sa.Date(), nullable=True),
        sa.Column("purchase_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("warranty_expiration", sa.Date(), nullable=True),
        sa.Column("notes", sa.String(), nullable=True),
        is_active(),
        *timestamps(),
    )
    op.create_index("ix_non_consumables_household_id", "non_consumables", ["household_id"])
    op.create_index("ix_non_consumables_location_id", "non_consumables", ["location_id"])
    op.create_index("ix_non_consumables_container_id", "non_consumables", ["container_id"])

    op.create_table(
        "condition_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("household_id", sa.Integer(), sa.ForeignKey("households.id"), nullable=False),
        sa.Column(
            "non_consumable_id", sa.Integer(), sa.ForeignKey("non_consumables.id"), nullable=False
        ),
        sa.Column("rating", sa.String(20), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("maintenance_performed", sa.String(), nullable=True),
        sa.Column("estimated_repair_cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.Column("logged_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index(
        "ix_condition_logs_non_consumable_id", "condition_logs", ["non_consumable_id"]
    )

    op.create_table(
        "shopping_lists",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("household_id", sa.Integer(), sa.ForeignKey("households.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        is_active(),
        *timestamps(),
    )
    op.create_index("ix_shopping_lists_household_id", "shopping_lists", ["household_id"])

    op.create_table(
        "shopping_list_items",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "shopping_list_id", sa.Integer(), sa.ForeignKey("shopping_lists.id"), nullable=False
        ),
        sa.Column("item_name", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("notes", sa.String(), nullable=True),
        sa.Column("estimated_cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("is_purchased", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("purchased_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("consumable_id", sa.Integer(), sa.ForeignKey("consumables.id"), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        *timestamps(),
    )
    op.create_index(
        "ix_shopping_list_items_shopping_list_id", "shopping_list_items", ["shopping_list_id"]
    )
    op.create_index(
        "ix_shopping_list_items_consumable_id", "shopping_list_items", ["consumable_id"]
    )

    op.create_table(
        "family_activity_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("household_id", sa.Integer(), sa.ForeignKey("households.id"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("activity_type", sa.String(50), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=True),
        sa.Column("item_type", sa.String(20), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=False),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
    )
    op.create_index(
        "ix_activity_household_recent",
        "family_activity_log",
        ["household_id", "created_at", "id"],
    )

    op.create_table(
        "onboarding_progress",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("household_id", sa.Integer(), sa.ForeignKey("households.id"), nullable=True),
        sa.Column("current_step", sa.Integer(), nullable=False),
        sa.Column("completed_steps", sa.JSON(), nullable=False),
        sa.Column("household_name", sa.String(255), nullable=True),
        sa.Column("rooms_data", sa.JSON(), nullable=False),
        sa.Column("first_container_data", sa.JSON(), nullable=True),
        sa.Column("first_item_data", sa.JSON(), nullable=True),
        *timestamps(),
    )
    op.create_index(
        "ix_onboarding_progress_user_id", "onboarding_progress", ["user_id"], unique=True
    )

    op.create_index(
        "ix_storage_containers_household_id", "storage_containers", ["household_id"]
    )
    op.create_index("ix_condition_logs_household_id", "condition_logs", ["household_id"])
    for table in SOFT_DELETE_TABLES:
        op.create_index(op.f(f"ix_{table}_is_active"), table, ["is_active"])
    for table in TABLES:
        op.create_index(op.f(f"ix_{table}_id"), table, ["id"])


def downgrade() -> None:
    for table in reversed(TABLES):
        op.drop_table(table)
