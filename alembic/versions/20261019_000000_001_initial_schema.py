"""Initial schema: users, recipes, swipe ledger, meal history, achievements.

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


swipe_direction = sa.Enum("left", "right", name="swipedirection")
achievement_type = sa.Enum(
    "recipes_saved", "recipes_cooked", "streak", "swipe_count", name="achievementtype"
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("display_name", sa.String(length=255), nullable=True),
        sa.Column("current_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_meal_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Recipe catalog: curated externally, engine only increments counters
    op.create_table(
        "recipes",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cuisine", sa.String(length=100), nullable=True),
        sa.Column("nutritional_tags", sa.JSON(), nullable=False),
        sa.Column("complexity", sa.String(length=50), nullable=True),
        sa.Column("portion_size", sa.String(length=50), nullable=True),
        sa.Column("ingredients", sa.JSON(), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("popularity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_recipes_active_popularity", "recipes", ["active", "popularity"])

    # Swipe ledger: one row per (user, recipe), later swipes overwrite
    op.create_table(
        "swipes",
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("recipe_id", sa.String(length=128), nullable=False),
        sa.Column("direction", swipe_direction, nullable=False),
        sa.Column("swiped_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"]),
        sa.PrimaryKeyConstraint("user_id", "recipe_id"),
    )

    op.create_table(
        "saved_recipes",
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("recipe_id", sa.String(length=128), nullable=False),
        sa.Column("saved_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"]),
        sa.PrimaryKeyConstraint("user_id", "recipe_id"),
    )

    op.create_table(
        "meal_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("recipe_id", sa.String(length=128), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("eaten_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["recipe_id"], ["recipes.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_meal_history_user_id", "meal_history", ["user_id"])

    # Achievement catalog and unlocks: unlock rows are never deleted
    op.create_table(
        "achievements",
        sa.Column("id", sa.String(length=128), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", achievement_type, nullable=False),
        sa.Column("requirement", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "user_achievements",
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("achievement_id", sa.String(length=128), nullable=False),
        sa.Column("unlocked_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["achievement_id"], ["achievements.id"]),
        sa.PrimaryKeyConstraint("user_id", "achievement_id"),
    )


def downgrade() -> None:
    op.drop_table("user_achievements")
    op.drop_table("achievements")
    op.drop_index("ix_meal_history_user_id", table_name="meal_history")
    op.drop_table("meal_history")
    op.drop_table("saved_recipes")
    op.drop_table("swipes")
    op.drop_index("ix_recipes_active_popularity", table_name="recipes")
    op.drop_table("recipes")
    op.drop_table("users")
    achievement_type.drop(op.get_bind(), checkfirst=True)
    swipe_direction.drop(op.get_bind(), checkfirst=True)
