"""initial schema

Revision ID: 3c1f7a9e2b60
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f7a9e2b60"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.String(length=26), nullable=True),
        sa.Column("updated_at", sa.String(length=26), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("accounts", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_accounts_email"), ["email"], unique=True)

    op.create_table(
        "refresh_sessions",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("account_id", sa.String(length=36), nullable=False),
        sa.Column("jti_hash", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.String(length=26), nullable=True),
        sa.Column("expires_at", sa.String(length=26), nullable=False),
        sa.Column("revoked_at", sa.String(length=26), nullable=True),
        sa.Column("last_used_at", sa.String(length=26), nullable=True),
        sa.Column("rotated_from_id", sa.String(length=36), nullable=True),
        sa.Column("user_agent", sa.String(length=255), nullable=True),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.ForeignKeyConstraint(["rotated_from_id"], ["refresh_sessions.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("refresh_sessions", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_refresh_sessions_account_id"), ["account_id"], unique=False)
        batch_op.create_index(batch_op.f("ix_refresh_sessions_jti_hash"), ["jti_hash"], unique=True)
        batch_op.create_index("ix_refresh_sessions_account_active", ["account_id", "revoked_at"], unique=False)
        batch_op.create_index("ix_refresh_sessions_expires_at", ["expires_at"], unique=False)

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("auth_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("nickname", sa.String(length=100), nullable=True),
        sa.Column("neurotype_tags", sa.Text(), nullable=True),
        sa.Column("brain_bucks_balance", sa.Integer(), nullable=False),
        sa.Column("streak_count", sa.Integer(), nullable=False),
        sa.Column("last_activity_date", sa.String(length=10), nullable=True),
        sa.Column("subscription_status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.String(length=26), nullable=True),
        sa.Column("updated_at", sa.String(length=26), nullable=True),
        sa.CheckConstraint("brain_bucks_balance >= 0", name="ck_users_balance_non_negative"),
        sa.ForeignKeyConstraint(["auth_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_users_auth_id"), ["auth_id"], unique=True)

    op.create_table(
        "user_preferences",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("animations_enabled", sa.Integer(), nullable=False),
        sa.Column("theme_mode", sa.String(length=10), nullable=False),
        sa.Column("sound_enabled", sa.Integer(), nullable=False),
        sa.Column("high_contrast", sa.Integer(), nullable=False),
        sa.Column("reminder_frequency", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.String(length=26), nullable=True),
        sa.Column("updated_at", sa.String(length=26), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "tasks",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("priority_level", sa.Integer(), nullable=False),
        sa.Column("is_completed", sa.Integer(), nullable=False),
        sa.Column("due_date", sa.String(length=10), nullable=True),
        sa.Column("completed_at", sa.String(length=26), nullable=True),
        sa.Column("created_at", sa.String(length=26), nullable=True),
        sa.Column("updated_at", sa.String(length=26), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("tasks", schema=None) as batch_op:
        batch_op.create_index("ix_tasks_user_open", ["user_id", "is_completed", "priority_level"], unique=False)

    op.create_table(
        "memory_entries",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        sa.Column("entry_date", sa.String(length=10), nullable=False),
        sa.Column("tags", sa.Text(), nullable=True),
        sa.Column("emotional_tone", sa.String(length=50), nullable=True),
        sa.Column("memory_type", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.String(length=26), nullable=True),
        sa.Column("updated_at", sa.String(length=26), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("memory_entries", schema=None) as batch_op:
        batch_op.create_index("ix_memory_entries_user_date", ["user_id", "entry_date"], unique=False)

    op.create_table(
        "brain_buck_rewards",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cost", sa.Integer(), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("is_redeemed", sa.Integer(), nullable=False),
        sa.Column("redeemed_at", sa.String(length=26), nullable=True),
        sa.Column("is_active", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.String(length=26), nullable=True),
        sa.Column("updated_at", sa.String(length=26), nullable=True),
        sa.CheckConstraint("cost >= 1", name="ck_brain_buck_rewards_cost_positive"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("brain_buck_rewards", schema=None) as batch_op:
        batch_op.create_index("ix_brain_buck_rewards_user_active", ["user_id", "is_active", "cost"], unique=False)

    op.create_table(
        "brain_bucks_ledger",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("action_type", sa.String(length=50), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("reference_id", sa.String(length=36), nullable=True),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.String(length=26), nullable=True),
        sa.CheckConstraint("amount <> 0", name="ck_brain_bucks_ledger_amount_non_zero"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("brain_bucks_ledger", schema=None) as batch_op:
        batch_op.create_index("ix_brain_bucks_ledger_user_created", ["user_id", "created_at"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table("brain_bucks_ledger", schema=None) as batch_op:
        batch_op.drop_index("ix_brain_bucks_ledger_user_created")
    op.drop_table("brain_bucks_ledger")

    with op.batch_alter_table("brain_buck_rewards", schema=None) as batch_op:
        batch_op.drop_index("ix_brain_buck_rewards_user_active")
    op.drop_table("brain_buck_rewards")

    with op.batch_alter_table("memory_entries", schema=None) as batch_op:
        batch_op.drop_index("ix_memory_entries_user_date")
    op.drop_table("memory_entries")

    with op.batch_alter_table("tasks", schema=None) as batch_op:
        batch_op.drop_index("ix_tasks_user_open")
    op.drop_table("tasks")

    op.drop_table("user_preferences")

    with op.batch_alter_table("users", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_users_auth_id"))
    op.drop_table("users")

    with op.batch_alter_table("refresh_sessions", schema=None) as batch_op:
        batch_op.drop_index("ix_refresh_sessions_expires_at")
        batch_op.drop_index("ix_refresh_sessions_account_active")
        batch_op.drop_index(batch_op.f("ix_refresh_sessions_jti_hash"))
        batch_op.drop_index(batch_op.f("ix_refresh_sessions_account_id"))
    op.drop_table("refresh_sessions")

    with op.batch_alter_table("accounts", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_accounts_email"))
    op.drop_table("accounts")
