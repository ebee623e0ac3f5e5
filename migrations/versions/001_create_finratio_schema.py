"""Create users, category hierarchy, transactions, ratios and evaluation results.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    # ── Users ─────────────────────────────────────────
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # ── Category hierarchy ────────────────────────────
    op.create_table(
        "account_types",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_type_id", sa.Integer(), sa.ForeignKey("account_types.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("account_type_id", "name", name="uq_categories_account_type_name"),
    )
    op.create_index("ix_categories_account_type_id", "categories", ["account_type_id"])
    op.create_table(
        "subcategories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id"), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("category_id", "name", name="uq_subcategories_category_name"),
    )
    op.create_index("ix_subcategories_category_id", "subcategories", ["category_id"])

    # ── Transactions ──────────────────────────────────
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("subcategory_id", sa.Integer(), sa.ForeignKey("subcategories.id"), nullable=False),
        sa.Column("amount", sa.Numeric(15, 2), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("description", sa.String(500), server_default="", nullable=False),
        sa.Column("is_bookmarked", sa.Boolean(), server_default=sa.false(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_transactions_user_date", "transactions", ["user_id", "date"])
    op.create_index(
        "idx_transactions_user_subcategory_date", "transactions", ["user_id", "subcategory_id", "date"]
    )

    # ── Ratios ────────────────────────────────────────
    op.create_table(
        "ratios",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("code", sa.String(100), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("multiplier", sa.Float(), server_default="1", nullable=False),
        sa.Column("lower_bound", sa.Float(), nullable=True),
        sa.Column("upper_bound", sa.Float(), nullable=True),
        sa.Column("is_lower_bound_inclusive", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("is_upper_bound_inclusive", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("ideal_text", sa.Text(), nullable=True),
        sa.Column("policy", sa.String(20), server_default="STANDARD", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
    )
    op.create_table(
        "ratio_components",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("ratio_id", sa.Integer(), sa.ForeignKey("ratios.id"), nullable=False),
        sa.Column("subcategory_id", sa.Integer(), sa.ForeignKey("subcategories.id"), nullable=False),
        sa.Column("side", sa.String(20), nullable=False),
        sa.Column("sign", sa.Integer(), server_default="1", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "ratio_id", "subcategory_id", "side", name="uq_ratio_components_ratio_subcategory_side"
        ),
    )
    op.create_index("ix_ratio_components_ratio_id", "ratio_components", ["ratio_id"])

    # ── Evaluation results ────────────────────────────
    op.create_table(
        "evaluation_results",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("ratio_id", sa.Integer(), sa.ForeignKey("ratios.id"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("value", sa.Numeric(20, 6), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("is_unbounded", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("calculated_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "ratio_id", "start_date", "end_date",
            name="uq_evaluation_results_user_ratio_window",
        ),
    )
    op.create_index("ix_evaluation_results_user_id", "evaluation_results", ["user_id"])


def downgrade() -> None:
    op.drop_table("evaluation_results")
    op.drop_table("ratio_components")
    op.drop_table("ratios")
    op.drop_table("transactions")
    op.drop_table("subcategories")
    op.drop_table("categories")
    op.drop_table("account_types")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
