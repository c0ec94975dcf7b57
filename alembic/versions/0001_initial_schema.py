"""initial library schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(nullable: bool = False):
    # modified 的自动刷新由 ORM onupdate 完成，库端只提供插入默认值
    return [
        sa.Column("created", sa.DateTime(), nullable=nullable, server_default=sa.func.now()),
        sa.Column("modified", sa.DateTime(), nullable=nullable, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("first_name", sa.String(length=50), nullable=False),
        sa.Column("last_name", sa.String(length=50), nullable=False),
        sa.Column("user_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("password", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("gender", sa.String(length=50), nullable=True),
        sa.Column("date_of_birth", sa.DateTime(), nullable=True),
        sa.Column("role_name", sa.String(length=100), nullable=True),
        sa.Column("profile_picture_path", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("password_reset_otp_hash", sa.String(length=200), nullable=True),
        sa.Column("password_reset_otp_expires_utc", sa.DateTime(), nullable=True),
        *_timestamps(nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )

    op.create_table(
        "roles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_roles"),
        sa.UniqueConstraint("name", name="uq_roles_name"),
    )

    op.create_table(
        "permissions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("claim_name", sa.String(length=100), nullable=False),
        sa.Column("claim_value", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_permissions"),
    )

    op.create_table(
        "members",
        sa.Column("member_id", sa.Uuid(), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("gender", sa.String(length=50), nullable=True),
        sa.Column("email", sa.String(length=100), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("member_type", sa.String(length=50), nullable=False),
        sa.Column("join_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("modified", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("profile_picture_path", sa.String(length=500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("di_card_number", sa.String(length=100), nullable=True),
        sa.Column("telegram_chat_id", sa.String(length=100), nullable=True),
        sa.Column("telegram_username", sa.String(length=100), nullable=True),
        sa.Column("telegram_user_id", sa.BigInteger(), nullable=True),
        sa.Column("telegram_pair_token", sa.String(length=100), nullable=True),
        sa.Column("created_by", sa.String(length=100), nullable=True),
        sa.Column("password_hash", sa.String(length=200), nullable=True),
        sa.Column("password_reset_token", sa.Uuid(), nullable=True),
        sa.Column("password_reset_expiry", sa.DateTime(), nullable=True),
        sa.Column("password_reset_otp", sa.String(length=10), nullable=True),
        sa.Column("password_reset_otp_expiry", sa.DateTime(), nullable=True),
        sa.Column("last_password_reset_at", sa.DateTime(), nullable=True),
        sa.Column("allow_self_password_reset", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("staff_only_password_reset", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("user_id", sa.Uuid(), nullable=True),
        sa.Column("last_password_reset_by_user_id", sa.Uuid(), nullable=True),
        sa.PrimaryKeyConstraint("member_id", name="pk_members"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_members_user_id_users", ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(
            ["last_password_reset_by_user_id"], ["users.id"], name="fk_members_last_password_reset_by_user_id_users"
        ),
    )
    op.create_index("ix_members_user_id", "members", ["user_id"], unique=False)

    op.create_table(
        "catalogs",
        sa.Column("catalog_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("isbn", sa.String(length=50), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("total_copies", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("available_copies", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("image_path", sa.String(length=500), nullable=True),
        sa.Column("pdf_file_path", sa.String(length=500), nullable=True),
        sa.Column("borrow_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("in_library_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("acquisition_date", sa.DateTime(), nullable=True, server_default=sa.func.now()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("catalog_id", name="pk_catalogs"),
        sa.CheckConstraint("available_copies >= 0", name="ck_catalogs_available_copies_non_negative"),
        sa.CheckConstraint("total_copies >= 0", name="ck_catalogs_total_copies_non_negative"),
        sa.CheckConstraint("available_copies <= total_copies", name="ck_catalogs_available_le_total"),
    )

    op.create_table(
        "books",
        sa.Column("book_id", sa.Integer(), nullable=False),
        sa.Column("catalog_id", sa.Uuid(), nullable=False),
        sa.Column("barcode", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("acquisition_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("book_id", name="pk_books"),
        sa.ForeignKeyConstraint(
            ["catalog_id"], ["catalogs.catalog_id"], name="fk_books_catalog_id_catalogs", ondelete="RESTRICT"
        ),
    )
    op.create_index("ix_books_catalog_id", "books", ["catalog_id"], unique=False)
    op.create_index("ix_books_barcode", "books", ["barcode"], unique=True)

    op.create_table(
        "book_borrows",
        sa.Column("loan_id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Uuid(), nullable=False),
        sa.Column("loan_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("due_date", sa.DateTime(), nullable=False),
        sa.Column("is_returned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("borrowing_fee", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("is_paid", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deposit_amount", sa.Numeric(10, 2), nullable=True),
        sa.PrimaryKeyConstraint("loan_id", name="pk_book_borrows"),
        sa.ForeignKeyConstraint(
            ["member_id"], ["members.member_id"], name="fk_book_borrows_member_id_members", ondelete="RESTRICT"
        ),
    )
    op.create_index("ix_book_borrows_member_id", "book_borrows", ["member_id"], unique=False)

    op.create_table(
        "book_borrow_details",
        sa.Column("loan_book_detail_id", sa.Integer(), nullable=False),
        sa.Column("loan_id", sa.Integer(), nullable=False),
        sa.Column("catalog_id", sa.Uuid(), nullable=False),
        sa.Column("book_id", sa.Integer(), nullable=False),
        sa.Column("condition_out", sa.String(length=100), nullable=False),
        sa.Column("condition_in", sa.String(length=100), nullable=True),
        sa.Column("fine_detail_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("fine_detail_reason", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("loan_book_detail_id", name="pk_book_borrow_details"),
        sa.ForeignKeyConstraint(
            ["loan_id"], ["book_borrows.loan_id"], name="fk_book_borrow_details_loan_id_book_borrows", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["catalog_id"], ["catalogs.catalog_id"], name="fk_book_borrow_details_catalog_id_catalogs", ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], name="fk_book_borrow_details_book_id_books", ondelete="RESTRICT"
        ),
    )
    op.create_index("ix_book_borrow_details_loan_id", "book_borrow_details", ["loan_id"], unique=False)
    op.create_index("ix_book_borrow_details_catalog_id", "book_borrow_details", ["catalog_id"], unique=False)
    op.create_index("ix_book_borrow_details_book_id", "book_borrow_details", ["book_id"], unique=False)

    op.create_table(
        "book_returns",
        sa.Column("return_id", sa.Integer(), nullable=False),
        sa.Column("loan_id", sa.Integer(), nullable=False),
        sa.Column("return_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("late_days", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("fine_amount", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("extra_charge", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("amount_paid", sa.Numeric(10, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("refund_amount", sa.Numeric(10, 2), nullable=True),
        sa.Column("condition_on_return", sa.String(length=100), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint("return_id", name="pk_book_returns"),
        sa.ForeignKeyConstraint(
            ["loan_id"], ["book_borrows.loan_id"], name="fk_book_returns_loan_id_book_borrows", ondelete="CASCADE"
        ),
        sa.CheckConstraint("late_days >= 0", name="ck_book_returns_late_days_non_negative"),
    )
    op.create_index("ix_book_returns_loan_id", "book_returns", ["loan_id"], unique=False)

    op.create_table(
        "loan_reminders",
        sa.Column("reminder_id", sa.Integer(), nullable=False),
        sa.Column("loan_id", sa.Integer(), nullable=False),
        sa.Column("sent_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("reminder_type", sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint("reminder_id", name="pk_loan_reminders"),
        sa.ForeignKeyConstraint(
            ["loan_id"], ["book_borrows.loan_id"], name="fk_loan_reminders_loan_id_book_borrows", ondelete="CASCADE"
        ),
    )
    op.create_index("ix_loan_reminders_loan_id", "loan_reminders", ["loan_id"], unique=False)

    op.create_table(
        "purchases",
        sa.Column("purchase_id", sa.Uuid(), nullable=False),
        sa.Column("book_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("purchase_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("supplier", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("cost", sa.Numeric(18, 2), nullable=False),
        sa.Column("notes", sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("purchase_id", name="pk_purchases"),
        sa.ForeignKeyConstraint(["book_id"], ["books.book_id"], name="fk_purchases_book_id_books", ondelete="RESTRICT"),
        sa.CheckConstraint("quantity >= 1", name="ck_purchases_quantity_positive"),
    )
    op.create_index("ix_purchases_book_id", "purchases", ["book_id"], unique=False)

    op.create_table(
        "purchase_details",
        sa.Column("purchase_detail_id", sa.Integer(), nullable=False),
        sa.Column("purchase_id", sa.Uuid(), nullable=False),
        sa.Column("book_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("line_total", sa.Numeric(18, 2), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("purchase_detail_id", name="pk_purchase_details"),
        sa.ForeignKeyConstraint(
            ["purchase_id"], ["purchases.purchase_id"], name="fk_purchase_details_purchase_id_purchases", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], name="fk_purchase_details_book_id_books", ondelete="RESTRICT"
        ),
        sa.CheckConstraint("quantity >= 1", name="ck_purchase_details_quantity_positive"),
    )
    op.create_index("ix_purchase_details_purchase_id", "purchase_details", ["purchase_id"], unique=False)
    op.create_index("ix_purchase_details_book_id", "purchase_details", ["book_id"], unique=False)

    op.create_table(
        "adjustments",
        sa.Column("adjustment_id", sa.Uuid(), nullable=False),
        sa.Column("catalog_id", sa.Uuid(), nullable=False),
        sa.Column("adjustment_type", sa.String(length=50), nullable=False),
        sa.Column("quantity_change", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("adjustment_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("reason", sa.String(length=500), nullable=False),
        sa.Column("adjusted_by_user_id", sa.Uuid(), nullable=True),
        *_timestamps(nullable=True),
        sa.PrimaryKeyConstraint("adjustment_id", name="pk_adjustments"),
        sa.ForeignKeyConstraint(
            ["catalog_id"], ["catalogs.catalog_id"], name="fk_adjustments_catalog_id_catalogs", ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["adjusted_by_user_id"], ["users.id"], name="fk_adjustments_adjusted_by_user_id_users", ondelete="SET NULL"
        ),
    )
    op.create_index("ix_adjustments_catalog_id", "adjustments", ["catalog_id"], unique=False)
    op.create_index("ix_adjustments_adjusted_by_user_id", "adjustments", ["adjusted_by_user_id"], unique=False)

    op.create_table(
        "adjustment_details",
        sa.Column("adjustment_detail_id", sa.Integer(), nullable=False),
        sa.Column("adjustment_id", sa.Uuid(), nullable=False),
        sa.Column("catalog_id", sa.Uuid(), nullable=False),
        sa.Column("book_id", sa.Integer(), nullable=True),
        sa.Column("quantity_changed", sa.Integer(), nullable=False),
        sa.Column("note", sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint("adjustment_detail_id", name="pk_adjustment_details"),
        sa.ForeignKeyConstraint(
            ["adjustment_id"],
            ["adjustments.adjustment_id"],
            name="fk_adjustment_details_adjustment_id_adjustments",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["catalog_id"], ["catalogs.catalog_id"], name="fk_adjustment_details_catalog_id_catalogs", ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(["book_id"], ["books.book_id"], name="fk_adjustment_details_book_id_books"),
    )
    op.create_index("ix_adjustment_details_adjustment_id", "adjustment_details", ["adjustment_id"], unique=False)
    op.create_index("ix_adjustment_details_catalog_id", "adjustment_details", ["catalog_id"], unique=False)
    op.create_index("ix_adjustment_details_book_id", "adjustment_details", ["book_id"], unique=False)

    op.create_table(
        "library_logs",
        sa.Column("log_id", sa.Integer(), nullable=False),
        sa.Column("student_name", sa.String(length=150), nullable=False),
        sa.Column("phone_number", sa.String(length=20), nullable=True),
        sa.Column("gender", sa.String(length=10), nullable=True),
        sa.Column("visit_date", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("purpose", sa.String(length=200), nullable=True),
        sa.Column("notes", sa.String(length=255), nullable=True),
        sa.Column("created_utc", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending"),
        sa.Column("approved_utc", sa.DateTime(), nullable=True),
        sa.Column("returned_utc", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("log_id", name="pk_library_logs"),
    )
    op.create_index("ix_library_logs_visit_date", "library_logs", ["visit_date"], unique=False)
    op.create_index("ix_library_logs_status", "library_logs", ["status"], unique=False)

    op.create_table(
        "library_log_items",
        sa.Column("log_item_id", sa.Integer(), nullable=False),
        sa.Column("log_id", sa.Integer(), nullable=False),
        sa.Column("book_id", sa.Integer(), nullable=False),
        sa.Column("returned_date", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("log_item_id", name="pk_library_log_items"),
        sa.ForeignKeyConstraint(
            ["log_id"], ["library_logs.log_id"], name="fk_library_log_items_log_id_library_logs", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], name="fk_library_log_items_book_id_books", ondelete="RESTRICT"
        ),
        sa.UniqueConstraint("log_id", "book_id", name="uq_library_log_items_log_id_book_id"),
    )
    op.create_index("ix_library_log_items_book_id", "library_log_items", ["book_id"], unique=False)

    op.create_table(
        "member_wishlists",
        sa.Column("wishlist_id", sa.Integer(), nullable=False),
        sa.Column("member_id", sa.Uuid(), nullable=False),
        sa.Column("catalog_id", sa.Uuid(), nullable=False),
        sa.Column("added_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("wishlist_id", name="pk_member_wishlists"),
        sa.ForeignKeyConstraint(
            ["member_id"], ["members.member_id"], name="fk_member_wishlists_member_id_members", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["catalog_id"], ["catalogs.catalog_id"], name="fk_member_wishlists_catalog_id_catalogs", ondelete="CASCADE"
        ),
        sa.UniqueConstraint("member_id", "catalog_id", name="uq_member_wishlists_member_id_catalog_id"),
    )
    op.create_index("ix_member_wishlists_catalog_id", "member_wishlists", ["catalog_id"], unique=False)

    op.create_table(
        "histories",
        sa.Column("id", sa.BigInteger().with_variant(sa.Integer(), "sqlite"), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("action_type", sa.String(length=50), nullable=False),
        sa.Column("loan_id", sa.Integer(), nullable=True),
        sa.Column("log_id", sa.Integer(), nullable=True),
        sa.Column("member_id", sa.Uuid(), nullable=True),
        sa.Column("catalog_id", sa.Uuid(), nullable=True),
        sa.Column("book_id", sa.Integer(), nullable=True),
        sa.Column("member_name", sa.String(length=255), nullable=True),
        sa.Column("book_title", sa.String(length=300), nullable=True),
        sa.Column("catalog_title", sa.String(length=300), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=True),
        sa.Column("occurred_utc", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("loan_date", sa.DateTime(), nullable=True),
        sa.Column("due_date", sa.DateTime(), nullable=True),
        sa.Column("return_date", sa.DateTime(), nullable=True),
        sa.Column("borrowing_fee", sa.Numeric(18, 2), nullable=True),
        sa.Column("fine_amount", sa.Numeric(18, 2), nullable=True),
        sa.Column("amount_paid", sa.Numeric(18, 2), nullable=True),
        sa.Column("deposit_amount", sa.Numeric(18, 2), nullable=True),
        sa.Column("location_type", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_histories"),
    )
    op.create_index("ix_histories_loan_id", "histories", ["loan_id"], unique=False)
    op.create_index("ix_histories_occurred_utc", "histories", ["occurred_utc"], unique=False)
    op.create_index("ix_histories_entity_action", "histories", ["entity_type", "action_type"], unique=False)


def downgrade() -> None:
    op.drop_table("histories")
    op.drop_table("member_wishlists")
    op.drop_table("library_log_items")
    op.drop_table("library_logs")
    op.drop_table("adjustment_details")
    op.drop_table("adjustments")
    op.drop_table("purchase_details")
    op.drop_table("purchases")
    op.drop_table("loan_reminders")
    op.drop_table("book_returns")
    op.drop_table("book_borrow_details")
    op.drop_table("book_borrows")
    op.drop_table("books")
    op.drop_table("catalogs")
    op.drop_table("members")
    op.drop_table("permissions")
    op.drop_table("roles")
    op.drop_table("users")
