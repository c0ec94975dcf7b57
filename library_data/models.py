import enum
import uuid

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    false,
    func,
    text,
    true,
)
from sqlalchemy.orm import relationship

from library_data.database import Base


class LibraryLogStatus(str, enum.Enum):
    pending = "Pending"
    approved = "Approved"
    returned = "Returned"


# --- 账户与权限 ---

class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    user_name = Column(String(100), nullable=False)
    email = Column(String(100), nullable=False)
    password = Column(String(200), nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(String(255), nullable=True)
    gender = Column(String(50), nullable=True)
    date_of_birth = Column(DateTime, nullable=True)
    role_name = Column(String(100), nullable=True)
    profile_picture_path = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    notes = Column(String(500), nullable=True)
    password_reset_otp_hash = Column(String(200), nullable=True)
    password_reset_otp_expires_utc = Column(DateTime, nullable=True)
    created = Column(DateTime, server_default=func.now(), nullable=True)
    modified = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.user_name!r}>"


class Role(Base):
    __tablename__ = "roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(256), nullable=False, unique=True)


class Permission(Base):
    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True)
    claim_name = Column(String(100), nullable=False)
    claim_value = Column(String(100), nullable=False)


# --- 会员 ---

class Member(Base):
    __tablename__ = "members"

    member_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    full_name = Column(String(255), nullable=False)
    gender = Column(String(50), nullable=True)
    email = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(String(255), nullable=True)
    member_type = Column(String(50), nullable=False)
    join_date = Column(DateTime, server_default=func.now(), nullable=False)
    modified = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
    profile_picture_path = Column(String(500), nullable=True)
    is_active = Column(Boolean, default=True, server_default=true(), nullable=False)
    notes = Column(String(500), nullable=True)
    di_card_number = Column(String(100), nullable=True)
    telegram_chat_id = Column(String(100), nullable=True)
    telegram_username = Column(String(100), nullable=True)
    telegram_user_id = Column(BigInteger, nullable=True)
    telegram_pair_token = Column(String(100), nullable=True)
    created_by = Column(String(100), nullable=True)
    password_hash = Column(String(200), nullable=True)
    password_reset_token = Column(Uuid, nullable=True)
    password_reset_expiry = Column(DateTime, nullable=True)
    password_reset_otp = Column(String(10), nullable=True)
    password_reset_otp_expiry = Column(DateTime, nullable=True)
    last_password_reset_at = Column(DateTime, nullable=True)
    allow_self_password_reset = Column(Boolean, default=False, server_default=false(), nullable=False)
    staff_only_password_reset = Column(Boolean, default=True, server_default=true(), nullable=False)

    # 关联账户可选；删除仍被引用的 User 会被数据库拒绝
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True, index=True)
    last_password_reset_by_user_id = Column(Uuid, ForeignKey("users.id"), nullable=True)

    user = relationship("User", foreign_keys=[user_id])
    last_password_reset_by_user = relationship("User", foreign_keys=[last_password_reset_by_user_id])
    loans = relationship("BookBorrow", back_populates="member", passive_deletes="all")
    wishlist = relationship(
        "MemberWishlist", back_populates="member", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def has_linked_user(self) -> bool:
        return self.user_id is not None


# --- 馆藏 ---

class Catalog(Base):
    __tablename__ = "catalogs"

    catalog_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    author = Column(String(255), nullable=False)
    isbn = Column(String(50), nullable=True)
    category = Column(String(100), nullable=False)
    total_copies = Column(Integer, default=0, server_default=text("0"), nullable=False)
    available_copies = Column(Integer, default=0, server_default=text("0"), nullable=False)
    image_path = Column(String(500), nullable=True)
    pdf_file_path = Column(String(500), nullable=True)
    borrow_count = Column(Integer, default=0, server_default=text("0"), nullable=False)
    in_library_count = Column(Integer, default=0, server_default=text("0"), nullable=False)
    acquisition_date = Column(DateTime, server_default=func.now(), nullable=True)
    created = Column(DateTime, server_default=func.now(), nullable=False)
    modified = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    books = relationship("Book", back_populates="catalog", passive_deletes="all")

    __table_args__ = (
        CheckConstraint("available_copies >= 0", name="available_copies_non_negative"),
        CheckConstraint("total_copies >= 0", name="total_copies_non_negative"),
        CheckConstraint("available_copies <= total_copies", name="available_le_total"),
    )


class Book(Base):
    """单册实体（条码唯一），归属于某个 Catalog。"""

    __tablename__ = "books"

    book_id = Column(Integer, primary_key=True)
    catalog_id = Column(Uuid, ForeignKey("catalogs.catalog_id", ondelete="RESTRICT"), nullable=False, index=True)
    barcode = Column(String(50), nullable=False)
    status = Column(String(50), nullable=False)
    location = Column(String(255), nullable=True)
    acquisition_date = Column(DateTime, server_default=func.now(), nullable=False)
    created = Column(DateTime, server_default=func.now(), nullable=False)
    modified = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    catalog = relationship("Catalog", back_populates="books")
    purchases = relationship("Purchase", back_populates="book", passive_deletes="all")
    purchase_details = relationship("PurchaseDetail", back_populates="book", passive_deletes="all")
    borrow_details = relationship("BookBorrowDetail", back_populates="book", passive_deletes="all")

    __table_args__ = (
        Index("ix_books_barcode", "barcode", unique=True),
    )

    @property
    def title(self):
        return self.catalog.title if self.catalog is not None else None


# --- 借阅 ---

class BookBorrow(Base):
    __tablename__ = "book_borrows"

    loan_id = Column(Integer, primary_key=True)
    member_id = Column(Uuid, ForeignKey("members.member_id", ondelete="RESTRICT"), nullable=False, index=True)
    loan_date = Column(DateTime, server_default=func.now(), nullable=False)
    due_date = Column(DateTime, nullable=False)
    is_returned = Column(Boolean, default=False, server_default=false(), nullable=False)
    borrowing_fee = Column(Numeric(10, 2), default=0, server_default=text("0"), nullable=False)
    is_paid = Column(Boolean, default=False, server_default=false(), nullable=False)
    deposit_amount = Column(Numeric(10, 2), nullable=True)

    member = relationship("Member", back_populates="loans")
    details = relationship(
        "BookBorrowDetail", back_populates="loan", cascade="all, delete-orphan", passive_deletes=True
    )
    returns = relationship(
        "BookReturn", back_populates="loan", cascade="all, delete-orphan", passive_deletes=True
    )
    reminders = relationship(
        "LoanReminder", back_populates="loan", cascade="all, delete-orphan", passive_deletes=True
    )


class BookBorrowDetail(Base):
    __tablename__ = "book_borrow_details"

    loan_book_detail_id = Column(Integer, primary_key=True)
    loan_id = Column(Integer, ForeignKey("book_borrows.loan_id", ondelete="CASCADE"), nullable=False, index=True)
    catalog_id = Column(Uuid, ForeignKey("catalogs.catalog_id", ondelete="RESTRICT"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.book_id", ondelete="RESTRICT"), nullable=False, index=True)
    condition_out = Column(String(100), nullable=False)
    condition_in = Column(String(100), nullable=True)
    fine_detail_amount = Column(Numeric(10, 2), nullable=True)
    fine_detail_reason = Column(String(500), nullable=True)
    created = Column(DateTime, server_default=func.now(), nullable=False)
    modified = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    loan = relationship("BookBorrow", back_populates="details")
    catalog = relationship("Catalog")
    book = relationship("Book", back_populates="borrow_details")


class BookReturn(Base):
    __tablename__ = "book_returns"

    return_id = Column(Integer, primary_key=True)
    loan_id = Column(Integer, ForeignKey("book_borrows.loan_id", ondelete="CASCADE"), nullable=False, index=True)
    return_date = Column(DateTime, server_default=func.now(), nullable=False)
    late_days = Column(Integer, default=0, server_default=text("0"), nullable=False)
    fine_amount = Column(Numeric(10, 2), default=0, server_default=text("0"), nullable=False)
    extra_charge = Column(Numeric(10, 2), default=0, server_default=text("0"), nullable=False)
    amount_paid = Column(Numeric(10, 2), default=0, server_default=text("0"), nullable=False)
    refund_amount = Column(Numeric(10, 2), nullable=True)
    condition_on_return = Column(String(100), nullable=True)
    notes = Column(String(500), nullable=True)

    loan = relationship("BookBorrow", back_populates="returns")

    __table_args__ = (
        CheckConstraint("late_days >= 0", name="late_days_non_negative"),
    )


class LoanReminder(Base):
    __tablename__ = "loan_reminders"

    reminder_id = Column(Integer, primary_key=True)
    loan_id = Column(Integer, ForeignKey("book_borrows.loan_id", ondelete="CASCADE"), nullable=False, index=True)
    sent_date = Column(DateTime, server_default=func.now(), nullable=False)
    reminder_type = Column(String(50), nullable=False)  # Email / SMS / Call / Overdue

    loan = relationship("BookBorrow", back_populates="reminders")


# --- 采购 ---

class Purchase(Base):
    __tablename__ = "purchases"

    purchase_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    book_id = Column(Integer, ForeignKey("books.book_id", ondelete="RESTRICT"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    purchase_date = Column(DateTime, server_default=func.now(), nullable=False)
    supplier = Column(String(255), default="", server_default="", nullable=False)
    cost = Column(Numeric(18, 2), nullable=False)
    notes = Column(String(500), nullable=True)
    created = Column(DateTime, server_default=func.now(), nullable=False)
    modified = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    book = relationship("Book", back_populates="purchases")
    details = relationship(
        "PurchaseDetail", back_populates="purchase", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="quantity_positive"),
    )


class PurchaseDetail(Base):
    __tablename__ = "purchase_details"

    purchase_detail_id = Column(Integer, primary_key=True)
    purchase_id = Column(Uuid, ForeignKey("purchases.purchase_id", ondelete="CASCADE"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.book_id", ondelete="RESTRICT"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    line_total = Column(Numeric(18, 2), nullable=False)  # quantity * unit_price
    created = Column(DateTime, server_default=func.now(), nullable=False)
    modified = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

    purchase = relationship("Purchase", back_populates="details")
    book = relationship("Book", back_populates="purchase_details")

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="quantity_positive"),
    )


# --- 库存调整 ---

class Adjustment(Base):
    __tablename__ = "adjustments"

    adjustment_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    catalog_id = Column(Uuid, ForeignKey("catalogs.catalog_id", ondelete="RESTRICT"), nullable=False, index=True)
    adjustment_type = Column(String(50), nullable=False)  # Damage / Lost
    quantity_change = Column(Integer, default=0, server_default=text("0"), nullable=False)
    adjustment_date = Column(DateTime, server_default=func.now(), nullable=False)
    reason = Column(String(500), nullable=False)
    adjusted_by_user_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created = Column(DateTime, server_default=func.now(), nullable=True)
    modified = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=True)

    catalog = relationship("Catalog")
    adjusted_by_user = relationship("User")
    details = relationship(
        "AdjustmentDetail", back_populates="adjustment", cascade="all, delete-orphan", passive_deletes=True
    )


class AdjustmentDetail(Base):
    __tablename__ = "adjustment_details"

    adjustment_detail_id = Column(Integer, primary_key=True)
    adjustment_id = Column(
        Uuid, ForeignKey("adjustments.adjustment_id", ondelete="CASCADE"), nullable=False, index=True
    )
    catalog_id = Column(Uuid, ForeignKey("catalogs.catalog_id", ondelete="RESTRICT"), nullable=False, index=True)
    book_id = Column(Integer, ForeignKey("books.book_id"), nullable=True, index=True)
    quantity_changed = Column(Integer, nullable=False)
    note = Column(String(500), nullable=True)

    adjustment = relationship("Adjustment", back_populates="details")
    catalog = relationship("Catalog")
    book = relationship("Book")


# --- 到馆登记 ---

class LibraryLog(Base):
    __tablename__ = "library_logs"

    log_id = Column(Integer, primary_key=True)
    student_name = Column(String(150), nullable=False)
    phone_number = Column(String(20), nullable=True)
    gender = Column(String(10), nullable=True)
    visit_date = Column(DateTime, server_default=func.now(), nullable=False, index=True)
    purpose = Column(String(200), nullable=True)
    notes = Column(String(255), nullable=True)
    created_utc = Column(DateTime, server_default=func.now(), nullable=False)
    status = Column(
        String(20),
        default=LibraryLogStatus.pending.value,
        server_default=LibraryLogStatus.pending.value,
        nullable=False,
        index=True,
    )
    approved_utc = Column(DateTime, nullable=True)
    returned_utc = Column(DateTime, nullable=True)

    items = relationship(
        "LibraryLogItem", back_populates="log", cascade="all, delete-orphan", passive_deletes=True
    )


class LibraryLogItem(Base):
    __tablename__ = "library_log_items"

    log_item_id = Column(Integer, primary_key=True)
    log_id = Column(Integer, ForeignKey("library_logs.log_id", ondelete="CASCADE"), nullable=False)
    book_id = Column(Integer, ForeignKey("books.book_id", ondelete="RESTRICT"), nullable=False, index=True)
    returned_date = Column(DateTime, nullable=True)

    log = relationship("LibraryLog", back_populates="items")
    book = relationship("Book")

    __table_args__ = (
        UniqueConstraint("log_id", "book_id"),
    )

    @property
    def book_title(self):
        return self.book.title if self.book is not None else None


class MemberWishlist(Base):
    __tablename__ = "member_wishlists"

    wishlist_id = Column(Integer, primary_key=True)
    member_id = Column(Uuid, ForeignKey("members.member_id", ondelete="CASCADE"), nullable=False)
    catalog_id = Column(Uuid, ForeignKey("catalogs.catalog_id", ondelete="CASCADE"), nullable=False, index=True)
    added_at = Column(DateTime, server_default=func.now(), nullable=False)

    member = relationship("Member", back_populates="wishlist")
    catalog = relationship("Catalog")

    __table_args__ = (
        UniqueConstraint("member_id", "catalog_id"),
    )


# --- 历史快照（无外键，记录发生时的冗余信息） ---

class History(Base):
    __tablename__ = "histories"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True)
    entity_type = Column(String(50), nullable=False)
    action_type = Column(String(50), nullable=False)
    loan_id = Column(Integer, nullable=True, index=True)
    log_id = Column(Integer, nullable=True)
    member_id = Column(Uuid, nullable=True)
    catalog_id = Column(Uuid, nullable=True)
    book_id = Column(Integer, nullable=True)
    member_name = Column(String(255), nullable=True)
    book_title = Column(String(300), nullable=True)
    catalog_title = Column(String(300), nullable=True)
    quantity = Column(Integer, nullable=True)
    occurred_utc = Column(DateTime, server_default=func.now(), nullable=False, index=True)
    loan_date = Column(DateTime, nullable=True)
    due_date = Column(DateTime, nullable=True)
    return_date = Column(DateTime, nullable=True)
    borrowing_fee = Column(Numeric(18, 2), nullable=True)
    fine_amount = Column(Numeric(18, 2), nullable=True)
    amount_paid = Column(Numeric(18, 2), nullable=True)
    deposit_amount = Column(Numeric(18, 2), nullable=True)
    location_type = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_histories_entity_action", "entity_type", "action_type"),
    )
