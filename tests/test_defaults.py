from datetime import datetime

from sqlalchemy import text

from library_data import models
from tests.factories import (
    BookBorrowFactory,
    BookFactory,
    CatalogFactory,
    LibraryLogFactory,
    LibraryLogItemFactory,
    MemberFactory,
    UserFactory,
)


def test_library_log_status_defaults_to_pending(db_session):
    log = LibraryLogFactory()
    db_session.commit()
    db_session.refresh(log)

    assert log.status == models.LibraryLogStatus.pending.value
    assert log.visit_date is not None
    assert log.created_utc is not None
    assert log.approved_utc is None


def test_library_log_server_default_applies_to_raw_insert(db_session):
    db_session.execute(text("INSERT INTO library_logs (student_name) VALUES ('Raw Insert')"))
    db_session.commit()

    status = db_session.execute(
        text("SELECT status FROM library_logs WHERE student_name = 'Raw Insert'")
    ).scalar_one()
    assert status == "Pending"


def test_loan_flags_default_to_false(db_session):
    loan = BookBorrowFactory()
    db_session.commit()
    db_session.refresh(loan)

    assert loan.is_returned is False
    assert loan.is_paid is False
    assert loan.loan_date is not None
    assert loan.deposit_amount is None


def test_member_defaults(db_session):
    member = MemberFactory()
    db_session.commit()
    db_session.refresh(member)

    assert member.is_active is True
    assert member.allow_self_password_reset is False
    assert member.staff_only_password_reset is True
    assert member.join_date is not None
    assert member.has_linked_user is False


def test_catalog_counters_default_to_zero(db_session):
    catalog = models.Catalog(title="Dune", author="Frank Herbert", category="SciFi")
    db_session.add(catalog)
    db_session.commit()
    db_session.refresh(catalog)

    assert catalog.total_copies == 0
    assert catalog.available_copies == 0
    assert catalog.borrow_count == 0
    assert catalog.in_library_count == 0
    assert catalog.created is not None and catalog.modified is not None


def test_user_timestamps_populated(db_session):
    user = UserFactory()
    db_session.commit()
    db_session.refresh(user)

    assert user.is_active is True
    assert user.created is not None
    assert user.modified is not None


def test_log_item_exposes_book_title(db_session):
    item = LibraryLogItemFactory(book__catalog=CatalogFactory(title="The Hobbit"))

    assert item.book_title == "The Hobbit"
    assert item.book.title == "The Hobbit"


def test_modified_advances_on_update(db_session):
    catalog = CatalogFactory(title="Old Title")
    book = BookFactory(catalog=catalog)
    stale = datetime(2000, 1, 1)
    catalog.modified = stale
    book.modified = stale
    db_session.commit()

    catalog.title = "New Title"
    book.location = "Shelf B2"
    db_session.commit()
    db_session.refresh(catalog)
    db_session.refresh(book)

    assert catalog.modified > stale
    assert book.modified > stale
    # created 不随更新变化
    assert catalog.created is not None and catalog.created <= catalog.modified


def test_modified_untouched_without_changes(db_session):
    member = MemberFactory()
    stale = datetime(2000, 1, 1)
    member.modified = stale
    db_session.commit()

    db_session.refresh(member)
    assert member.modified == stale
