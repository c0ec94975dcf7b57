"""
测试数据工厂
使用 factory_boy 创建测试数据
"""
from datetime import datetime, timedelta
from decimal import Decimal

import factory
from faker import Faker

from library_data import models

fake = Faker()


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    class Meta:
        abstract = True
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "flush"


class UserFactory(BaseFactory):
    class Meta:
        model = models.User

    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")
    user_name = factory.Sequence(lambda n: f"user_{n}")
    email = factory.Faker("email")
    password = "hashed_password"


class RoleFactory(BaseFactory):
    class Meta:
        model = models.Role

    name = factory.Sequence(lambda n: f"Role{n}")


class MemberFactory(BaseFactory):
    class Meta:
        model = models.Member

    full_name = factory.Faker("name")
    email = factory.Faker("email")
    member_type = "Student"


class CatalogFactory(BaseFactory):
    class Meta:
        model = models.Catalog

    title = factory.Faker("sentence", nb_words=3)
    author = factory.Faker("name")
    isbn = factory.LazyFunction(lambda: fake.isbn13())
    category = "Fiction"
    total_copies = factory.LazyFunction(lambda: fake.random_int(min=5, max=20))
    available_copies = factory.SelfAttribute("total_copies")


class BookFactory(BaseFactory):
    class Meta:
        model = models.Book

    catalog = factory.SubFactory(CatalogFactory)
    barcode = factory.Sequence(lambda n: f"BC{n:06d}")
    status = "Available"


class BookBorrowFactory(BaseFactory):
    class Meta:
        model = models.BookBorrow

    member = factory.SubFactory(MemberFactory)
    due_date = factory.LazyFunction(lambda: datetime.utcnow() + timedelta(days=14))


class BookBorrowDetailFactory(BaseFactory):
    class Meta:
        model = models.BookBorrowDetail

    loan = factory.SubFactory(BookBorrowFactory)
    book = factory.SubFactory(BookFactory)
    catalog = factory.SelfAttribute("book.catalog")
    condition_out = "Good"


class BookReturnFactory(BaseFactory):
    class Meta:
        model = models.BookReturn

    loan = factory.SubFactory(BookBorrowFactory)
    late_days = 0


class LoanReminderFactory(BaseFactory):
    class Meta:
        model = models.LoanReminder

    loan = factory.SubFactory(BookBorrowFactory)
    reminder_type = "Email"


class PurchaseFactory(BaseFactory):
    class Meta:
        model = models.Purchase

    book = factory.SubFactory(BookFactory)
    quantity = 1
    supplier = factory.Faker("company")
    cost = Decimal("12.50")


class PurchaseDetailFactory(BaseFactory):
    class Meta:
        model = models.PurchaseDetail

    purchase = factory.SubFactory(PurchaseFactory)
    book = factory.SubFactory(BookFactory)
    quantity = 2
    unit_price = Decimal("6.25")
    line_total = Decimal("12.50")


class AdjustmentFactory(BaseFactory):
    class Meta:
        model = models.Adjustment

    catalog = factory.SubFactory(CatalogFactory)
    adjustment_type = "Damage"
    quantity_change = -1
    reason = "Damaged on shelf"


class AdjustmentDetailFactory(BaseFactory):
    class Meta:
        model = models.AdjustmentDetail

    adjustment = factory.SubFactory(AdjustmentFactory)
    catalog = factory.SelfAttribute("adjustment.catalog")
    quantity_changed = -1


class LibraryLogFactory(BaseFactory):
    class Meta:
        model = models.LibraryLog

    student_name = factory.Faker("name")
    phone_number = factory.Faker("numerify", text="0#########")
    purpose = "Reading"


class LibraryLogItemFactory(BaseFactory):
    class Meta:
        model = models.LibraryLogItem

    log = factory.SubFactory(LibraryLogFactory)
    book = factory.SubFactory(BookFactory)


class MemberWishlistFactory(BaseFactory):
    class Meta:
        model = models.MemberWishlist

    member = factory.SubFactory(MemberFactory)
    catalog = factory.SubFactory(CatalogFactory)


ALL_FACTORIES = (
    UserFactory,
    RoleFactory,
    MemberFactory,
    CatalogFactory,
    BookFactory,
    BookBorrowFactory,
    BookBorrowDetailFactory,
    BookReturnFactory,
    LoanReminderFactory,
    PurchaseFactory,
    PurchaseDetailFactory,
    AdjustmentFactory,
    AdjustmentDetailFactory,
    LibraryLogFactory,
    LibraryLogItemFactory,
    MemberWishlistFactory,
)


def bind_session(session) -> None:
    for factory_cls in ALL_FACTORIES:
        factory_cls._meta.sqlalchemy_session = session
