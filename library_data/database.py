import logging
from typing import Generator, Optional

from sqlalchemy import MetaData, create_engine, event, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from library_data.config import settings

logger = logging.getLogger(__name__)

# 约束命名规则：模型元数据与 Alembic 迁移保持一致
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def enable_sqlite_foreign_keys(engine: Engine) -> Engine:
    """SQLite 默认不检查外键；为每个新连接打开 foreign_keys，使级联/限制删除生效。"""
    if engine.dialect.name == "sqlite" and not event.contains(engine, "connect", _set_sqlite_pragma):
        event.listen(engine, "connect", _set_sqlite_pragma)
    return engine


def build_engine(url: Optional[str] = None, **overrides) -> Engine:
    target = url or settings.database_url
    options = settings.engine_options(target)
    options.update(overrides)
    return enable_sqlite_foreign_keys(create_engine(target, **options))


engine = build_engine()

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

from library_data import models as _models  # noqa: F401,E402 ensure model metadata registered


def init_db(bind: Optional[Engine] = None) -> None:
    """仅在开发/测试环境且数据库为空时使用 create_all，生产必须使用 Alembic 迁移。"""
    target = bind or engine
    if settings.env not in ("dev", "development", "test", "testing"):
        logger.info("init_db skipped for %s environment; run alembic upgrade head", settings.env)
        return
    try:
        with target.connect() as conn:
            existing = inspect(conn).get_table_names()
        if not existing:
            Base.metadata.create_all(bind=target)
            logger.info("Created %d tables on %s", len(Base.metadata.tables), target.url)
        else:
            logger.debug("Database already has %d tables, skip create_all", len(existing))
    except Exception as e:
        logger.error(f"数据库初始化失败: {e}", exc_info=True)
        raise


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
