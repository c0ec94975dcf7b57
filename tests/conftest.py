"""
pytest 配置文件
"""
import os

# 测试环境：在导入 library_data 之前固定环境变量（Settings 在导入时读取）
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from typing import Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from library_data.config import settings
from library_data.database import Base, build_engine
from tests import factories

settings.env = "test"


@pytest.fixture
def test_engine() -> Generator[Engine, None, None]:
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(test_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()
    factories.bind_session(session)
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        factories.bind_session(None)
