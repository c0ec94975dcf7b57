from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@contextmanager
def atomic(session: Session, nested: bool = False) -> Iterator[Session]:
    """
    写操作的事务边界。

    nested=False：正常退出 commit，异常时整体 rollback。
    nested=True：包在 SAVEPOINT 里，异常只回滚这一段，外层事务保留，由调用方决定何时提交。
    两种情况下异常（IntegrityError 等）都原样向上抛。
    """
    if nested:
        try:
            with session.begin_nested():
                yield session
        except Exception as exc:
            logger.debug("savepoint rolled back: %s", type(exc).__name__)
            raise
        return

    try:
        yield session
        session.commit()
    except Exception as exc:
        session.rollback()
        logger.warning("transaction rolled back: %s", type(exc).__name__)
        raise
