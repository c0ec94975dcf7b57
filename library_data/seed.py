from __future__ import annotations

import logging
from typing import Iterable, List

from sqlalchemy.orm import Session

from library_data import models
from library_data.utils.tx import atomic

logger = logging.getLogger(__name__)

DEFAULT_ROLES = ("Admin", "Account", "User", "Manager")


def seed_roles(session: Session, roles: Iterable[str] = DEFAULT_ROLES) -> List[str]:
    """插入缺失的角色，已存在的跳过；返回本次新建的角色名。"""
    existing = {name for (name,) in session.query(models.Role.name).all()}
    created: List[str] = []
    with atomic(session):
        for name in roles:
            if name in existing or name in created:
                continue
            session.add(models.Role(name=name))
            created.append(name)
    if created:
        logger.info("Seeded roles: %s", ", ".join(created))
    else:
        logger.debug("All roles already present, nothing to seed")
    return created
