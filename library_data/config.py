import os
import logging
from dataclasses import dataclass
from typing import Optional


logger = logging.getLogger(__name__)

DEFAULT_CONNECTION_NAME = "DefaultConnection"


@dataclass
class Settings:
    # 原始数据库URL（未提供时回退到 data/library.db 的绝对路径 SQLite）
    database_url_raw: str = os.getenv("DATABASE_URL", "")
    env: str = os.getenv("ENV", os.getenv("APP_ENV", "dev")).lower()
    sql_echo: bool = os.getenv("SQL_ECHO", "false").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # 数据库连接池（仅对非 SQLite 生效）
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "10"))
    db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "20"))
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    db_pool_recycle: int = int(os.getenv("DB_POOL_RECYCLE", "3600"))

    @property
    def database_url(self) -> str:
        """获取数据库连接URL。
        优先使用 DATABASE_URL；否则回退到项目根目录下的 data/library.db。
        """
        if self.database_url_raw:
            return self.database_url_raw

        base_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
        default_db_path = os.path.join(base_dir, "data", "library.db")
        return f"sqlite:///{default_db_path if default_db_path.startswith('/') else '/' + default_db_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def get_connection_string(self, name: str = DEFAULT_CONNECTION_NAME) -> str:
        """按名称读取连接串：CONNECTION_STRING_<NAME>，DefaultConnection 回退到 database_url。"""
        value: Optional[str] = os.getenv(f"CONNECTION_STRING_{name.upper()}")
        if value:
            return value
        if name == DEFAULT_CONNECTION_NAME:
            return self.database_url
        raise RuntimeError(f"Connection string '{name}' is not configured (set CONNECTION_STRING_{name.upper()})")

    def engine_options(self, url: Optional[str] = None) -> dict:
        """create_engine 的公共参数；SQLite 不使用连接池参数。"""
        target = url or self.database_url
        if target.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}, "echo": self.sql_echo}
        return {
            "pool_pre_ping": True,
            "pool_size": self.db_pool_size,
            "max_overflow": self.db_max_overflow,
            "pool_timeout": self.db_pool_timeout,
            "pool_recycle": self.db_pool_recycle,
            "echo": self.sql_echo,
        }


settings = Settings()
