"""配置模块：负责加载和缓存基于环境变量的缓存层设置。"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_NAME = "cloud_space_cache.db"


def _as_bool(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


# 以当前工作目录为基准加载环境文件，支持通过 ENV_FILE/ENVIRONMENT 定制优先级。
def _load_environment(base_dir: Path) -> None:
    env_file_override = os.getenv("ENV_FILE")
    if env_file_override:
        candidate = base_dir / env_file_override
        if candidate.exists():
            load_dotenv(candidate, override=True, encoding="utf-8")
        return

    base_env = base_dir / ".env"
    if base_env.exists():
        load_dotenv(base_env, override=False, encoding="utf-8")

    environment = os.getenv("ENVIRONMENT")
    if environment is None and _as_bool(os.getenv("DEBUG")):
        environment = "development"

    if environment:
        if environment.startswith(".env"):
            candidate_name = environment
        else:
            candidate_name = f".env.{environment}"
        candidate_path = base_dir / candidate_name
        if candidate_path.exists():
            load_dotenv(candidate_path, override=True, encoding="utf-8")


class Settings(BaseSettings):
    """
    缓存层运行所需的配置项，每个字段都可以通过环境变量重写。
    宿主（文件系统客户端）可以直接构造 ``Settings`` 传给 ``open_cache``。
    """

    cache_dir: str = Field(default=".cache", alias="SQLCACHE_DIR")
    database_name: str = Field(default=DEFAULT_DATABASE_NAME, alias="SQLCACHE_DATABASE_NAME")
    database_echo: bool = Field(default=False, alias="SQLCACHE_DATABASE_ECHO")
    wal_mode: bool = Field(default=True, alias="SQLCACHE_WAL_MODE")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="log", alias="LOG_DIR")
    log_file_name: str = Field(default="sqlcache.log", alias="LOG_FILE_NAME")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")
    timezone: str = Field(default="UTC", alias="TIMEZONE")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("database_name")
    @classmethod
    def validate_database_name(cls, value: str) -> str:
        normalized = value.strip().strip("/\\")
        if not normalized:
            raise ValueError("SQLCACHE_DATABASE_NAME must not be empty")
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    def _resolve_path(self, raw: str) -> Path:
        path = Path(raw).expanduser()
        if not path.is_absolute():
            path = Path.cwd() / path
        return path

    @property
    def cache_directory(self) -> Path:
        """返回缓存目录的绝对路径，支持相对路径配置。"""
        return self._resolve_path(self.cache_dir)

    @property
    def database_path(self) -> Path:
        """组合缓存目录与数据库文件名，得到完整的 SQLite 文件路径。"""
        return self.cache_directory / self.database_name

    @property
    def log_directory(self) -> Path:
        return self._resolve_path(self.log_dir)

    @property
    def log_file_path(self) -> Path:
        return self.log_directory / self.log_file_name

    @property
    def timezone_info(self) -> ZoneInfo:
        """返回当前配置对应的时区信息，无法解析时回退到 UTC。"""
        try:
            return ZoneInfo(self.timezone)
        except ZoneInfoNotFoundError:
            return ZoneInfo("UTC")


@lru_cache
def get_settings() -> Settings:
    """返回单例化的配置对象，避免重复解析环境变量。"""
    _load_environment(Path.cwd())
    return Settings()
