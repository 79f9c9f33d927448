from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings
from pydantic_settings import SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECORDFLOW_", env_file_encoding="utf-8", env_nested_delimiter="__")


class LoggerSettings(BaseSettings):
    level: int = 20


class ExecutorSettings(BaseSettings):
    kind: Literal["immediate", "thread_pool"] = "immediate"
    max_workers: int = Field(default=4, gt=0)


class GlobalSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")
    logger_settings: LoggerSettings = Field(default_factory=LoggerSettings)
    executor_settings: ExecutorSettings = Field(default_factory=ExecutorSettings)
