from functools import lru_cache
from typing import Literal, Optional
import os

from pydantic import Field
from pydantic_settings import BaseSettings

from drawguard.domain.policies import DEFAULT_POLICIES, Policy, PolicyName


_AUTH = DEFAULT_POLICIES[PolicyName.AUTH]
_UPLOAD = DEFAULT_POLICIES[PolicyName.UPLOAD]
_GENERAL = DEFAULT_POLICIES[PolicyName.GENERAL]
_LIKE = DEFAULT_POLICIES[PolicyName.LIKE]


class AppSettings(BaseSettings):
    # Web server
    webapp_host: str = Field(default="0.0.0.0", alias="WEBAPP_HOST")
    webapp_port: int = Field(default_factory=lambda: int(os.getenv("PORT", 8000)), alias="PORT")

    # Redis
    redis_dsn: Optional[str] = Field(default=None, alias="REDIS_DSN")

    # Rate limiting
    rate_limit_backend: Literal["memory", "redis"] = Field(default="memory", alias="RATE_LIMIT_BACKEND")
    cleanup_interval_sec: float = Field(default=300, gt=0, alias="RATE_LIMIT_CLEANUP_INTERVAL_SEC")

    auth_window_ms: int = Field(default=_AUTH.window_ms, gt=0, alias="AUTH_RATE_LIMIT_WINDOW_MS")
    auth_max_requests: int = Field(default=_AUTH.max_requests, gt=0, alias="AUTH_RATE_LIMIT_MAX")
    upload_window_ms: int = Field(default=_UPLOAD.window_ms, gt=0, alias="UPLOAD_RATE_LIMIT_WINDOW_MS")
    upload_max_requests: int = Field(default=_UPLOAD.max_requests, gt=0, alias="UPLOAD_RATE_LIMIT_MAX")
    general_window_ms: int = Field(default=_GENERAL.window_ms, gt=0, alias="GENERAL_RATE_LIMIT_WINDOW_MS")
    general_max_requests: int = Field(default=_GENERAL.max_requests, gt=0, alias="GENERAL_RATE_LIMIT_MAX")
    like_window_ms: int = Field(default=_LIKE.window_ms, gt=0, alias="LIKE_RATE_LIMIT_WINDOW_MS")
    like_max_requests: int = Field(default=_LIKE.max_requests, gt=0, alias="LIKE_RATE_LIMIT_MAX")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    debug: bool = Field(default=False, alias="DEBUG")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    def policies(self) -> list[Policy]:
        return [
            Policy(name=PolicyName.AUTH.value, window_ms=self.auth_window_ms, max_requests=self.auth_max_requests),
            Policy(name=PolicyName.UPLOAD.value, window_ms=self.upload_window_ms, max_requests=self.upload_max_requests),
            Policy(name=PolicyName.GENERAL.value, window_ms=self.general_window_ms, max_requests=self.general_max_requests),
            Policy(name=PolicyName.LIKE.value, window_ms=self.like_window_ms, max_requests=self.like_max_requests),
        ]


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
