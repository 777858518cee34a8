import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Config:
    database_url: str | None = None
    log_format: str = "json"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            database_url=os.environ.get("DATABASE_URL") or None,
            log_format=os.environ.get("FATIGUE_LOG_FORMAT", "json"),
            log_level=os.environ.get("FATIGUE_LOG_LEVEL", "INFO").upper(),
        )

    def require_database_url(self) -> str:
        if not self.database_url:
            raise RuntimeError("DATABASE_URL must be set")
        return self.database_url
