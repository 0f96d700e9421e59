"""
Application settings, read from the environment.

| variable               | default                 |
|------------------------|-------------------------|
| CHESS3D_DATABASE_URL   | sqlite:///chess3d.db    |
| CHESS3D_DB_ECHO        | false                   |
| CHESS3D_LOG_LEVEL      | INFO                    |
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional, Self

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///chess3d.db"
    db_echo: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        env = os.environ if environ is None else environ
        return cls(
            database_url=env.get("CHESS3D_DATABASE_URL", cls.database_url),
            db_echo=env.get("CHESS3D_DB_ECHO", "false").strip().lower() in TRUTHY,
            log_level=env.get("CHESS3D_LOG_LEVEL", cls.log_level).upper(),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
