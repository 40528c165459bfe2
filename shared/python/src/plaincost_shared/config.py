"""
config.py — pydantic-settings Settings class.

All environment variables for plaincost are declared here. The API imports
the module-level `settings`; pipeline entry points take a Settings instance
explicitly so that runs can target isolated directories.

Usage:
    from plaincost_shared.config import Settings, settings

    cfg = Settings(raw_dir="/tmp/raw", db_path="/tmp/plaincost.duckdb")
    print(cfg.raw_path("msa"))
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # BEA Regional API
    # -------------------------------------------------------------------------
    bea_api_key: str = Field(default="")
    bea_base_url: str = Field(default="https://apps.bea.gov/api/data")
    request_delay_seconds: float = Field(default=1.0, ge=0)
    request_timeout_seconds: float = Field(default=60.0, gt=0)

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    raw_dir: Path = Field(default=Path("./data/raw"))
    db_path: Path = Field(default=Path("./data/plaincost.duckdb"))
    seed_dir: Path = Field(default=Path("./data/seed"))
    deployed_db_path: Path = Field(default=Path("./data/deployed.duckdb"))
    export_chunk_size: int = Field(default=500, ge=1)

    # -------------------------------------------------------------------------
    # API server
    # -------------------------------------------------------------------------
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: str = Field(default="http://localhost:3000,http://localhost:4321")

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    def raw_path(self, geo_class: str) -> Path:
        """Location of the raw artifact for 'msa' or 'state'."""
        return self.raw_dir / f"{geo_class}_rpp.json"

    @field_validator("bea_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton used by the API process
# ---------------------------------------------------------------------------
settings = Settings()
