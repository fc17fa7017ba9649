"""Runtime configuration.

Values come from ``TRAVEL_TABLES_*`` environment variables and may be
overridden by command line options.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from travel_tables.types import parse_date

OverbookingPolicy = Literal["reject_passenger", "invalidate_flight"]


class Settings(BaseSettings):
    """Configuration for loading datasets and running queries."""

    model_config = SettingsConfigDict(env_prefix="TRAVEL_TABLES_", extra="ignore")

    output_dir: Path = Path("Resultados")
    errors_dir: Path | None = None  # Defaults to output_dir
    delimiter: str = ";"
    overbooking_policy: OverbookingPolicy = "reject_passenger"
    reference_date: str = "2023/10/01"  # "Today" for age computations
    pool_block_size: int = 4096
    log_level: str = "WARNING"

    @field_validator("delimiter")
    @classmethod
    def single_character(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError(f"delimiter must be a single character, got {v!r}")
        return v

    @field_validator("pool_block_size")
    @classmethod
    def positive_block_size(cls, v: int) -> int:
        if v < 2:
            raise ValueError(f"pool_block_size must be at least 2, got {v}")
        return v

    @field_validator("reference_date")
    @classmethod
    def valid_reference_date(cls, v: str) -> str:
        parse_date(v)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v: Any) -> str:
        return str(v).upper()

    @property
    def effective_errors_dir(self) -> Path:
        """Return the directory where ``<entity>_errors.csv`` files go."""
        return self.errors_dir if self.errors_dir is not None else self.output_dir
