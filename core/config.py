from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, AliasChoices, model_validator
from pydantic_settings import BaseSettings


load_dotenv()


class AppSettings(BaseSettings):
    # Pydantic v2 settings configuration

    mongo_uri: str = Field(default="mongodb://localhost:27017", alias="MONGO_URI")
    # Accept MONGO_DB_NAME (preferred) or DATABASE_NAME (legacy)
    database_name: str = Field(
        default="barbershop",
        validation_alias=AliasChoices("MONGO_DB_NAME", "DATABASE_NAME"),
    )
    appointments_collection: str = Field(
        default="appointments", alias="MONGODB_APPOINTMENTS_COLLECTION"
    )

    # "memory" keeps everything in process (local dev / tests)
    storage_backend: Literal["mongo", "memory"] = Field(
        default="mongo", alias="STORAGE_BACKEND"
    )

    api_prefix: str = Field(default="/api", alias="API_PREFIX")
    allowed_origins: str = Field(default="*", alias="ALLOWED_ORIGINS")

    # Local wall-clock zone used to interpret timezone-aware inputs; system local when unset
    timezone_name: Optional[str] = Field(default=None, alias="TZ")

    # Business hours (local clock hours) and availability grid width
    business_open_hour: int = Field(default=9, ge=0, le=23, alias="BUSINESS_OPEN_HOUR")
    business_close_hour: int = Field(default=19, ge=1, le=24, alias="BUSINESS_CLOSE_HOUR")
    slot_duration_minutes: int = Field(default=30, gt=0, le=60, alias="SLOT_DURATION_MINUTES")

    environment: Literal["development", "production", "test"] = Field(
        default="development", alias="ENVIRONMENT"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @model_validator(mode="after")
    def _check_business_hours(self) -> "AppSettings":
        if self.business_open_hour >= self.business_close_hour:
            raise ValueError("BUSINESS_OPEN_HOUR must be earlier than BUSINESS_CLOSE_HOUR")
        # The availability grid restarts every hour, so slots must tile it exactly
        if 60 % self.slot_duration_minutes:
            raise ValueError("SLOT_DURATION_MINUTES must divide 60")
        return self


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()


settings = get_settings()
