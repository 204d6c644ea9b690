from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SENIORITY_OPTIONS = [
    "Entry-Level",
    "Mid-Level",
    "Senior-Level",
]

DEFAULT_SALARY_BANDS = [
    "11532-20000",
    "20001-30000",
    "30001-45000",
    "45001-60000",
    "60000+",
]

DEFAULT_JOB_CATEGORIES = [
    "Accounting",
    "Administration",
    "Customer Service",
    "Engineering",
    "Finance",
    "Human Resources",
    "IT",
    "Marketing",
    "Operations",
    "Sales",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./jobboard.db"
    database_pool_size: int = 5
    database_max_overflow: int = 5
    database_echo: bool = False

    # App
    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: Optional[str] = None  # comma separated

    # List views are capped rather than paginated
    list_limit: int = 500

    # Logo uploads
    max_logo_size_mb: int = 5

    # Job option lists (JSON arrays when set through the environment)
    seniority_options: List[str] = DEFAULT_SENIORITY_OPTIONS
    salary_bands: List[str] = DEFAULT_SALARY_BANDS
    job_categories: List[str] = DEFAULT_JOB_CATEGORIES


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
