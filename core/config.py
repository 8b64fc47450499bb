from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Society Hub API"
    ENV: str = "development"

    # -------------------------------------------------
    # Frontend Domains (CORS, auto-built below)
    # -------------------------------------------------
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_ANON_KEY: Optional[str] = Field(None, env="SUPABASE_ANON_KEY")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Dashboard
    # -------------------------------------------------
    RECENT_POSTS_WINDOW_DAYS: int = Field(7, description="Trailing window for the recent posts count")

    # -------------------------------------------------
    # Login throttling
    # -------------------------------------------------
    LOGIN_RATE_LIMIT: int = Field(5, description="Login attempts allowed per window")
    LOGIN_RATE_WINDOW_SECONDS: int = Field(900, description="Login throttling window")

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list after loading settings
# -------------------------------------------------
settings.BACKEND_CORS_ORIGINS = sorted(
    set(origin.rstrip("/") for origin in settings.FRONTEND_ORIGINS)
)
