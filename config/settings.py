# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.enums import Environment


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    REDIS_URL: str = Field(..., validation_alias="REDIS_URL")
    REPORT_TTL_SECONDS: int = Field(
        default=7 * 24 * 3600, validation_alias="REPORT_TTL_SECONDS"
    )

    # CORS & Limits
    ALLOWED_ORIGIN: str = Field(default="*", validation_alias="ALLOWED_ORIGIN")  # comma-separated
    RATE_LIMIT_TIMES: int = Field(..., validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(..., validation_alias="RATE_LIMIT_SECONDS")
    MAX_FILE_MB: int = Field(..., validation_alias="MAX_FILE_MB")
    TRUST_PROXY: bool = Field(..., validation_alias="TRUST_PROXY")

    # Gemini
    GEMINI_API_KEY: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_EMBEDDING_MODEL: str = Field(
        default="text-embedding-004", validation_alias="GEMINI_EMBEDDING_MODEL"
    )
    GEMINI_GENERATION_MODEL: str = Field(
        default="gemini-2.5-flash-lite", validation_alias="GEMINI_GENERATION_MODEL"
    )
    GENERATION_TEMPERATURE: float = 0.1
    GENERATION_MAX_OUTPUT_TOKENS: int = Field(
        default=3072, validation_alias="GENERATION_MAX_OUTPUT_TOKENS"
    )
    GENERATION_TOP_K: int | None = None
    GENERATION_TOP_P: float | None = None
    EMBEDDING_TIMEOUT_SECONDS: float = Field(
        default=20.0, validation_alias="EMBEDDING_TIMEOUT_SECONDS"
    )
    GENERATION_TIMEOUT_SECONDS: float = Field(
        default=60.0, validation_alias="GENERATION_TIMEOUT_SECONDS"
    )

    # Retrieval
    RETRIEVAL_TOP_K: int = 3
    MIN_CHUNK_CHARS: int = 50
    EMBED_CONCURRENCY: int = 4
    BATCH_CONCURRENCY: int | None = None  # None: every batch item in flight at once

    # Relational store (PostgREST); unset -> built-in knowledge bases only
    SUPABASE_URL: str | None = Field(default=None, validation_alias="SUPABASE_URL")
    SUPABASE_KEY: str | None = Field(default=None, validation_alias="SUPABASE_KEY")
    STORE_TIMEOUT_SECONDS: float = 10.0
    PROMPT_CACHE_TTL_SECONDS: float = Field(
        default=300.0, validation_alias="PROMPT_CACHE_TTL_SECONDS"
    )

    # Logging knobs
    LOGGER_NAME: str = "hazard-rag"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    @property
    def store_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_KEY)


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
