"""
Centralised settings loader (pydantic-settings).

Every value can be overridden through the environment or a local `.env`
file; field names map to upper-case env vars (e.g. `USE_MOCK_AI`).
"""

from __future__ import annotations
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class _Settings(BaseSettings):
    # ─── runtime ─────────────────────────────────────────────────────
    env_name: str = "local"
    debug: bool = False                 # exposes exception detail on 500s
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # ─── AI switch ──────────────────────────────────────────────────
    # True  → never call Nyckel / Gemini, answer from local rules
    # False → call them and fall back to local rules on failure
    use_mock_ai: bool = False
    mock_latency_seconds: float = 0.0

    # ─── Gemini ─────────────────────────────────────────────────────
    gemini_api_key: str | None = None
    gemini_model: str = "models/gemini-2.0-flash"

    # ─── Nyckel (body-fat classifier) ───────────────────────────────
    nyckel_api_key: str | None = None
    nyckel_client_id: str | None = None
    nyckel_client_secret: str | None = None
    nyckel_function_url: str = (
        "https://www.nyckel.com/v1/functions/body-fat-percentage/invoke"
    )
    nyckel_token_url: str = "https://www.nyckel.com/connect/token"
    http_timeout_seconds: float = 25.0

    # ─── uploads / result store ─────────────────────────────────────
    max_upload_bytes: int = 10 * 1024 * 1024
    result_store_capacity: int = 1000
    result_store_ttl_seconds: float = 3600.0

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore", env_file=".env", env_file_encoding="utf-8"
    )


# ------------------------------------------------------------------ #
#  Cached singleton accessor
# ------------------------------------------------------------------ #
@lru_cache
def _cached() -> _Settings:  # pragma: no cover
    return _Settings()  # type: ignore[call-arg]


settings: _Settings = _cached()
