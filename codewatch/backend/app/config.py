from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod

    # Fixture mode: aggregator and enrichment return canned data, no outbound calls
    MOCK_MODE: bool = False

    # --- Violation providers ---
    PROVIDER_SOURCE: str = "live"  # live|stub_json
    PROVIDERS_FIXTURES_DIR: str = "data/violations"
    SOCRATA_APP_TOKEN: str | None = None

    # Detroit only publishes an HTML listing; provider is registered when set
    DETROIT_VIOLATIONS_URL: str | None = None

    # --- Enrichment integrations ---
    GOOGLE_DRIVE_API_KEY: str | None = None
    GOOGLE_DRIVE_FOLDER_ID: str | None = None
    GOOGLE_DRIVE_BASE_URL: str = "https://www.googleapis.com/drive/v3"

    SKIP_TRACE_API_KEY: str | None = None
    SKIP_TRACE_BASE_URL: str | None = None

    MORTGAGE_API_KEY: str | None = None
    MORTGAGE_BASE_URL: str | None = None

    # --- Shared HTTP client tuning (collaborators only; the core never retries) ---
    HTTP_TIMEOUT_S: float = 15.0
    HTTP_MAX_RETRIES: int = 1
    HTTP_BACKOFF_BASE_S: float = 0.5
    HTTP_RATE_LIMIT_RPS: float = 0.0  # 0 disables
    HTTP_CIRCUIT_FAIL_THRESHOLD: int = 5
    HTTP_CIRCUIT_RESET_S: float = 60.0
    HTTP_USER_AGENT: str = "codewatch/1.0 (+violation aggregator)"


def integrations_configured(s: Settings) -> dict[str, bool]:
    return {
        "googleDrive": bool(s.GOOGLE_DRIVE_API_KEY and s.GOOGLE_DRIVE_FOLDER_ID),
        "skipTrace": bool(s.SKIP_TRACE_API_KEY and s.SKIP_TRACE_BASE_URL),
        "mortgage": bool(s.MORTGAGE_API_KEY and s.MORTGAGE_BASE_URL),
    }


settings = Settings()
