"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # so SCORING_PROFILE works regardless of case
    )

    # Service identity (reported by GET /)
    service_name: str = "AI Intent Classifier"
    service_version: str = "1.0.0"

    # Scoring profile: bundled name ("default", "agent_flash") or a path to a JSON file
    scoring_profile: str = "default"

    # OpenAI (or compatible API)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_base_url: str | None = None  # For Azure/OpenRouter
    openai_timeout_seconds: float = 30.0
    llm_high_threshold: float = 0.75

    # CRM push-back
    crm_enabled: bool = False
    crm_base_url: str = ""
    crm_upsert_path: str = "/leads/upsert"
    crm_api_key: str = ""
    crm_timeout_seconds: float = 10.0

    # Request guards
    rate_limit_per_minute: int = 0  # 0 disables the limiter
    max_payload_bytes: int = 64_000

    # App
    log_level: str = "INFO"


settings = Settings()
