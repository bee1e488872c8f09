from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DEBUG: bool = False
    APP_NAME: str = "Prodfind"
    APP_DOMAIN: str = "prodfind.example.com"
    APP_DATABASE_DSN: str = "sqlite:////tmp/prodfind.db"

    # CORS
    CORS_ORIGINS: str = "http://localhost:3000"

    # Sessions issued on behalf of the auth provider
    SESSION_JWT_SECRET: str = "prodfind-dev-session-secret"
    SESSION_TTL_HOURS: int = 168
    SESSION_COOKIE_NAME: str = "prodfind.session_token"

    # Bot detection on mutations
    BOT_DETECTION_ENABLED: bool = True
    BOT_VERIFY_URL: str = ""  # e.g. https://botcheck.internal/verify
    BOT_MAX_MUTATIONS_PER_MINUTE: int = 30
    BOT_MAX_TRACKED_CLIENTS: int = 10_000

    # Moderation
    DEFAULT_REMOVAL_REASON: str = "Violates Terms of Service"

    @property
    def version(self) -> str:
        return "0.1.0"


settings = Settings()
