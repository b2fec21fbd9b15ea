from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "GitGud API"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = (
        "http://localhost,http://localhost:5173,http://127.0.0.1,http://127.0.0.1:5173"
    )
    FRONTEND_URL: str = "http://localhost:5173"
    BACKEND_URL: str = "http://localhost:8000"
    # Built SPA directory; empty disables the static mount
    FRONTEND_DIST_DIR: str = ""

    # Session tokens
    SECRET_KEY: str = "change-me-in-production-use-random-string"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # GitHub API + OAuth
    GITHUB_TOKEN: str = ""
    GITHUB_CLIENT_ID: str = ""
    GITHUB_CLIENT_SECRET: str = ""

    # LLM
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_BASE_URL: str | None = None

    # Text-to-speech
    ELEVENLABS_API_KEY: str = ""
    ELEVENLABS_DEFAULT_MODEL: str = "eleven_multilingual_v2"

    # Caches (seconds)
    GITHUB_CACHE_TTL_SECONDS: int = 300
    ROAST_CACHE_TTL_SECONDS: int = 600

    # Rate limiting, sized for PVP polling
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # PVP matches
    PVP_MAX_REPOS: int = 5
    PVP_INTENSITY: str = "medium"
    PVP_LANGUAGE: str = "en"
    PVP_RETENTION_SECONDS: int = 3600
    PVP_CLEANUP_INTERVAL_SECONDS: int = 300
    PVP_ENABLE_TEST_ENDPOINTS: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @property
    def github_token(self) -> str | None:
        """Configured GitHub token, ignoring template placeholders."""
        token = self.GITHUB_TOKEN.strip()
        if not token or "your_github" in token or len(token) <= 10:
            return None
        return token

    @property
    def github_oauth_configured(self) -> bool:
        return bool(self.GITHUB_CLIENT_ID and self.GITHUB_CLIENT_SECRET)


settings = Settings()
