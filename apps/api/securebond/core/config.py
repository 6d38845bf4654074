"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.03.00"

    # Proxy/Load Balancer Settings
    # Set to True when running behind nginx/Cloudflare to trust X-Forwarded-For
    TRUST_PROXY_HEADERS: bool = False

    # Database
    DATABASE_URL: str

    # Session Token (supports key rotation)
    JWT_SECRET: str = "change-this-in-production"
    JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    JWT_EXPIRES_HOURS: int = 8

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Internal scheduled endpoints (cron jobs)
    INTERNAL_SECRET: str = ""  # Secret for /internal/scheduled/* endpoints

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_AUTH: int = 5  # Login attempts
    RATE_LIMIT_CONTACT: int = 5  # Public contact form
    RATE_LIMIT_API: int = 120  # General API

    # Cell tower geolocation (RapidAPI)
    GEOLOCATION_API_KEY: str = ""
    GEOLOCATION_HOST: str = "cellid-geolocation-api.p.rapidapi.com"
    GEOLOCATION_BASE_URL: str = "https://cellid-geolocation-api.p.rapidapi.com"
    GEOLOCATION_TIMEOUT_SECONDS: float = 10.0

    # Default jurisdiction bounding box (State of Hawaii).
    # Company configuration overrides these when set.
    JURISDICTION_MIN_LATITUDE: float = 18.9
    JURISDICTION_MAX_LATITUDE: float = 22.5
    JURISDICTION_MIN_LONGITUDE: float = -161.0
    JURISDICTION_MAX_LONGITUDE: float = -154.8

    # Supabase (public contact form storage)
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    CONTACT_TABLE: str = "contact_inquiries"

    # Legal documents
    PRIVACY_POLICY_VERSION: str = "1.0"
    TERMS_VERSION: str = "2025-06-01"

    # Performance monitor
    PERFORMANCE_MAX_METRICS: int = 1000
    SLOW_REQUEST_MS: int = 2000

    # Business defaults
    DEFAULT_TIMEZONE: str = "Pacific/Honolulu"
    BULK_UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.JWT_SECRET]
        if self.JWT_SECRET_PREVIOUS:
            secrets.append(self.JWT_SECRET_PREVIOUS)
        return secrets

    @property
    def cookie_secure(self) -> bool:
        """Secure cookies only in production."""
        return self.ENV != "dev"

    @property
    def geolocation_configured(self) -> bool:
        return bool(self.GEOLOCATION_API_KEY)

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)


settings = Settings()
