"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "RSVP Manager"
    debug: bool = False
    environment: str = "production"  # "dev" disables serving the client bundle
    log_file: str = ""  # Empty logs to stderr
    expose_error_details: bool = True  # Include store error messages in 500 responses

    # Server
    host: str = "0.0.0.0"
    port: int = 8083
    allowed_origins: str = "*"  # Comma-separated origins, or "*" for all
    static_dir: str = "dist"

    # Database
    database_url: str = "sqlite:///./rsvp.db"

    # Identity provider (Auth0)
    auth0_domain: str = ""
    auth0_api_audience: str = ""
    roles_claim: str = "http://myapp.com/roles"  # Namespaced custom claim holding roles
    admin_role: str = "admin"
    jwks_cache_seconds: int = 300
    jwks_requests_per_minute: int = 5

    # FastSpring commerce API
    fs_api_url: str = "https://api.fastspring.com"
    fs_api_username: str = ""
    fs_api_password: str = ""
    fs_user_agent: str = "APPIZY Backend"
    fs_api_timeout_seconds: float = 10.0

    @property
    def issuer(self) -> str:
        return f"https://{self.auth0_domain}/"

    @property
    def jwks_uri(self) -> str:
        return f"https://{self.auth0_domain}/.well-known/jwks.json"


settings = Settings()
