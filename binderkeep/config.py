from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="BINDERKEEP_", extra="ignore")

    app_name: str = "BinderKeep"
    debug: bool = False
    log_level: str = "INFO"

    database_url: str = "postgresql+asyncpg://localhost:5432/binderkeep"

    # Pokemon TCG catalog (seed source for sets and cards)
    catalog_api_url: str = "https://api.pokemontcg.io/v2"
    catalog_api_key: str = ""
    catalog_page_size: int = 250
    catalog_timeout: float = 30.0

    # Identity provider token verification
    identity_verify_url: str = "https://auth.privy.io/api/v1/users/me"
    identity_app_id: str = ""
    identity_timeout: float = 10.0

    # Development mode - the bearer token is taken as the subject id
    dev_mode: bool = False

    cors_origins: list[str] = ["*"]


settings = Settings()


# =============================================================================
# CATALOG LIMITS
# =============================================================================

# Catalog rejects page sizes above this
MAX_CATALOG_PAGE_SIZE = 250
