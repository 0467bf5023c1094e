"""
Application configuration settings.
Handles environment variables and application-wide settings.
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application settings
    app_name: str = Field(default="Storefront API")
    app_version: str = Field(default="1.0.0")
    app_description: str = Field(
        default="REST API for an e-commerce storefront: catalog, cart, orders, reviews and wishlist"
    )
    debug: bool = Field(default=False)

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    reload: bool = Field(default=False)

    # Database settings
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    database_name: str = Field(default="storefront_db")

    # MongoDB connection settings
    mongodb_server_selection_timeout_ms: int = Field(default=30000)
    mongodb_connect_timeout_ms: int = Field(default=30000)
    mongodb_socket_timeout_ms: int = Field(default=30000)
    mongodb_max_pool_size: int = Field(default=10)
    mongodb_min_pool_size: int = Field(default=1)
    mongodb_retry_writes: bool = Field(default=True)
    mongodb_direct_connection: bool = Field(default=False)

    # Logging settings
    log_level: str = Field(default="INFO")

    # Auth settings
    secret_key: str = Field(default="change-me-in-production")
    jwt_algorithm: str = Field(default="HS256")
    login_token_expiration_days: int = Field(default=30, gt=0)
    password_reset_expiration_minutes: int = Field(default=15, gt=0)
    cookie_expiration_days: int = Field(default=30, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    production: bool = Field(default=False)

    # Client origin, used for CORS and for links sent by mail
    origin: str = Field(default="http://localhost:3000")

    # Mail settings
    resend_api_key: str = Field(default="")
    mail_sender: str = Field(default="Storefront <no-reply@storefront.local>")

    # Pagination defaults
    default_page_size: int = Field(default=10)
    max_page_size: int = Field(default=100)

    # Business logic settings
    max_order_items: int = Field(default=50)
    max_item_quantity: int = Field(default=100)


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get application settings."""
    return settings
