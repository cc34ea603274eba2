import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

LEGACY_BILLING_SECRET_KEY = "checkout_secret_key"
LEGACY_BILLING_SECRET_IV = "checkout_secret_iv"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv(
        "DATABASE_URL",
        "mysql+pymysql://root:@localhost:3306/checkout",
    )
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
    db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    db_pool_recycle: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))

    # Auth
    jwt_secret: str = os.getenv("JWT_SECRET", "")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    jwt_access_ttl_minutes: int = int(os.getenv("JWT_ACCESS_TTL_MINUTES", "1440"))
    default_admin_user: str = os.getenv("DEFAULT_ADMIN_USER", "admin")

    # Reports
    report_timezone: str = os.getenv("REPORT_TIMEZONE", "UTC")
    report_fallback_enabled: bool = _env_bool("REPORT_FALLBACK_ENABLED")
    placeholder_email_domain: str = os.getenv(
        "PLACEHOLDER_EMAIL_DOMAIN", "appypie.com"
    )
    report_max_page_size: int = int(os.getenv("REPORT_MAX_PAGE_SIZE", "500"))

    # External billing API
    billing_api_url: str = os.getenv(
        "BILLING_API_URL", "https://checkout-dev.appypie.com/api"
    )
    billing_api_timeout: float = float(os.getenv("BILLING_API_TIMEOUT", "15"))
    billing_secret_key: str = os.getenv(
        "BILLING_SECRET_KEY", LEGACY_BILLING_SECRET_KEY
    )
    billing_secret_iv: str = os.getenv("BILLING_SECRET_IV", LEGACY_BILLING_SECRET_IV)
    billing_cancel_enabled: bool = _env_bool("BILLING_CANCEL_ENABLED")

    # CORS
    cors_origins: str = os.getenv("CORS_ORIGINS", "")  # Comma-separated origins


def validate_settings(s: Settings) -> list[str]:
    """Validate required settings at startup. Returns list of warnings."""
    warnings: list[str] = []

    if not s.jwt_secret:
        warnings.append("JWT_SECRET is not set, admin login will not work")
    elif len(s.jwt_secret) < 32:
        warnings.append(
            "JWT_SECRET is shorter than 32 characters, consider a stronger secret"
        )

    if (
        s.billing_secret_key == LEGACY_BILLING_SECRET_KEY
        or s.billing_secret_iv == LEGACY_BILLING_SECRET_IV
    ):
        warnings.append(
            "BILLING_SECRET_KEY/BILLING_SECRET_IV use the shared legacy values"
        )

    if (
        "localhost" in s.database_url
        and os.getenv("ENVIRONMENT", "dev") == "production"
    ):
        warnings.append("DATABASE_URL points to localhost in production")

    return warnings


settings = Settings()
