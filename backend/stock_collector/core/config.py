"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings

from stock_collector.core.errors import ConfigurationError

SIX_WEEKS_SECONDS = 6 * 7 * 24 * 60 * 60


class Settings(BaseSettings):
    # ── Application ───────────────────────────
    ENVIRONMENT: str = "dev"
    PROJECT_ID: str = ""
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False
    NOTIFICATION_PROJECT: str = "ds-inventory"
    DEFAULT_SUPPLIER_MAILBOX: str = "supplier-management@example.com"

    # ── SFTP endpoint ─────────────────────────
    SFTP_HOST: str = "localhost"
    SFTP_PORT: int = 22
    SFTP_USER_NAME: str = ""
    SFTP_PASSWORD: str = ""
    SFTP_BASE_PATH: str = "/EAI/s_ds-inventory-inbox_p/data/"

    # ── File Storage ──────────────────────────
    STORAGE_ENDPOINT: str = "http://localhost:9000"
    STORAGE_ACCESS_KEY: str = "minioadmin"
    STORAGE_SECRET_KEY: str = "minioadmin"
    STORAGE_REGION: str = "eu-central-1"
    STORAGE_URI_SCHEME: str = "s3"
    INBOUND_CSV_BUCKET_NAME: str = ""
    INBOUND_XLSX_BUCKET_NAME: str = ""

    # ── Database (individual vars) ────────────
    POSTGRES_USER: str = "collector_user"
    POSTGRES_PASSWORD: str = "collector_pass"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "inventory"
    DB_POOL_SIZE: int = 1

    @property
    def DATABASE_URL(self) -> str:
        """Async URL for app runtime (asyncpg)."""
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def DATABASE_URL_SYNC(self) -> str:
        """Sync URL for Alembic migrations (psycopg2)."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # ── Supplier masterdata API ───────────────
    OAUTH_URL: str = ""
    OAUTH_USERNAME: str = ""
    OAUTH_PASSWORD: str = ""
    SUPPLIER_MASTERDATA_SERVICE_URL: str = ""

    # ── Firestore (supplier documents) ────────
    FIRESTORE_PROJECT_ID: str = ""
    FIRESTORE_SUPPLIER_COLLECTION: str = "dropshippingSuppliers"

    # ── Pub/Sub mail sender ───────────────────
    GENERAL_PROJECT_ID: str = ""
    MAIL_SENDER_TOPIC: str = ""

    # ── Teams alerts ──────────────────────────
    TEAMS_WEBHOOK_URL: str = ""

    # ── Timing / retry budget ─────────────────
    MINIMUM_FILE_AGE_SECONDS: float = 30
    MAXIMUM_FILE_AGE_SECONDS: float = SIX_WEEKS_SECONDS
    HTTP_RETRY_ATTEMPTS: int = 3
    HTTP_RETRY_DELAY_SECONDS: float = 8.0
    HTTP_TIMEOUT_SECONDS: float = 8.0
    BUCKET_WRITE_ATTEMPTS: int = 3
    COLLECT_SCHEDULE_SECONDS: float = 300.0

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "prod"

    @property
    def skip_age_check(self) -> bool:
        """The minimum-age gate is disabled on developer environments."""
        return self.ENVIRONMENT == "dev"

    @property
    def internal_folder_exceptions(self) -> list[str]:
        """Internal upload folders whose files carry the supplier id in their name."""
        if self.is_production:
            return ["s_sm-ds_p"]
        return ["s_ds-test-supplier_p", "s_sm-ds_t"]

    @property
    def ignored_folders(self) -> list[str]:
        """Folders belonging to the other stage; never processed here."""
        if self.is_production:
            return ["s_ds-test-supplier_p", "s_sm-ds_t"]
        return ["s_sm-ds_p"]

    def require(self, *names: str) -> None:
        """Raise ConfigurationError if any of the named settings is empty."""
        missing = [name for name in names if not getattr(self, name, None)]
        if missing:
            raise ConfigurationError(
                f"Missing environment variable: {', '.join(missing)}",
                missing=missing,
            )


# Settings a full collection run cannot start without
REQUIRED_FOR_COLLECTION = (
    "SFTP_USER_NAME",
    "SFTP_PASSWORD",
    "INBOUND_CSV_BUCKET_NAME",
    "INBOUND_XLSX_BUCKET_NAME",
    "OAUTH_URL",
    "SUPPLIER_MASTERDATA_SERVICE_URL",
    "FIRESTORE_PROJECT_ID",
    "GENERAL_PROJECT_ID",
    "MAIL_SENDER_TOPIC",
)


settings = Settings()
