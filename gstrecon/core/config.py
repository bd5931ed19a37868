from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GSTRECON_",
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "GST Reconciliation Service"
    LOG_LEVEL: str = "INFO"

    # Reconciliation defaults (callers may override per request)
    DEFAULT_TOLERANCE_AMOUNT: Decimal = Decimal("1")
    MAX_INVOICES_PER_SIDE: int = 50000

    # Audit trail
    REQUIRE_TENANT_ID: bool = False

    # Invoices above this value to a registered buyer need an IRN
    E_INVOICE_THRESHOLD: Decimal = Decimal("50000")

settings = Settings()
