"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from moto_finance.domain.models import InstallmentOverlapPolicy, PaymentFrequency


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./moto_finance.db"
    create_tables_on_startup: bool = True

    # External Services
    exchange_rate_api_base: str = "http://localhost:8001"

    # Service
    service_name: str = "moto-finance"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0

    # Pricing
    default_currency: str = "USD"
    default_payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    installment_overlap_policy: InstallmentOverlapPolicy = InstallmentOverlapPolicy.CARD_ONLY


settings = Settings()
