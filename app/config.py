from typing import List, Optional
from pydantic_settings import BaseSettings
from urllib.parse import quote_plus

class Settings(BaseSettings):
    ENV: str = "local"
    log_level: str = "INFO"

    DATABASE_URL: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_db: str = "storefront"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    secret_key: str = "change-me"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # frontend origin, used for payment redirects
    base_url: str = "http://localhost:5173"
    api_base_url: str = "http://localhost:8000"
    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    # checkout
    checkout_session_ttl_minutes: int = 120
    installment_surcharge: float = 1.30
    installment_count: int = 3
    min_order_amount: int = 100
    max_order_amount: int = 10_000_000

    # payment gateway
    payment_gateway_base_url: str = "https://gateway.example.com"
    payment_gateway_secret_key: str = ""
    payment_callback_url: Optional[str] = None
    payment_currency: str = "NGN"
    payment_link_ttl_minutes: int = 30
    payment_gateway_timeout: int = 15

    # notifications
    brevo_api_key: Optional[str] = None
    mail_from: str = "no-reply@example.com"
    store_name: str = "Agency Storefront"
    admin_emails: List[str] = []

    @property
    def database_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL

        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def callback_url(self) -> str:
        return self.payment_callback_url or f"{self.api_base_url}/payments/callback"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
