from functools import lru_cache
from types import MappingProxyType
from typing import List, Mapping, NamedTuple, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class ServiceEndpoint(NamedTuple):
    name: str
    base_url: str


class Settings(BaseSettings):
    PORT: int = 4000
    ENVIRONMENT: str = Field("development", validation_alias=AliasChoices("ENVIRONMENT", "NODE_ENV"))
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    AUTH_SERVICE_URL: str = "http://localhost:3001"
    CATEGORY_SERVICE_URL: str = "http://localhost:3002"
    COUPON_SERVICE_URL: str = "http://localhost:3003"
    ORDER_SERVICE_URL: str = "http://localhost:3004"
    PRODUCT_SERVICE_URL: str = "http://localhost:3005"
    TICKET_SERVICE_URL: str = "http://localhost:3006"
    GRAPHQL_GATEWAY_URL: str = "http://localhost:4000"

    REQUEST_TIMEOUT: float = 30.0
    HEALTH_CHECK_TIMEOUT: float = 5.0
    ADMIN_ROLE: str = "admin"

    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "ecommerce"
    POSTGRES_USER: str = "ecommerce"
    POSTGRES_PASSWORD: str = "ecommerce"
    SEED_DATABASE_URL: Optional[str] = None

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def seed_database_url(self) -> str:
        if self.SEED_DATABASE_URL:
            return self.SEED_DATABASE_URL
        return (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def service_registry(settings: Optional[Settings] = None) -> Mapping[str, ServiceEndpoint]:
    """Logical service name -> endpoint, in a fixed order."""
    settings = settings or get_settings()
    endpoints = [
        ServiceEndpoint("auth", settings.AUTH_SERVICE_URL),
        ServiceEndpoint("category", settings.CATEGORY_SERVICE_URL),
        ServiceEndpoint("coupon", settings.COUPON_SERVICE_URL),
        ServiceEndpoint("order", settings.ORDER_SERVICE_URL),
        ServiceEndpoint("product", settings.PRODUCT_SERVICE_URL),
        ServiceEndpoint("ticket", settings.TICKET_SERVICE_URL),
    ]
    return MappingProxyType({endpoint.name: endpoint for endpoint in endpoints})
