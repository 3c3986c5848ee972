import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
load_dotenv()


class Settings(BaseSettings):
    SQLALCHEMY_DATABASE_URI: str = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///./trafficwatch.db")
    SQLALCHEMY_POOL_SIZE: int = int(os.getenv("SQLALCHEMY_POOL_SIZE", 30))
    SQLALCHEMY_POOL_MAX_OVERFLOW: int = int(os.getenv("SQLALCHEMY_POOL_MAX_OVERFLOW", 40))
    SECRET_KEY: str = os.getenv("SECRET_KEY", "trafficwatch-dev-secret")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")

    # When true a `user` denied on ownership sees 404 instead of 403.
    CONCEAL_FOREIGN_VIOLATIONS: bool = os.getenv(
        "CONCEAL_FOREIGN_VIOLATIONS", "False"
    ).lower() in ("true", "1", "t")

    SERVICE_NAME: str = os.getenv("SERVICE_NAME", "trafficwatch")
    ALLOW_OTEL_COLLECTOR: str = os.getenv("ALLOW_OTEL_COLLECTOR", "false")
    OTEL_EXPORTER_OTLP_ENDPOINT: str = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")
    OTEL_COLLECTOR_ALLOW_INSECURE: str = os.getenv(
        "OTEL_COLLECTOR_ALLOW_INSECURE", "false"
    )

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "dev")

    class Config:
        arbitrary_types_allowed = True
        env_file = ".env"
        extra = "ignore"


settings = Settings()
