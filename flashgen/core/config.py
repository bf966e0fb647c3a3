"""
Конфигурация приложения.
Все значения из переменных окружения, с дефолтами для локальной разработки.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    """Конфигурация подключения к PostgreSQL."""

    model_config = SettingsConfigDict(env_prefix="DB_", env_file=".env", extra="ignore")

    host: str = "localhost"
    port: int = 5432
    user: str = "flashgen"
    password: str = "flashgen"
    name: str = "flashgen"
    pool_size: int = 5
    max_overflow: int = 10

    @property
    def async_url(self) -> str:
        """URL для asyncpg драйвера."""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"
        )


class RedisConfig(BaseSettings):
    """Конфигурация подключения к Redis (бэкенд rate limiter)."""

    model_config = SettingsConfigDict(env_prefix="REDIS_", env_file=".env", extra="ignore")

    host: str = "localhost"
    port: int = 6379
    password: str = ""
    db: int = 0

    @property
    def url(self) -> str:
        """URL для подключения к Redis."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


class JWTConfig(BaseSettings):
    """Конфигурация проверки JWT токенов.

    Токены выпускает внешний провайдер аутентификации,
    сервис только проверяет подпись и извлекает user_id из `sub`.
    """

    model_config = SettingsConfigDict(env_prefix="JWT_", env_file=".env", extra="ignore")

    secret_key: str = "change-me-in-production"
    algorithm: str = "HS256"
    audience: str = ""


class GenerationConfig(BaseSettings):
    """Конфигурация генерации карточек."""

    model_config = SettingsConfigDict(env_prefix="GENERATION_", env_file=".env", extra="ignore")

    min_source_length: int = 1000
    max_source_length: int = 10000
    # Таймаут ожидания генератора предложений (в секундах)
    timeout_seconds: float = 60.0
    # Имитация задержки AI сервиса
    mock_latency_seconds: float = 2.0
    model: str = "mock"


class RateLimitConfig(BaseSettings):
    """Конфигурация ограничения частоты запросов."""

    model_config = SettingsConfigDict(env_prefix="RATE_LIMIT_", env_file=".env", extra="ignore")

    enabled: bool = True
    generation_limit: int = 10
    window_seconds: int = 3600


class TelemetryConfig(BaseSettings):
    """Конфигурация OpenTelemetry."""

    model_config = SettingsConfigDict(env_prefix="OTEL_", env_file=".env", extra="ignore")

    enabled: bool = False
    service_name: str = "flashgen"
    exporter_otlp_endpoint: str = "http://localhost:4317"


class LoggingConfig(BaseSettings):
    """Конфигурация логирования."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = "INFO"
    # "console" или "json"
    format: str = "console"


class AppConfig(BaseSettings):
    """Общая конфигурация приложения."""

    model_config = SettingsConfigDict(env_prefix="APP_", env_file=".env", extra="ignore")

    name: str = "flashgen"
    version: str = "0.1.0"
    debug: bool = False
    cors_origins: str = "http://localhost:3000,http://localhost:4321"

    @property
    def cors_origins_list(self) -> list[str]:
        """Список CORS origins."""
        return [o.strip() for o in self.cors_origins.split(",")]


class Settings:
    """Агрегатор всех конфигураций."""

    def __init__(self) -> None:
        self.db = DatabaseConfig()
        self.redis = RedisConfig()
        self.jwt = JWTConfig()
        self.generation = GenerationConfig()
        self.rate_limit = RateLimitConfig()
        self.telemetry = TelemetryConfig()
        self.logging = LoggingConfig()
        self.app = AppConfig()


@lru_cache
def get_settings() -> Settings:
    """Получить синглтон настроек (кешируется)."""
    return Settings()


settings = get_settings()
