# -*- coding: utf-8 -*-
"""
backend/app/shared/config/settings_base.py

Base de configuración (Pydantic v2) para el backend de Anne Creations.
- Esta clase NO instancia singletons ni resuelve .env; eso lo hace config_loader.
- Es la base para settings_dev.py, settings_testing.py y settings_prod.py.

Autor: Anne Creations
Fecha: 2026-03-02
"""

from typing import Literal, Optional
from pydantic import Field, SecretStr, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Tipos de entorno soportados
EnvName = Literal["development", "test", "production"]

_DEFAULT_SECRET = "please-change-me"


class BaseAppSettings(BaseSettings):
    # =========================
    # Núcleo de la aplicación
    # =========================
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="AnneCreations", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    app_host: str = Field(default="0.0.0.0", validation_alias="APP_HOST")
    app_port: int = Field(default=8000, validation_alias="APP_PORT")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # =========================
    # Base de datos (PostgreSQL)
    # =========================
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="annecreations", validation_alias="DB_NAME")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_sslmode: str = Field(default="prefer", validation_alias="DB_SSLMODE")  # prefer|require|disable
    db_command_timeout_s: float = Field(default=10.0, validation_alias="DB_COMMAND_TIMEOUT_S")
    db_url: Optional[str] = Field(default=None, validation_alias="DB_URL")

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """
        URL de conexión para SQLAlchemy + asyncpg.
        Prioriza DB_URL si existe (normalizando el esquema), sino construye
        desde componentes individuales. El modo SSL viaja en connect_args.
        """
        from urllib.parse import quote_plus

        if self.db_url:
            url = self.db_url
            if url.startswith("sqlite"):
                return url
            return (
                url.replace("postgres://", "postgresql+asyncpg://")
                   .replace("postgresql://", "postgresql+asyncpg://")
            )

        pw = quote_plus(self.db_password.get_secret_value())
        return (
            f"postgresql+asyncpg://{self.db_user}:{pw}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================
    # CORS / Frontend
    # =========================
    allowed_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")
    frontend_url: str = Field(default="http://localhost:5173", validation_alias="FRONTEND_URL")
    public_api_url: str = Field(default="http://localhost:8000", validation_alias="PUBLIC_API_URL")

    # =========================
    # Auth / JWT
    # =========================
    jwt_secret_key: SecretStr = Field(default=SecretStr(_DEFAULT_SECRET), validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # =========================
    # Checkout
    # =========================
    # Fuente única del TTL; el temporizador del cliente es solo indicativo.
    checkout_ttl_minutes: int = Field(default=30, ge=1, validation_alias="CHECKOUT_TTL_MINUTES")
    checkout_sweep_enabled: bool = Field(default=True, validation_alias="CHECKOUT_SWEEP_ENABLED")
    checkout_sweep_interval_minutes: int = Field(default=5, ge=1, validation_alias="CHECKOUT_SWEEP_INTERVAL_MINUTES")

    # =========================
    # Cupones
    # =========================
    coupon_code_case_sensitive: bool = Field(default=False, validation_alias="COUPON_CODE_CASE_SENSITIVE")

    # =========================
    # Descargas
    # =========================
    download_token_secret: Optional[SecretStr] = Field(default=None, validation_alias="DOWNLOAD_TOKEN_SECRET")
    download_token_expire_minutes: int = Field(default=60, ge=1, validation_alias="DOWNLOAD_TOKEN_EXPIRE_MINUTES")
    download_token_single_use: bool = Field(default=False, validation_alias="DOWNLOAD_TOKEN_SINGLE_USE")
    download_storage_root: str = Field(default="storage/downloads", validation_alias="DOWNLOAD_STORAGE_ROOT")

    # =========================
    # Observabilidad / Logging
    # =========================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "pretty", "plain"] = Field(default="pretty", validation_alias="LOG_FORMAT")
    http_metrics_enabled: bool = Field(default=True, validation_alias="HTTP_METRICS_ENABLED")

    # ===== Helpers de entorno =====
    @computed_field  # type: ignore[misc]
    @property
    def is_dev(self) -> bool:
        return self.python_env == "development"

    @computed_field  # type: ignore[misc]
    @property
    def is_test(self) -> bool:
        return self.python_env == "test"

    @computed_field  # type: ignore[misc]
    @property
    def is_prod(self) -> bool:
        return self.python_env == "production"

    @property
    def jwt_secret(self) -> str:
        return self.jwt_secret_key.get_secret_value()

    @property
    def download_secret(self) -> str:
        """Secreto del firmador de descargas (cae al secreto JWT si no se define)."""
        if self.download_token_secret and self.download_token_secret.get_secret_value():
            return self.download_token_secret.get_secret_value()
        return self.jwt_secret

    def get_cors_origins(self) -> list[str]:
        """Convierte allowed_origins en lista procesable para CORS middleware."""
        if not self.allowed_origins or self.allowed_origins == "*":
            return ["*"]
        return [o.strip().strip('"').strip("'") for o in self.allowed_origins.split(",") if o.strip()]

    def _security_checks(self) -> None:
        """
        Validaciones mínimas de seguridad y coherencia.
        Se invoca desde config_loader tras instanciar el settings.
        """
        import logging
        logger = logging.getLogger(__name__)

        jwt_key = self.jwt_secret_key.get_secret_value()
        weak_jwt = not jwt_key or jwt_key == _DEFAULT_SECRET or len(jwt_key) < 32

        if self.is_prod:
            if weak_jwt:
                raise ValueError("JWT_SECRET_KEY debe tener ≥32 caracteres en producción")
            if self.db_sslmode != "require":
                raise ValueError("DB_SSLMODE debe ser 'require' en producción")
            if self.download_token_secret is None:
                raise ValueError("DOWNLOAD_TOKEN_SECRET es requerido en producción")

            from .settings_payments import get_payments_settings

            payments = get_payments_settings()
            if payments.payments_enabled and not payments.is_configured:
                raise ValueError("RAZORPAY_KEY_ID y RAZORPAY_KEY_SECRET son requeridos en producción")

        if self.is_dev and weak_jwt:
            logger.info("JWT_SECRET_KEY es débil o usa valor por defecto - considera una clave más segura")

        if self.checkout_sweep_interval_minutes > self.checkout_ttl_minutes:
            logger.warning(
                "checkout_sweep_interval_minutes=%d mayor que checkout_ttl_minutes=%d; "
                "los checkouts vencidos tardarán más en cancelarse",
                self.checkout_sweep_interval_minutes,
                self.checkout_ttl_minutes,
            )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


__all__ = ["BaseAppSettings", "EnvName"]
# Fin del archivo backend/app/shared/config/settings_base.py
