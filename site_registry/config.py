"""
Configuration management for the site registry service.

Uses Pydantic settings for validation and environment variable support.
"""
from functools import lru_cache
from typing import List, Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration."""

    model_config = SettingsConfigDict(
        env_prefix='DB_',
        env_file='.env',
        extra='ignore'
    )

    host: str = Field(default='localhost', description='Database host')
    port: int = Field(default=5432, description='Database port')
    name: str = Field(default='site_registry', description='Database name')
    user: str = Field(default='postgres', description='Database user')
    password: str = Field(default='postgres', description='Database password')
    pool_size: int = Field(default=5, description='Connection pool size')
    max_overflow: int = Field(default=10, description='Max overflow connections')
    echo_sql: bool = Field(default=False, description='Echo SQL queries')
    dsn: Optional[str] = Field(
        default=None,
        description='Full database URL, overrides the individual fields'
    )

    @property
    def url(self) -> str:
        """Build database URL."""
        if self.dsn:
            return self.dsn
        return f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.name}"

    @property
    def is_sqlite(self) -> bool:
        """SQLite URLs do not take pool sizing arguments."""
        return self.url.startswith('sqlite')


class JWTSettings(BaseSettings):
    """JWT authentication configuration."""

    model_config = SettingsConfigDict(
        env_prefix='JWT_',
        env_file='.env',
        extra='ignore'
    )

    secret_key: str = Field(
        default='change-this-secret-key-in-production',
        description='Secret key for JWT signing'
    )
    algorithm: str = Field(default='HS256', description='JWT algorithm')
    token_expire_minutes: int = Field(
        default=7 * 24 * 60,
        description='Token expiration in minutes'
    )
    issuer: Optional[str] = Field(
        default='site-registry',
        description='JWT token issuer'
    )
    audience: Optional[str] = Field(
        default='site-registry-api',
        description='JWT token audience'
    )


class AdminSettings(BaseSettings):
    """Break-glass administrator configured outside the user store."""

    model_config = SettingsConfigDict(
        env_prefix='ADMIN_',
        env_file='.env',
        extra='ignore'
    )

    username: Optional[str] = Field(default=None)
    password: Optional[SecretStr] = Field(default=None)

    @property
    def enabled(self) -> bool:
        """Both credentials must be set for the identity to exist."""
        return bool(self.username) and bool(self.password and self.password.get_secret_value())


class SecuritySettings(BaseSettings):
    """Password hashing configuration."""

    model_config = SettingsConfigDict(
        env_prefix='SECURITY_',
        env_file='.env',
        extra='ignore'
    )

    bcrypt_rounds: int = Field(default=12, ge=4, le=31)


class CORSSettings(BaseSettings):
    """CORS configuration."""

    model_config = SettingsConfigDict(
        env_prefix='CORS_',
        env_file='.env',
        extra='ignore'
    )

    allowed_origins: List[str] = Field(
        default=['http://localhost:3000', 'http://localhost:5173'],
        description='Allowed origins for CORS'
    )
    allow_credentials: bool = Field(default=True)
    allowed_methods: List[str] = Field(default=['*'])
    allowed_headers: List[str] = Field(default=['*'])


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Application
    app_name: str = Field(default='Site Registry')
    app_version: str = Field(default='1.0.0')
    debug: bool = Field(default=False)
    environment: str = Field(default='development')  # development, test, production

    # Server
    host: str = Field(default='0.0.0.0')
    port: int = Field(default=8000)
    workers: int = Field(default=1)
    reload: bool = Field(default=False)

    # API
    api_prefix: str = Field(default='/api')

    # Logging
    log_level: str = Field(default='INFO')

    # Sub-settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    jwt: JWTSettings = Field(default_factory=JWTSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Settings are read once per process; tests set the environment before first use."""
    return AppSettings()
