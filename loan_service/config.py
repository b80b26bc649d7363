"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class LoanServiceConfig(BaseSettings):
    """Loan service configuration"""

    model_config = SettingsConfigDict(
        env_prefix="LOAN_SERVICE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage configuration
    use_sqlite: bool = True
    database_path: str = "loan_service.db"  # ":memory:" for a throwaway database

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    api_reload: bool = False

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr

    # Feature flags
    enable_audit_logging: bool = True
    seed_sample_customers: bool = False


# Global configuration instance
config = LoanServiceConfig()


def get_config() -> LoanServiceConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LoanServiceConfig:
    """Reload configuration from environment"""
    global config
    config = LoanServiceConfig()
    return config
