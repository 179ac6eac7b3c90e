"""
Application settings
"""
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv(encoding="utf-8")


class Settings(BaseSettings):
    """Settings read from RSE_* environment variables or a .env file"""

    # Database ("sqlite://" selects a shared in-memory database)
    database_url: str = "sqlite:///database.db"

    # Sessions
    session_soft_limit_minutes: int = 45

    # Logging
    log_level: str = "INFO"
    log_config_path: str = "logging.yaml"

    # API
    app_title: str = "RSE Consult: Consultation Workflow Tracker"
    consultant_name: str = "Your RSE consultant"

    model_config = SettingsConfigDict(
        env_prefix="RSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
