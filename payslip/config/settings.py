from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "payslips"
    db_username: str = "payslips"
    db_password: str = "secret"

    pdf_engine: str = "pdfplumber"

    max_upload_bytes: int = 10 * 1024 * 1024
    period_fallback_to_current_month: bool = False
