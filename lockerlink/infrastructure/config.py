from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LOCKERLINK_")

    database_url: str = "sqlite+pysqlite:///:memory:"
    openapi_path : Path = Path(__file__).resolve().parents[1] / "openapi/openapi.yaml"
    log_level: str = "INFO"

    # Required as X-Admin-Token on the admin routes when set
    admin_token: str = ""

    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = ""
    smtp_starttls: bool = True

    connection_test_timeout: float = 15.0


settings = Settings()
