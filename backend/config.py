# backend/config.py
from pydantic_settings import BaseSettings
from typing import ClassVar
from pathlib import Path

# Resolve absolute path to the .env file for reliable loading
env_path = Path(__file__).parent.parent / ".env"

class Settings(BaseSettings):
    # Master spreadsheet holding the "Clients" tab
    MASTER_SHEET_ID: str = ""
    # Spreadsheet used when no tenant can be resolved for a request
    GOOGLE_SHEET_ID: str = ""

    # Service account used for the Sheets API
    GOOGLE_CLIENT_EMAIL: str = ""
    GOOGLE_PRIVATE_KEY: str = ""
    SHEETS_API_URL: str = "https://sheets.googleapis.com/v4/spreadsheets"
    SHEETS_TIMEOUT: float = 30.0

    # Outgoing mail (Gmail app password by default)
    EMAIL_USER: str = ""
    EMAIL_APP_PASSWORD: str = ""
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USE_TLS: bool = True
    HELP_EMAIL: str = "clienthelp.bgc@gmail.com"

    SECRET_KEY: str = "dev-secret-change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ADMIN_USERNAME: str = "Admin"
    ADMIN_PASSWORD: str = "admin@123"

    # Daily notification clock
    ENABLE_SCHEDULER: bool = False
    SCHEDULER_INTERVAL_SECONDS: int = 60
    SCHEDULER_TRIGGER_HOUR: int = 18
    SCHEDULER_TRIGGER_WINDOW_MINUTES: int = 5
    SCHEDULER_UTC_OFFSET_MINUTES: int = 330

    FRONTEND_URL: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file: ClassVar[str] = str(env_path)
        extra = "ignore"

    @property
    def private_key(self) -> str:
        # Keys pasted into .env usually carry literal "\n" sequences
        return self.GOOGLE_PRIVATE_KEY.replace("\\n", "\n")

settings = Settings()
