from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    jwt_secret: str = "dev"
    jwt_alg: str = "HS256"
    access_ttl_min: int = 120
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "foodrescue"
    use_mongo: bool = False

    # comma-separated, matched case-insensitively
    admin_emails: str = ""
    slack_webhook_url: Optional[str] = None
    webhook_timeout_s: float = 10.0

    log_level: str = "INFO"
    cors_origins: str = "*"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def admin_email_list(self) -> List[str]:
        return [e.strip().lower() for e in self.admin_emails.split(",") if e.strip()]

    def is_admin_email(self, email: Optional[str]) -> bool:
        return (email or "").strip().lower() in self.admin_email_list


settings = Settings()


def get_settings() -> Settings:
    return settings
