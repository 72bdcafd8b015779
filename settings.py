from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    DATABASE_URL: str = Field(default="mongodb://localhost:27017")
    DATABASE_NAME: str = Field(default="ecommerce")

    SECRET_KEY: str = Field(default="secret-key-change-me")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60 * 12)
    BCRYPT_ROUNDS: int = Field(default=10, ge=4, le=31)

    # Default administrator seeded on startup. The password is documented, not secret.
    ADMIN_NAME: str = Field(default="Admin")
    ADMIN_EMAIL: str = Field(default="admin@admin.com")
    ADMIN_PASSWORD: str = Field(default="admin123")

    ENFORCE_ADMIN_AUTH: bool = Field(default=False)
    STRICT_ORDER_STATUS: bool = Field(default=False)

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])
    PORT: int = Field(default=8000)
    LOG_LEVEL: str = Field(default="INFO")


settings = Settings()
