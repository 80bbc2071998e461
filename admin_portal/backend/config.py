from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

class AdminSettings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 8000
    allowed_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(env_prefix="HORDE_ADMIN_", env_file=".env", extra="ignore")

settings = AdminSettings()
