from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # OpenAI
    OPENAI_API_KEY: str | None = None
    MODEL_NAME: str = "gpt-3.5-turbo"
    OPENAI_TIMEOUT: float = 30.0

    # HubSpot
    HUBSPOT_API_KEY: str | None = None
    HUBSPOT_BASE_URL: str = "https://api.hubapi.com"
    HUBSPOT_TIMEOUT: float = 20.0
    RESUME_FOLDER_PATH: str = "/resumes"
    RESUME_MAX_BYTES: int = 5 * 1024 * 1024

    # Keyword chat
    KEYWORD_REPLY_DELAY: float = 1.0

    # HTTP
    ALLOWED_ORIGINS: str = "*"
    API_PREFIX: str = ""
    LOG_LEVEL: str = "INFO"


def get_allowed_origins_list(origins: str) -> List[str]:
    return [o.strip() for o in origins.split(",") if o.strip()]
