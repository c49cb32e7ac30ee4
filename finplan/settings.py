import logging
import secrets

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_INSECURE_DEFAULT_KEY = "change-me-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="FINPLAN_", extra="ignore")

    db_url: str = "sqlite:///finplan.db"

    timezone: str = "America/Sao_Paulo"

    ai_api_key: str = ""
    ai_base_url: str = "https://openrouter.ai/api/v1"
    ai_model: str = "mistralai/mistral-7b-instruct"
    ai_timeout: float = 30.0
    app_url: str = "http://localhost:8000"
    app_name: str = "finplan"

    log_level: str = "INFO"
    log_json: bool = False

    secret_key: str = _INSECURE_DEFAULT_KEY

    def get_secret_key(self) -> str:
        if self.secret_key == _INSECURE_DEFAULT_KEY:
            logger.warning(
                "FINPLAN_SECRET_KEY is not set, using a random key. "
                "Sessions will not survive restarts. "
                "Set FINPLAN_SECRET_KEY in your environment or .env file."
            )
            self.secret_key = secrets.token_urlsafe(32)
        return self.secret_key


settings = Settings()
