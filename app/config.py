import json
import logging
import pathlib
from typing import Annotated

import pydantic
import pydantic_settings

from app.feedback import policy as feedback_policy

logger = logging.getLogger(__name__)


class TelegramConfig(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_file=".env", extra="ignore")
    bot_token: str | None = pydantic.Field(default=None, alias="TELEGRAM_BOT_TOKEN")
    chat_id: str | None = pydantic.Field(default=None, alias="TELEGRAM_CHAT_ID")
    api_url: str = pydantic.Field(
        default="https://api.telegram.org", alias="TELEGRAM_API_URL"
    )
    timeout: int = pydantic.Field(default=30, alias="TELEGRAM_TIMEOUT")


class StorageConfig(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_file=".env", extra="ignore")
    data_dir: pathlib.Path = pydantic.Field(
        default=pathlib.Path("data"), alias="DATA_DIR"
    )
    feedback_store_filename: str = pydantic.Field(
        default="feedback-map.json", alias="FEEDBACK_STORE_FILENAME"
    )
    bonus_store_filename: str = pydantic.Field(
        default="bonus-store.json", alias="BONUS_STORE_FILENAME"
    )

    @property
    def feedback_store_path(self) -> pathlib.Path:
        return self.data_dir / self.feedback_store_filename

    @property
    def bonus_store_path(self) -> pathlib.Path:
        return self.data_dir / self.bonus_store_filename


class PolicyConfig(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_file=".env", extra="ignore")
    urgent_keywords: Annotated[list[str], pydantic_settings.NoDecode] = pydantic.Field(
        default_factory=lambda: list(feedback_policy.DEFAULT_URGENT_KEYWORDS),
        alias="URGENT_KEYWORDS",
    )
    department_tag_charset: str = pydantic.Field(
        default=feedback_policy.DEFAULT_DEPARTMENT_TAG_CHARSET,
        alias="DEPARTMENT_TAG_CHARSET",
    )

    @pydantic.field_validator("urgent_keywords", mode="before")
    @classmethod
    def parse_keywords(cls, v):
        if isinstance(v, str):
            if v.strip().startswith("["):
                v = json.loads(v)
            else:
                v = v.split(",")

        keywords = [str(word).strip().lower() for word in v]
        return [word for word in keywords if word]


class AppConfig(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_file=".env", extra="ignore")
    python_env: str = "production"
    host: str | None = None
    port: int = pydantic.Field(default=3001)
    log_config: str | None = "logging.json"
    http_proxy: str | None = None
    tracing_header: str = "x-request-id"
    cors_origins: Annotated[list[str], pydantic_settings.NoDecode] = pydantic.Field(
        default_factory=list
    )

    telegram: TelegramConfig = pydantic.Field(default_factory=TelegramConfig)
    storage: StorageConfig = pydantic.Field(default_factory=StorageConfig)
    policy: PolicyConfig = pydantic.Field(default_factory=PolicyConfig)

    @pydantic.field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]

        return v


config: AppConfig | None = None


def get_config() -> AppConfig:
    global config
    if config is None:
        try:
            config = AppConfig()
        except pydantic.ValidationError as e:
            error_details = [
                {
                    "field": ".".join(str(loc) for loc in error["loc"]),
                    "type": error["type"],
                    "message": error["msg"],
                    "url": error.get("url"),
                }
                for error in e.errors()
            ]

            logger.error("Config validation failed with errors: %s", error_details)

            msg = "Invalid application configuration"
            raise RuntimeError(msg) from None

    return config
