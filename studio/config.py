import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH = PROJECT_ROOT / "config.yaml"


# Загрузка YAML-файла настроек
def load_yaml_config(file_path: str) -> dict:
    with open(file_path, "r", encoding="utf-8") as file:
        return yaml.safe_load(file) or {}


class AuthConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STUDIO_AUTH_")

    secret_key: str
    token_expire_minutes: int = 60 * 24 * 7  # 7 дней
    cookie_name: str = "auth-token"


class BillingConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STUDIO_BILLING_")

    overdue_threshold: int = 7


class LoggingConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STUDIO_LOG_")

    level: str = "INFO"
    directory: Optional[str] = None
    file_prefix: str = "art_studio"


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STUDIO_")

    database: dict
    auth: AuthConfig
    billing: BillingConfig = BillingConfig()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def from_yaml(cls, file_path: str):
        config_data = load_yaml_config(file_path)

        # Вложенные секции превращаем в отдельные модели настроек
        for key, section_cls in (("auth", AuthConfig), ("billing", BillingConfig), ("logging", LoggingConfig)):
            section = config_data.get(key)
            if section is not None:
                config_data[key] = section_cls(**section)

        return cls(**config_data)


def get_config_path() -> str:
    """Путь к файлу настроек: переменная окружения STUDIO_CONFIG или config.yaml в корне проекта."""
    return os.environ.get("STUDIO_CONFIG", str(DEFAULT_CONFIG_PATH))


# Загрузка настроек при импорте
config = AppConfig.from_yaml(get_config_path())
