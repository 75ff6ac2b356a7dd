from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvConfig(BaseSettings):
    """Settings read from the environment (or `.env`)."""
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    APP_NAME: str = 'News Admin API'
    APP_HOST: str = '0.0.0.0'
    APP_PORT: int = 3001
    DEBUG: bool = False
    LOG_LEVEL: str = 'INFO'

    NEWS_STORE_PATH: Path = Path('src/config/newsConfig.ts')
    NEWS_ASSETS_DIR: Path = Path('src/assets/news')
    NEWS_ASSETS_URL_PREFIX: str = '/src/assets/news'

    MAX_UPLOAD_SIZE: int = 5 * 1024 * 1024
    MAX_MEDIA_FILES: int = 20
    STRICT_STORE_PARSING: bool = False


class AppConfig:
    """Static application settings."""

    CORS_ORIGINS: list[str] = [
        'http://localhost:3000',
        'https://vermillion-phoenix-d0dfc1.netlify.app',
        'https://gym-school-backend-production.up.railway.app',
    ]


env_config = EnvConfig()
app_config = AppConfig()
