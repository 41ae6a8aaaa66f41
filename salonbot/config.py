import os
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import quote_plus

from dotenv import load_dotenv


ENV_FILE = os.getenv("ENV_FILE", ".env")
load_dotenv(dotenv_path=ENV_FILE)


@dataclass(frozen=True)
class Settings:
    BOT_TOKEN: str
    API_BASE: str = "https://your-site.com/api"
    API_TIMEOUT: float = 10.0
    DB_URL: str = "mysql+pymysql://root:@localhost:3306/crazy_salon"
    DB_HOST: str = "localhost"
    DB_CONNECT_TIMEOUT: int = 10
    ADMIN_IDS: Tuple[int, ...] = ()
    TIMEZONE: str = "Europe/Moscow"
    SESSION_TTL_MINUTES: int = 30
    LOG_DIR: str = "logs"
    WEBHOOK_URL: Optional[str] = None
    WEBHOOK_HOST: str = "0.0.0.0"
    PORT: int = 3000


def build_db_url() -> str:
    url = os.getenv("DB_URL")
    if url:
        return url
    user = quote_plus(os.getenv("DB_USER", "root"))
    pwd = quote_plus(os.getenv("DB_PASS", ""))
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "3306")
    name = os.getenv("DB_NAME", "crazy_salon")
    return f"mysql+pymysql://{user}:{pwd}@{host}:{port}/{name}"


def parse_ids(raw: str) -> Tuple[int, ...]:
    return tuple(int(x) for x in raw.split(",") if x.strip().lstrip("-").isdigit())


def load_settings() -> Settings:
    token = os.getenv("TG_BOT_TOKEN")
    if not token:
        raise RuntimeError(
            f"TG_BOT_TOKEN не установлен. Проверьте файл {ENV_FILE} и задайте токен."
        )
    return Settings(
        BOT_TOKEN=token,
        API_BASE=os.getenv("API_BASE", "https://your-site.com/api").rstrip("/"),
        API_TIMEOUT=float(os.getenv("API_TIMEOUT", "10")),
        DB_URL=build_db_url(),
        DB_HOST=os.getenv("DB_HOST", "localhost"),
        DB_CONNECT_TIMEOUT=int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
        ADMIN_IDS=parse_ids(os.getenv("TG_ADMIN_IDS", "")),
        TIMEZONE=os.getenv("TIMEZONE", "Europe/Moscow"),
        SESSION_TTL_MINUTES=int(os.getenv("SESSION_TTL_MINUTES", "30")),
        LOG_DIR=os.getenv("LOG_DIR", "logs"),
        WEBHOOK_URL=os.getenv("WEBHOOK_URL") or None,
        WEBHOOK_HOST=os.getenv("WEBHOOK_HOST", "0.0.0.0"),
        PORT=int(os.getenv("PORT", "3000")),
    )


settings = load_settings()
