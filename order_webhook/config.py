import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"

DEFAULT_DATABASE_URL = "sqlite:///./orders.db"
DEFAULT_TOLERANCE = 300


@dataclass(frozen=True)
class Settings:
    stripe_webhook_secret: Optional[str]
    stripe_webhook_tolerance: int = DEFAULT_TOLERANCE
    database_url: str = DEFAULT_DATABASE_URL
    webhook_path: str = "/webhook"
    ack_policy: str = "ack_once_verified"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Read settings from the project's .env file and the process environment.

    Variables already present in the environment win over .env entries.
    """
    load_dotenv(dotenv_path=ENV_PATH)

    return Settings(
        stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET") or None,
        stripe_webhook_tolerance=int(
            os.getenv("STRIPE_WEBHOOK_TOLERANCE", DEFAULT_TOLERANCE)
        ),
        database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
        webhook_path=os.getenv("WEBHOOK_PATH", "/webhook"),
        ack_policy=os.getenv("ACK_POLICY", "ack_once_verified").strip().lower(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
