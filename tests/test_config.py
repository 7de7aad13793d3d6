from order_webhook.config import DEFAULT_DATABASE_URL, load_settings
from order_webhook.stripe_service import StripeClient

ENV_VARS = [
    "STRIPE_WEBHOOK_SECRET",
    "STRIPE_WEBHOOK_TOLERANCE",
    "DATABASE_URL",
    "WEBHOOK_PATH",
    "ACK_POLICY",
    "LOG_LEVEL",
]


def clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch, mocker):
    clear_env(monkeypatch)
    mocker.patch("order_webhook.config.load_dotenv")

    settings = load_settings()

    assert settings.stripe_webhook_secret is None
    assert settings.stripe_webhook_tolerance == 300
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.webhook_path == "/webhook"
    assert settings.ack_policy == "ack_once_verified"
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch, mocker):
    clear_env(monkeypatch)
    mocker.patch("order_webhook.config.load_dotenv")
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_1")
    monkeypatch.setenv("STRIPE_WEBHOOK_TOLERANCE", "60")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./other.db")
    monkeypatch.setenv("WEBHOOK_PATH", "/stripe/webhook")
    monkeypatch.setenv("ACK_POLICY", " Surface_Processing_Errors ")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.stripe_webhook_tolerance == 60
    assert settings.database_url == "sqlite:///./other.db"
    assert settings.webhook_path == "/stripe/webhook"
    assert settings.ack_policy == "surface_processing_errors"
    assert settings.log_level == "DEBUG"

    client = StripeClient.from_settings(settings)
    assert vars(client) == {"webhook_secret": "whsec_1", "tolerance": 60}


def test_empty_secret_counts_as_missing(monkeypatch, mocker):
    clear_env(monkeypatch)
    mocker.patch("order_webhook.config.load_dotenv")
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "")

    assert load_settings().stripe_webhook_secret is None
