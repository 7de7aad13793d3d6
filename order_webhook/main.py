import logging
from typing import Optional

from fastapi import FastAPI

from order_webhook.config import Settings, load_settings
from order_webhook.database import Base, make_engine, make_session_factory
from order_webhook.dispatcher import build_dispatcher
from order_webhook.projector import PaymentSuccessProjector
from order_webhook.routes import router, stripe_webhook
from order_webhook.service import AckPolicy, WebhookService
from order_webhook.store import OrderStore
from order_webhook.stripe_service import StripeClient


def build_service(settings: Settings) -> WebhookService:
    engine = make_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    store = OrderStore(make_session_factory(engine))
    return WebhookService(
        StripeClient.from_settings(settings),
        build_dispatcher(PaymentSuccessProjector(store)),
        AckPolicy.parse(settings.ack_policy),
    )


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[WebhookService] = None,
) -> FastAPI:
    """Build the app; serve it with ``uvicorn order_webhook.main:create_app --factory``.

    Settings are read from the environment only when none are passed.
    """
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Order Webhook Service")
    app.state.webhook_service = service or build_service(settings)

    app.include_router(router)
    app.add_api_route(settings.webhook_path, stripe_webhook, methods=["POST"])
    return app

