import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from order_webhook.dispatcher import EventDispatcher
from order_webhook.errors import (
    ConfigurationError,
    MissingSignature,
    ProcessingError,
    VerificationError,
)
from order_webhook.stripe_service import StripeClient
from order_webhook.verifier import reencode_body

logger = logging.getLogger(__name__)


class AckPolicy(enum.Enum):
    """What to answer Stripe when a verified event fails to process.

    ACK_ONCE_VERIFIED answers 200 anyway: the event is authentic and a
    failing response would only make Stripe retry against a store that is
    already failing. The cost is that the order is lost unless someone acts
    on the log line. SURFACE_PROCESSING_ERRORS answers 500 and lets Stripe
    redeliver.
    """

    ACK_ONCE_VERIFIED = "ack_once_verified"
    SURFACE_PROCESSING_ERRORS = "surface_processing_errors"

    @classmethod
    def parse(cls, value: str) -> "AckPolicy":
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(f"Unknown ACK_POLICY: {value!r}")


@dataclass
class WebhookResponse:
    status_code: int
    body: Any
    media_type: str = "text/plain"


class WebhookService:
    def __init__(
        self,
        client: StripeClient,
        dispatcher: EventDispatcher,
        policy: AckPolicy = AckPolicy.ACK_ONCE_VERIFIED,
    ):
        self.client = client
        self.dispatcher = dispatcher
        self.policy = policy

    def handle(
        self,
        body: Union[bytes, str, Mapping[str, Any]],
        signature: Optional[str],
    ) -> WebhookResponse:
        """Verify, dispatch and build the response for one delivery.

        ``body`` should be the untouched request bytes; anything else goes
        through ``reencode_body`` first.
        """
        raw_body = b""
        try:
            raw_body = reencode_body(body)
            event = self.client.verify_webhook(raw_body, signature)
        except MissingSignature as exc:
            logger.error("%s in headers", exc)
            return WebhookResponse(400, str(exc))
        except ConfigurationError as exc:
            logger.error("STRIPE_WEBHOOK_SECRET is not set")
            return WebhookResponse(500, str(exc))
        except VerificationError as exc:
            logger.error("Webhook verification failed: %s (body length %d)", exc, len(raw_body))
            return WebhookResponse(400, f"Webhook Error: {exc}")

        try:
            self.dispatcher.dispatch(event)
        except ProcessingError:
            logger.exception("Failed to process event %s (%s)", event.id, event.type)
            if self.policy is AckPolicy.SURFACE_PROCESSING_ERRORS:
                return WebhookResponse(500, "Webhook processing error")

        return WebhookResponse(200, {"received": True}, "application/json")
