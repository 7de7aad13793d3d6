from typing import Optional

from order_webhook.config import Settings
from order_webhook.events import Event
from order_webhook.verifier import DEFAULT_TOLERANCE, verify


class StripeClient:
    """Webhook signing credentials for one deployment.

    Built once by the app factory and handed to the webhook service, so
    nothing below it reads the environment.
    """

    def __init__(
        self,
        *,
        webhook_secret: Optional[str],
        tolerance: int = DEFAULT_TOLERANCE,
    ) -> None:
        self.webhook_secret = webhook_secret
        self.tolerance = tolerance

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripeClient":
        return cls(
            webhook_secret=settings.stripe_webhook_secret,
            tolerance=settings.stripe_webhook_tolerance,
        )

    def verify_webhook(self, payload: bytes, signature: Optional[str]) -> Event:
        return verify(
            payload,
            signature,
            self.webhook_secret,
            tolerance=self.tolerance,
        )
