import logging
from typing import Any, Callable, Dict

from order_webhook.events import CHARGE_SUCCEEDED, PAYMENT_INTENT_SUCCEEDED, Event

logger = logging.getLogger(__name__)

Handler = Callable[[Event], Any]


class EventDispatcher:
    def __init__(self):
        self.handlers: Dict[str, Handler] = {}

    def register(self, event_type: str, handler: Handler) -> None:
        self.handlers[event_type] = handler

    def dispatch(self, event: Event) -> bool:
        """Run the handler for the event's type.

        Stripe sends many event types we have no use for; those are
        accepted and return False.
        """
        handler = self.handlers.get(event.type)
        if handler is None:
            logger.info("Ignoring unhandled event type %s", event.type)
            return False

        handler(event)
        return True


def build_dispatcher(projector) -> EventDispatcher:
    dispatcher = EventDispatcher()
    # A single payment can arrive as both events
    dispatcher.register(PAYMENT_INTENT_SUCCEEDED, projector.project)
    dispatcher.register(CHARGE_SUCCEEDED, projector.project)
    return dispatcher
