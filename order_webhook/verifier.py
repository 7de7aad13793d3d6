import json
import logging
from typing import Any, Mapping, Optional, Union

import stripe

from order_webhook.errors import (
    InvalidPayload,
    InvalidSignature,
    MisconfiguredSecret,
    MissingSignature,
)
from order_webhook.events import Event, parse_event

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = stripe.Webhook.DEFAULT_TOLERANCE


def reencode_body(body: Union[bytes, str, Mapping[str, Any]]) -> bytes:
    """Turn whatever an upstream layer handed us back into bytes.

    Only a fallback: a signature covers the exact bytes Stripe sent, and a
    re-serialized mapping will usually differ in key order, whitespace or
    number formatting, so verification of it is expected to fail.
    """
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, Mapping):
        logger.warning("Body was already parsed as JSON, re-encoding it for verification")
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    raise InvalidPayload(f"Unexpected body type: {type(body).__name__}")


def verify(
    raw_body: bytes,
    signature_header: Optional[str],
    secret: Optional[str],
    tolerance: int = DEFAULT_TOLERANCE,
) -> Event:
    if not signature_header:
        raise MissingSignature("No Stripe signature found")
    if not secret:
        raise MisconfiguredSecret("Webhook secret not configured")

    try:
        payload = raw_body.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise InvalidPayload(f"Invalid payload: {exc}") from exc

    try:
        stripe.WebhookSignature.verify_header(payload, signature_header, secret, tolerance)
    except stripe.SignatureVerificationError as exc:
        raise InvalidSignature(str(exc)) from exc

    try:
        event = parse_event(json.loads(payload))
    except ValueError as exc:
        raise InvalidPayload(f"Invalid payload: {exc}") from exc

    logger.info("Webhook signature verified for event %s (%s)", event.id, event.type)
    return event
