from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, Field

PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"
CHARGE_SUCCEEDED = "charge.succeeded"

# Payload fields are read loosely: the event is already authentic, so a
# field of the wrong shape becomes None and is judged by the projector.


def _metadata(obj: Mapping[str, Any]) -> Dict[str, str]:
    metadata = obj.get("metadata") or {}
    if not isinstance(metadata, Mapping):
        return {}
    return {str(key): str(value) for key, value in metadata.items() if value is not None}


def _str_or_none(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def _object_id(value: Any) -> Optional[str]:
    # Expanded references arrive as the full object
    if isinstance(value, Mapping):
        return _str_or_none(value.get("id"))
    return _str_or_none(value)


def _int_or_none(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return None


class PaymentIntentSucceeded(BaseModel):
    id: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)
    amount: Optional[int] = None

    @classmethod
    def from_object(cls, obj: Mapping[str, Any]) -> "PaymentIntentSucceeded":
        return cls(
            id=_str_or_none(obj.get("id")),
            metadata=_metadata(obj),
            amount=_int_or_none(obj.get("amount")),
        )


class ChargeSucceeded(BaseModel):
    # Charges reference the PaymentIntent they settle
    payment_intent: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)
    amount: Optional[int] = None

    @classmethod
    def from_object(cls, obj: Mapping[str, Any]) -> "ChargeSucceeded":
        return cls(
            payment_intent=_object_id(obj.get("payment_intent")),
            metadata=_metadata(obj),
            amount=_int_or_none(obj.get("amount")),
        )


PaymentPayload = Union[PaymentIntentSucceeded, ChargeSucceeded]

PAYLOAD_TYPES = {
    PAYMENT_INTENT_SUCCEEDED: PaymentIntentSucceeded,
    CHARGE_SUCCEEDED: ChargeSucceeded,
}


class Event(BaseModel):
    id: Optional[str] = None
    type: str
    data: Optional[PaymentPayload] = None
    raw: Dict[str, Any] = Field(default_factory=dict)


class PaymentData(BaseModel):
    """Canonical view of a successful payment, whichever event carried it."""

    id: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)
    amount_minor_units: Optional[int] = None


def parse_event(envelope: Mapping[str, Any]) -> Event:
    """Build a typed Event from a decoded envelope.

    Payment payloads are parsed into their variant; every other type keeps
    only the raw ``data.object``.
    """
    if not isinstance(envelope, Mapping):
        raise ValueError("Event envelope is not a JSON object")

    event_type = _str_or_none(envelope.get("type"))
    if not event_type:
        raise ValueError("Event envelope has no type")

    data = envelope.get("data") or {}
    obj = data.get("object") if isinstance(data, Mapping) else None
    if not isinstance(obj, Mapping):
        obj = {}
    payload_cls = PAYLOAD_TYPES.get(event_type)

    return Event(
        id=_str_or_none(envelope.get("id")),
        type=event_type,
        data=payload_cls.from_object(obj) if payload_cls else None,
        raw=dict(obj),
    )


def to_payment_data(payload: PaymentPayload) -> PaymentData:
    if isinstance(payload, PaymentIntentSucceeded):
        return PaymentData(
            id=payload.id,
            metadata=payload.metadata,
            amount_minor_units=payload.amount,
        )
    if isinstance(payload, ChargeSucceeded):
        return PaymentData(
            id=payload.payment_intent,
            metadata=payload.metadata,
            amount_minor_units=payload.amount,
        )
    raise TypeError(f"Not a payment payload: {type(payload).__name__}")
