import logging
from decimal import Decimal, InvalidOperation

from order_webhook.errors import MalformedPaymentData
from order_webhook.events import Event, PaymentData, to_payment_data
from order_webhook.models import Order
from order_webhook.store import OrderStore

logger = logging.getLogger(__name__)


def resolve_price(payment: PaymentData) -> Decimal:
    """Price from metadata.amount, else the provider amount in minor units."""
    amount = payment.metadata.get("amount")
    if amount:
        try:
            price = Decimal(amount)
        except InvalidOperation:
            raise MalformedPaymentData(f"Invalid metadata amount: {amount!r}")
        if not price.is_finite():
            raise MalformedPaymentData(f"Invalid metadata amount: {amount!r}")
        return price

    if payment.amount_minor_units is None:
        raise MalformedPaymentData(f"Payment {payment.id} carries no amount")
    return Decimal(payment.amount_minor_units) / 100


class PaymentSuccessProjector:
    """Turns a successful payment event into an Order."""

    def __init__(self, store: OrderStore):
        self.store = store

    def project(self, event: Event) -> Order:
        payment = to_payment_data(event.data)
        logger.info("Payment succeeded: %s", payment.id)

        metadata = payment.metadata
        plan_name = metadata.get("planName")
        service_name = metadata.get("serviceName")
        custom_plan_id = metadata.get("customPlanId")

        order = self.store.create_order(
            user=metadata.get("userId"),
            service=metadata.get("serviceId") or None,
            plan=metadata.get("planId") or None,
            price=resolve_price(payment),
            description=f"Payment for {plan_name} under {service_name}",
            provider_payment_id=payment.id,
            payment_status="succeeded",
            status="completed",
            plan_name=plan_name,
            service_name=service_name,
            plan_description=metadata.get("planDescription"),
        )
        logger.info("Order %s created for payment %s", order.id, payment.id)

        # The order is already committed; a failed plan update leaves it in place.
        if custom_plan_id:
            if self.store.mark_custom_plan_paid(custom_plan_id):
                logger.info("CustomPlan %s paymentStatus updated to paid", custom_plan_id)

        return order
