import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Numeric, DateTime

from order_webhook.database import Base


def _new_id():
    return uuid.uuid4().hex


def _utcnow():
    return datetime.now(timezone.utc)


class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=_new_id)
    user = Column(String, nullable=False)
    service = Column(String, nullable=True)
    plan = Column(String, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    description = Column(String)
    # Stripe PaymentIntent ID; not unique, redeliveries create new rows
    provider_payment_id = Column(String, index=True)
    payment_status = Column(String)                # succeeded
    status = Column(String)                        # completed
    plan_name = Column(String)
    service_name = Column(String)
    plan_description = Column(String)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class CustomPlan(Base):
    __tablename__ = "custom_plans"

    id = Column(String, primary_key=True)
    name = Column(String)
    payment_status = Column(String, default="pending")   # pending | paid
